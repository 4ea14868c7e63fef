"""
Job status normalization for Bitmovin.

A Bitmovin job is two resources with independent lifecycles: the encoding,
and (for HLS outputs) a manifest that can only run once the encoding has
finished. Nothing starts the manifest on its own, so the status poll does:
seeing a finished encoding with a CREATED manifest starts the manifest.

    encoding   manifest    canonical
    --------   --------    ---------
    CREATED    -           queued
    RUNNING    -           started
    ERROR      -           failed
    CANCELED   -           failed    ("canceled")
    FINISHED   (none)      finished
    FINISHED   CREATED     started   (+ manifest start)
    FINISHED   RUNNING     started
    FINISHED   FINISHED    finished
    FINISHED   ERROR       failed
    FINISHED   CANCELED    failed    ("canceled")

A state missing from the table is a vendor answer this adapter does not
understand and raises VendorAPIError.
"""

import logging
from typing import Dict, Optional, Tuple

from ...errors import TransportError, VendorAPIError
from ...models import JobStatus, Status
from .client import BitmovinClient
from .links import EncodingLinks

logger = logging.getLogger(__name__)

ENCODING_STATUS_MAP: Dict[str, Status] = {
    "CREATED": Status.QUEUED,
    "QUEUED": Status.QUEUED,
    "RUNNING": Status.STARTED,
    "ERROR": Status.FAILED,
    "TRANSFER_ERROR": Status.FAILED,
    "CANCELED": Status.FAILED,
}

MANIFEST_STATUS_MAP: Dict[str, Status] = {
    "CREATED": Status.STARTED,
    "QUEUED": Status.STARTED,
    "RUNNING": Status.STARTED,
    "FINISHED": Status.FINISHED,
    "ERROR": Status.FAILED,
    "CANCELED": Status.FAILED,
}

# Failed states that carry no vendor message of their own
STATUS_MESSAGES: Dict[str, str] = {
    "CANCELED": "canceled",
    "TRANSFER_ERROR": "output transfer failed",
}


class StatusNormalizer:
    """Pull-based reconciliation of encoding and manifest state."""

    def __init__(self, client: BitmovinClient, provider_name: str, auto_start_manifest: bool = True):
        self.client = client
        self.provider_name = provider_name
        self.auto_start_manifest = auto_start_manifest

    def _status(self, provider_job_id: str, status: Status, message: Optional[str] = None) -> JobStatus:
        return JobStatus(
            provider_name=self.provider_name,
            provider_job_id=provider_job_id,
            status=status,
            message=message,
        )

    def job_status(self, provider_job_id: str) -> JobStatus:
        """
        Query the vendor and return the canonical status of a job.

        An ERROR envelope on the encoding status query means the vendor
        considers the job failed and is reported as FAILED. Transport
        failures anywhere, ERROR envelopes on the later queries and states
        missing from the table raise.
        """
        try:
            result = self.client.encoding_status(provider_job_id)
        except VendorAPIError as e:
            logger.info(f"[Bitmovin] Encoding {provider_job_id} status query reported an error: {e.message}")
            return self._status(provider_job_id, Status.FAILED, e.message or None)

        state = result.status.upper()
        if state == "FINISHED":
            status, message = self._packaging_status(provider_job_id)
            return self._status(provider_job_id, status, message)

        status = ENCODING_STATUS_MAP.get(state)
        if status is None:
            raise VendorAPIError(
                "GET", f"/encoding/encodings/{provider_job_id}/status",
                f"unknown encoding status {result.status!r}",
            )
        return self._status(provider_job_id, status, STATUS_MESSAGES.get(state))

    def _packaging_status(self, encoding_id: str) -> Tuple[Status, Optional[str]]:
        links = EncodingLinks.from_custom_data(self.client.encoding_custom_data(encoding_id))
        if links.manifest_id is None:
            return Status.FINISHED, None

        result = self.client.manifest_status(links.manifest_id)
        state = result.status.upper()

        status = MANIFEST_STATUS_MAP.get(state)
        if status is None:
            raise VendorAPIError(
                "GET", f"/encoding/manifests/hls/{links.manifest_id}/status",
                f"unknown manifest status {result.status!r}",
            )

        if state == "CREATED":
            self.start_manifest(links.manifest_id)
        return status, STATUS_MESSAGES.get(state)

    def start_manifest(self, manifest_id: str) -> bool:
        """
        Start a CREATED manifest. Returns whether the start call was issued
        and accepted.

        A failed start is logged and otherwise ignored: the manifest stays
        CREATED and the next poll tries again.
        """
        if not self.auto_start_manifest:
            logger.debug(f"[Bitmovin] Manifest {manifest_id} is waiting; auto-start disabled")
            return False

        try:
            self.client.start_manifest(manifest_id)
        except (TransportError, VendorAPIError) as e:
            logger.warning(f"[Bitmovin] Failed to start manifest {manifest_id}: {e}")
            return False

        logger.info(f"[Bitmovin] Started manifest {manifest_id}")
        return True
