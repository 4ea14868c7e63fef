"""
CloudTranscode Client - one entry point over every registered provider

Usage:
    from cloudtranscode.client import CloudTranscodeClient
    from cloudtranscode.config import load_config

    with CloudTranscodeClient(load_config()) as client:
        status = client.transcode(job)
        job = job.model_copy(update={"provider_job_id": status.provider_job_id})
        final = client.wait_for_completion(job)
"""

import logging
import time
from typing import Callable, Dict, Optional

from .config import CloudTranscodeConfig
from .models import Job, JobStatus, Preset, ProviderDescription, Status
from .provider import Provider, ProviderRegistry, default_registry

logger = logging.getLogger(__name__)

TERMINAL_STATUSES = (Status.FINISHED, Status.FAILED)


class CloudTranscodeClient:
    """
    Resolves providers by name and forwards job lifecycle calls to them.

    Providers are built lazily on first use and kept for the client's
    lifetime; they hold no per-job state.
    """

    def __init__(
        self,
        config: CloudTranscodeConfig,
        registry: Optional[ProviderRegistry] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize the client.

        Args:
            config: Service configuration handed to provider factories
            registry: Provider registry; defaults to every bundled provider
            sleep: Sleep function used between status polls
        """
        self.config = config
        self.registry = registry or default_registry()
        self._sleep = sleep
        self._providers: Dict[str, Provider] = {}

    def provider(self, name: str) -> Provider:
        """Get (building on first use) the provider registered under ``name``."""
        provider = self._providers.get(name)
        if provider is None:
            provider = self.registry.get(name, self.config)
            self._providers[name] = provider
        return provider

    def describe(self, name: str) -> ProviderDescription:
        return self.registry.describe(name, self.config)

    def create_preset(self, provider_name: str, preset: Preset) -> str:
        """Create a preset on one provider and return its vendor preset ID."""
        return self.provider(provider_name).create_preset(preset)

    def delete_preset(self, provider_name: str, preset_id: str) -> None:
        self.provider(provider_name).delete_preset(preset_id)

    def transcode(self, job: Job) -> JobStatus:
        """Submit a job to the provider named on the job."""
        status = self.provider(job.provider_name).transcode(job)
        logger.info(f"Job {job.id} submitted to {job.provider_name} as {status.provider_job_id}")
        return status

    def job_status(self, job: Job) -> JobStatus:
        return self.provider(job.provider_name).job_status(job)

    def cancel_job(self, job: Job) -> None:
        self.provider(job.provider_name).cancel_job(job.provider_job_id)

    def wait_for_completion(
        self,
        job: Job,
        timeout: float = 3600,
        poll_interval: float = 10.0,
    ) -> Optional[JobStatus]:
        """
        Poll a job until it finishes or fails.

        Each poll drives the provider's status machine, so for packaged
        outputs this is also what gets the manifest started.

        Returns:
            The terminal JobStatus, or None on timeout
        """
        elapsed = 0.0
        while elapsed < timeout:
            status = self.job_status(job)

            if status.status in TERMINAL_STATUSES:
                if status.status == Status.FAILED:
                    logger.error(f"Job {job.id} failed: {status.message}")
                return status

            self._sleep(poll_interval)
            elapsed += poll_interval

        logger.error(f"Timeout waiting for job {job.id}")
        return None

    def close(self) -> None:
        for provider in self._providers.values():
            provider.close()
        self._providers.clear()

    def __enter__(self) -> "CloudTranscodeClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
