"""
Bitmovin provider adapter.
"""

import logging
from typing import Optional

from ...config import BitmovinConfig, CloudTranscodeConfig
from ...errors import InvalidProviderConfigError
from ...models import Capabilities, Job, JobStatus, Preset
from ..base import Provider
from .client import BitmovinClient
from .models import BitmovinPreset
from .pipeline import SubmissionPipeline, parse_destination
from .presets import BitmovinPresetTranslator
from .status import StatusNormalizer

logger = logging.getLogger(__name__)

NAME = "bitmovin"


class BitmovinProvider(Provider):
    """Runs canonical jobs on Bitmovin."""

    name = NAME

    def __init__(self, config: BitmovinConfig, client: Optional[BitmovinClient] = None):
        """
        Initialize the provider.

        Args:
            config: Bitmovin section of the service configuration
            client: Optional pre-built API client; built from config when omitted
        """
        self.config = config
        # Destination is validated before any HTTP client is built
        destination = parse_destination(config.destination)
        self.client = client or BitmovinClient(
            api_key=config.api_key,
            endpoint=config.endpoint,
            timeout=config.timeout,
        )
        self.presets = BitmovinPresetTranslator(self.client)
        self.pipeline = SubmissionPipeline(self.client, config, NAME, destination)
        self.normalizer = StatusNormalizer(
            self.client, NAME, auto_start_manifest=config.auto_start_manifest
        )

    def create_preset(self, preset: Preset) -> str:
        return self.presets.create(preset)

    def delete_preset(self, preset_id: str) -> None:
        self.presets.delete(preset_id)

    def get_preset(self, preset_id: str) -> BitmovinPreset:
        return self.presets.get(preset_id)

    def transcode(self, job: Job) -> JobStatus:
        return self.pipeline.run(job)

    def job_status(self, job: Job) -> JobStatus:
        return self.normalizer.job_status(job.provider_job_id)

    def cancel_job(self, provider_job_id: str) -> None:
        # The manifest, if any, never starts once the encoding is stopped
        self.client.stop_encoding(provider_job_id)
        logger.info(f"[Bitmovin] Stopped encoding {provider_job_id}")

    def healthcheck(self) -> None:
        self.client.list_encodings()

    def capabilities(self) -> Capabilities:
        return Capabilities(
            input_formats=["prores", "h264"],
            output_formats=["mp4", "hls"],
            destinations=["s3"],
        )

    def close(self) -> None:
        self.client.close()


def bitmovin_factory(config: CloudTranscodeConfig) -> BitmovinProvider:
    """Build a BitmovinProvider from the service configuration."""
    bitmovin = config.bitmovin
    if bitmovin is None:
        raise InvalidProviderConfigError(NAME, "missing bitmovin section")
    if not bitmovin.api_key:
        raise InvalidProviderConfigError(NAME, "api_key is required")
    if not bitmovin.destination:
        raise InvalidProviderConfigError(NAME, "destination is required")
    return BitmovinProvider(bitmovin)
