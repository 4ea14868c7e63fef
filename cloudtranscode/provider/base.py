"""
Provider contract shared by every vendor adapter.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable

from ..config import CloudTranscodeConfig
from ..models import Capabilities, Job, JobStatus, Preset


class Provider(ABC):
    """
    A cloud encoding vendor behind the canonical job lifecycle.

    Implementations hold nothing but a vendor HTTP client and immutable
    configuration, so one instance can be shared across callers. Every
    status is re-queried from the vendor; nothing is cached locally.
    """

    name: str = ""

    @abstractmethod
    def create_preset(self, preset: Preset) -> str:
        """Create the vendor resources for a preset and return the vendor preset ID.

        Not idempotent: each call creates new vendor resources.
        """

    @abstractmethod
    def delete_preset(self, preset_id: str) -> None:
        """Delete a vendor preset along with any linked sub-resources."""

    @abstractmethod
    def get_preset(self, preset_id: str) -> Any:
        """Return the vendor's combined view of a preset."""

    @abstractmethod
    def transcode(self, job: Job) -> JobStatus:
        """Submit a job. Returns a QUEUED status carrying the provider job ID."""

    @abstractmethod
    def job_status(self, job: Job) -> JobStatus:
        """Query the vendor and return the job's canonical status."""

    @abstractmethod
    def cancel_job(self, provider_job_id: str) -> None:
        """Stop a running job."""

    @abstractmethod
    def healthcheck(self) -> None:
        """Raise if the vendor cannot be reached or reports an error."""

    @abstractmethod
    def capabilities(self) -> Capabilities:
        """Return the vendor's static capabilities."""

    def close(self) -> None:
        """Release any held connections."""

    def __enter__(self) -> "Provider":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


ProviderFactory = Callable[[CloudTranscodeConfig], Provider]
