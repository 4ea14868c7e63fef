"""
Error types for CloudTranscode.

All errors inherit from CloudTranscodeError for easy catching.
Transport failures and vendor-reported failures are kept apart so callers
can tell "could not reach the vendor" from "the vendor said no".
"""

from typing import List, Optional


class CloudTranscodeError(Exception):
    """Base exception for all CloudTranscode failures."""
    pass


class TransportError(CloudTranscodeError):
    """Raised when a vendor call fails below the API envelope.

    Covers connection errors, timeouts, non-2xx responses and response
    bodies that do not parse into the expected envelope.
    """

    def __init__(self, method: str, path: str, reason: str, status_code: Optional[int] = None):
        self.method = method
        self.path = path
        self.reason = reason
        self.status_code = status_code
        detail = f" (HTTP {status_code})" if status_code is not None else ""
        super().__init__(f"{method} {path} failed{detail}: {reason}")


class VendorAPIError(CloudTranscodeError):
    """Raised when the vendor envelope explicitly reports ERROR."""

    def __init__(self, method: str, path: str, message: str = "", code: Optional[int] = None):
        self.method = method
        self.path = path
        self.message = message
        self.code = code
        super().__init__(f"{method} {path} returned ERROR: {message or 'no message'}")


class NotFoundError(CloudTranscodeError):
    """Raised when a named provider or resource does not exist."""
    pass


class ProviderNotFoundError(NotFoundError):
    """Raised when the registry has no factory for a provider name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"provider not found: {name}")


class PresetMapNotFoundError(NotFoundError):
    """Raised when a preset map has no entry for the target provider."""

    def __init__(self, preset_name: str, provider_name: str):
        self.preset_name = preset_name
        self.provider_name = provider_name
        super().__init__(
            f"preset map {preset_name!r} has no mapping for provider {provider_name!r}"
        )


class ProviderAlreadyRegisteredError(CloudTranscodeError):
    """Raised when a provider name is registered twice."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"provider already registered: {name}")


class InvalidProviderConfigError(CloudTranscodeError):
    """Raised by a provider factory when its configuration is missing or incomplete."""

    def __init__(self, name: str, reason: str):
        self.name = name
        self.reason = reason
        super().__init__(f"invalid configuration for provider {name}: {reason}")


class ValidationError(CloudTranscodeError):
    """Base exception for caller input rejected before any vendor call."""
    pass


class JobValidationError(ValidationError):
    """Raised when a job cannot be mapped onto the vendor (bad source, bad container)."""
    pass


class PresetValidationError(ValidationError):
    """Raised when a preset uses codecs the vendor adapter cannot create."""
    pass


class SubmissionError(CloudTranscodeError):
    """Raised when a transcode submission aborts part-way through.

    Vendor resources created before the failing step are not deleted.
    They are listed in ``created_resources`` as ``(kind, id)`` pairs so an
    external reconciler can clean them up. The underlying error is chained
    as ``__cause__``.
    """

    def __init__(self, step: str, reason: str, created_resources: Optional[List[tuple]] = None):
        self.step = step
        self.reason = reason
        self.created_resources = list(created_resources or [])
        super().__init__(f"transcode submission failed at step {step!r}: {reason}")
