"""
Canonical data models for CloudTranscode.

These are the vendor-agnostic shapes every provider adapter translates
to and from.
"""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .errors import PresetMapNotFoundError


class Status(str, Enum):
    """Canonical job status."""
    QUEUED = "queued"
    STARTED = "started"
    FINISHED = "finished"
    FAILED = "failed"


class VideoPreset(BaseModel):
    model_config = ConfigDict(frozen=True)

    codec: str = ""
    bitrate: str = ""
    profile: str = ""
    profile_level: str = ""
    width: str = ""
    height: str = ""
    gop_mode: str = ""
    gop_size: str = ""


class AudioPreset(BaseModel):
    model_config = ConfigDict(frozen=True)

    codec: str = ""
    bitrate: str = ""


class Preset(BaseModel):
    """Canonical audio+video encode parameters."""
    model_config = ConfigDict(frozen=True)

    name: str
    description: str = ""
    container: str = ""
    rate_control: str = ""
    video: VideoPreset = Field(default_factory=VideoPreset)
    audio: AudioPreset = Field(default_factory=AudioPreset)


class OutputOptions(BaseModel):
    extension: str = ""


class PresetMap(BaseModel):
    """A named preset and the vendor preset IDs it was realized as."""
    name: str
    provider_mapping: Dict[str, str] = Field(default_factory=dict)
    output_opts: OutputOptions = Field(default_factory=OutputOptions)

    def provider_preset_id(self, provider_name: str) -> str:
        """Return the vendor preset ID for a provider, or raise PresetMapNotFoundError."""
        preset_id = self.provider_mapping.get(provider_name)
        if not preset_id:
            raise PresetMapNotFoundError(self.name, provider_name)
        return preset_id


class TranscodeOutput(BaseModel):
    preset: PresetMap
    file_name: str


class StreamingParams(BaseModel):
    segment_duration: int = 0
    playlist_file_name: str = ""


class Job(BaseModel):
    """A transcode job as submitted by the caller."""
    id: str = ""
    provider_name: str
    provider_job_id: str = ""
    source_media: str
    outputs: List[TranscodeOutput]
    streaming_params: StreamingParams = Field(default_factory=StreamingParams)

    @field_validator("outputs")
    @classmethod
    def validate_outputs(cls, v: List[TranscodeOutput]) -> List[TranscodeOutput]:
        if not v:
            raise ValueError("a job needs at least one output")
        return v


class JobStatus(BaseModel):
    """Canonical status of a job at the moment it was queried."""
    provider_name: str
    provider_job_id: str
    status: Status
    message: Optional[str] = None


class Capabilities(BaseModel):
    """Static formats and destinations a provider supports."""
    model_config = ConfigDict(frozen=True)

    input_formats: List[str] = Field(default_factory=list)
    output_formats: List[str] = Field(default_factory=list)
    destinations: List[str] = Field(default_factory=list)


class Health(BaseModel):
    ok: bool
    message: Optional[str] = None


class ProviderDescription(BaseModel):
    name: str
    capabilities: Capabilities
    health: Health
    enabled: bool
