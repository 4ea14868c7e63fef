"""
Bitmovin API resource models.

Only the fields the adapter reads or writes are modelled. Everything
serializes to the vendor's camelCase JSON.
"""

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class VendorModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    def to_body(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


# =============================================================================
# RESPONSE ENVELOPE
# =============================================================================

class EnvelopeData(VendorModel):
    result: Optional[Any] = None
    message: Optional[str] = None
    code: Optional[int] = None


class ResponseEnvelope(VendorModel):
    request_id: Optional[str] = None
    status: Literal["SUCCESS", "ERROR"]
    data: EnvelopeData = Field(default_factory=EnvelopeData)


class StatusResult(VendorModel):
    status: str
    progress: Optional[float] = None


class CustomDataResult(VendorModel):
    custom_data: Dict[str, Any] = Field(default_factory=dict)


class ResourceRef(VendorModel):
    """Any created resource; only its ID is needed."""
    id: str


# =============================================================================
# INPUTS / OUTPUTS
# =============================================================================

class S3Input(VendorModel):
    id: Optional[str] = None
    access_key: str
    secret_key: str
    bucket_name: str
    cloud_region: Optional[str] = None


class HTTPInput(VendorModel):
    """Used for both the ``http`` and ``https`` input endpoints."""
    id: Optional[str] = None
    host: str


class S3Output(VendorModel):
    id: Optional[str] = None
    access_key: str
    secret_key: str
    bucket_name: str
    cloud_region: Optional[str] = None


class ACLEntry(VendorModel):
    permission: str = "PUBLIC_READ"


class EncodingOutput(VendorModel):
    output_id: str
    output_path: str
    acl: List[ACLEntry] = Field(default_factory=lambda: [ACLEntry()])


# =============================================================================
# CODEC CONFIGURATIONS
# =============================================================================

class H264CodecConfiguration(VendorModel):
    id: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    bitrate: Optional[int] = None
    rate: Optional[float] = None
    profile: Optional[str] = None
    level: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    min_gop: Optional[int] = None
    max_gop: Optional[int] = None
    custom_data: Optional[Dict[str, Any]] = None


class AACCodecConfiguration(VendorModel):
    id: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    bitrate: Optional[int] = None
    rate: Optional[float] = None  # Sampling rate in Hz
    custom_data: Optional[Dict[str, Any]] = None


class BitmovinPreset(BaseModel):
    """A canonical preset as realized on Bitmovin: one video and one audio config."""
    video: H264CodecConfiguration = Field(default_factory=H264CodecConfiguration)
    audio: AACCodecConfiguration = Field(default_factory=AACCodecConfiguration)


# =============================================================================
# ENCODINGS
# =============================================================================

class Encoding(VendorModel):
    id: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    cloud_region: Optional[str] = None
    custom_data: Optional[Dict[str, Any]] = None


class StreamInput(VendorModel):
    input_id: str
    input_path: str
    selection_mode: str = "AUTO"


class Stream(VendorModel):
    id: Optional[str] = None
    codec_config_id: str
    input_streams: List[StreamInput]


class MuxingStream(VendorModel):
    stream_id: str


class MP4Muxing(VendorModel):
    id: Optional[str] = None
    filename: str
    streams: List[MuxingStream]
    outputs: List[EncodingOutput]


class TSMuxing(VendorModel):
    id: Optional[str] = None
    segment_length: float
    segment_naming: str = "seg_%number%.ts"
    streams: List[MuxingStream]
    outputs: List[EncodingOutput]


# =============================================================================
# HLS MANIFESTS
# =============================================================================

class HLSManifest(VendorModel):
    id: Optional[str] = None
    name: Optional[str] = None
    manifest_name: str
    outputs: List[EncodingOutput]


class MediaInfo(VendorModel):
    id: Optional[str] = None
    type: str = "AUDIO"
    group_id: str
    language: Optional[str] = None
    name: str
    segment_path: str
    uri: str
    encoding_id: str
    stream_id: str
    muxing_id: str


class StreamInfo(VendorModel):
    id: Optional[str] = None
    audio: Optional[str] = None
    closed_captions: str = "NONE"
    segment_path: str
    uri: str
    encoding_id: str
    stream_id: str
    muxing_id: str
