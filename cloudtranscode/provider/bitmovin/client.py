"""
HTTP client for the Bitmovin encoding API.

Every call is a blocking request/response round-trip with the single
timeout from configuration. Responses are unwrapped from the vendor
envelope ``{status, data: {result}}``; an ``ERROR`` envelope raises
VendorAPIError, anything that is not an envelope raises TransportError.
"""

import logging
from typing import Any, Dict, List, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from ...errors import TransportError, VendorAPIError
from .models import (
    AACCodecConfiguration,
    CustomDataResult,
    Encoding,
    H264CodecConfiguration,
    HLSManifest,
    HTTPInput,
    MediaInfo,
    MP4Muxing,
    ResourceRef,
    ResponseEnvelope,
    S3Input,
    S3Output,
    StatusResult,
    Stream,
    StreamInfo,
    TSMuxing,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class BitmovinClient:
    """Thin, stateless wrapper over the Bitmovin REST endpoints the adapter uses."""

    def __init__(
        self,
        api_key: str,
        endpoint: str,
        timeout: float = 5.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Initialize the client.

        Args:
            api_key: Bitmovin API key, sent as X-Api-Key
            endpoint: Base URL of the API (e.g., "https://api.bitmovin.com/v1/")
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport, mainly for tests
        """
        self.endpoint = endpoint
        self._http = httpx.Client(
            base_url=endpoint,
            headers={
                "X-Api-Key": api_key,
                "Content-Type": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    def close(self) -> None:
        self._http.close()

    # =========================================================================
    # ENVELOPE HANDLING
    # =========================================================================

    def _request(self, method: str, path: str, body: Optional[Dict[str, Any]] = None) -> Any:
        """Perform a call and return the envelope's ``data.result``."""
        logger.debug(f"[Bitmovin] {method} {path}")

        try:
            response = self._http.request(method, path, json=body)
        except httpx.HTTPError as e:
            raise TransportError(method, path, str(e)) from e

        try:
            envelope = ResponseEnvelope.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise TransportError(
                method, path, "response is not a valid API envelope", response.status_code
            ) from e

        if envelope.status == "ERROR":
            raise VendorAPIError(method, path, envelope.data.message or "", envelope.data.code)

        if response.is_error:
            raise TransportError(method, path, "unexpected HTTP status", response.status_code)

        return envelope.data.result

    def _parse(self, model: Type[ModelT], result: Any, method: str, path: str) -> ModelT:
        try:
            return model.model_validate(result if result is not None else {})
        except ValidationError as e:
            raise TransportError(method, path, f"unexpected result shape: {e}") from e

    def _create(self, path: str, body: Dict[str, Any]) -> str:
        result = self._request("POST", path, body)
        return self._parse(ResourceRef, result, "POST", path).id

    def _status(self, path: str) -> StatusResult:
        return self._parse(StatusResult, self._request("GET", path), "GET", path)

    def _custom_data(self, path: str) -> Dict[str, Any]:
        return self._parse(CustomDataResult, self._request("GET", path), "GET", path).custom_data

    # =========================================================================
    # INPUTS / OUTPUTS
    # =========================================================================

    def create_s3_input(self, s3_input: S3Input) -> str:
        return self._create("/encoding/inputs/s3", s3_input.to_body())

    def create_http_input(self, http_input: HTTPInput, scheme: str = "http") -> str:
        """Create an input on the ``http`` or ``https`` endpoint."""
        return self._create(f"/encoding/inputs/{scheme}", http_input.to_body())

    def create_s3_output(self, s3_output: S3Output) -> str:
        return self._create("/encoding/outputs/s3", s3_output.to_body())

    # =========================================================================
    # CODEC CONFIGURATIONS
    # =========================================================================

    def create_h264_config(self, config: H264CodecConfiguration) -> str:
        return self._create("/encoding/configurations/video/h264", config.to_body())

    def get_h264_config(self, config_id: str) -> H264CodecConfiguration:
        path = f"/encoding/configurations/video/h264/{config_id}"
        return self._parse(H264CodecConfiguration, self._request("GET", path), "GET", path)

    def get_h264_custom_data(self, config_id: str) -> Dict[str, Any]:
        return self._custom_data(f"/encoding/configurations/video/h264/{config_id}/customData")

    def delete_h264_config(self, config_id: str) -> None:
        self._request("DELETE", f"/encoding/configurations/video/h264/{config_id}")

    def create_aac_config(self, config: AACCodecConfiguration) -> str:
        return self._create("/encoding/configurations/audio/aac", config.to_body())

    def get_aac_config(self, config_id: str) -> AACCodecConfiguration:
        path = f"/encoding/configurations/audio/aac/{config_id}"
        return self._parse(AACCodecConfiguration, self._request("GET", path), "GET", path)

    def delete_aac_config(self, config_id: str) -> None:
        self._request("DELETE", f"/encoding/configurations/audio/aac/{config_id}")

    # =========================================================================
    # ENCODINGS
    # =========================================================================

    def create_encoding(self, encoding: Encoding) -> str:
        return self._create("/encoding/encodings", encoding.to_body())

    def list_encodings(self) -> List[Dict[str, Any]]:
        result = self._request("GET", "/encoding/encodings")
        if isinstance(result, dict):
            return list(result.get("items") or [])
        return []

    def add_stream(self, encoding_id: str, stream: Stream) -> str:
        return self._create(f"/encoding/encodings/{encoding_id}/streams", stream.to_body())

    def add_mp4_muxing(self, encoding_id: str, muxing: MP4Muxing) -> str:
        return self._create(f"/encoding/encodings/{encoding_id}/muxings/mp4", muxing.to_body())

    def add_ts_muxing(self, encoding_id: str, muxing: TSMuxing) -> str:
        return self._create(f"/encoding/encodings/{encoding_id}/muxings/ts", muxing.to_body())

    def start_encoding(self, encoding_id: str) -> None:
        self._request("POST", f"/encoding/encodings/{encoding_id}/start")

    def stop_encoding(self, encoding_id: str) -> None:
        self._request("POST", f"/encoding/encodings/{encoding_id}/stop")

    def encoding_status(self, encoding_id: str) -> StatusResult:
        return self._status(f"/encoding/encodings/{encoding_id}/status")

    def encoding_custom_data(self, encoding_id: str) -> Dict[str, Any]:
        return self._custom_data(f"/encoding/encodings/{encoding_id}/customData")

    # =========================================================================
    # HLS MANIFESTS
    # =========================================================================

    def create_hls_manifest(self, manifest: HLSManifest) -> str:
        return self._create("/encoding/manifests/hls", manifest.to_body())

    def add_media_info(self, manifest_id: str, media_info: MediaInfo) -> str:
        return self._create(f"/encoding/manifests/hls/{manifest_id}/media", media_info.to_body())

    def add_stream_info(self, manifest_id: str, stream_info: StreamInfo) -> str:
        return self._create(f"/encoding/manifests/hls/{manifest_id}/streams", stream_info.to_body())

    def start_manifest(self, manifest_id: str) -> None:
        self._request("POST", f"/encoding/manifests/hls/{manifest_id}/start")

    def manifest_status(self, manifest_id: str) -> StatusResult:
        return self._status(f"/encoding/manifests/hls/{manifest_id}/status")
