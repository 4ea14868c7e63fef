"""
CloudTranscode Test Configuration and Fixtures

Provides:
- A fake Bitmovin API built on httpx.MockTransport (no network needed)
- Envelope builders for SUCCESS / ERROR / malformed responses
- Shared fixtures for config, provider and canonical jobs
"""

import itertools
import json
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

import httpx
import pytest

# Add project root to path
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from cloudtranscode.config import BitmovinConfig
from cloudtranscode.models import (
    Job,
    OutputOptions,
    PresetMap,
    StreamingParams,
    TranscodeOutput,
)
from cloudtranscode.provider.bitmovin import BitmovinClient, BitmovinProvider


# =============================================================================
# ENVELOPES
# =============================================================================

NOT_JSON = "Not proper json\n"


def success(result: Optional[Any] = None) -> Dict[str, Any]:
    """A SUCCESS envelope wrapping ``result``."""
    envelope: Dict[str, Any] = {"requestId": "req-1", "status": "SUCCESS"}
    if result is not None:
        envelope["data"] = {"result": result}
    return envelope


def error(message: str = "something went wrong") -> Dict[str, Any]:
    """An ERROR envelope as Bitmovin reports it."""
    return {"requestId": "req-1", "status": "ERROR", "data": {"message": message, "code": 1000}}


def created(prefix: str) -> Callable[[httpx.Request], Dict[str, Any]]:
    """Route handler returning a fresh resource ID on every call."""
    counter = itertools.count(1)

    def handler(request: httpx.Request) -> Dict[str, Any]:
        return success({"id": f"{prefix}-{next(counter)}"})

    return handler


def status(state: str) -> Dict[str, Any]:
    return success({"status": state})


def custom_data(data: Dict[str, Any]) -> Dict[str, Any]:
    return success({"customData": data})


# =============================================================================
# FAKE BITMOVIN API
# =============================================================================

class FakeBitmovin:
    """
    Routes requests by URL path, like a switch over ``r.URL.Path``.

    A route value may be an envelope dict, a raw string body, an
    httpx.Response, or a callable taking the request and returning any of
    those. Hitting a path with no route fails the test.
    """

    def __init__(self, routes: Dict[str, Any]):
        self.routes = dict(routes)
        self.requests: List[Tuple[str, str, Optional[Any]]] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        body = json.loads(request.content) if request.content else None
        self.requests.append((request.method, path, body))

        if path not in self.routes:
            pytest.fail(f"unexpected path hit: {request.method} {path}")

        route = self.routes[path]
        if callable(route):
            route = route(request)
        if isinstance(route, httpx.Response):
            return route
        if isinstance(route, str):
            return httpx.Response(200, text=route)
        return httpx.Response(200, json=route)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def paths(self) -> List[str]:
        return [path for _, path, _ in self.requests]

    def calls(self, path: str, method: Optional[str] = None) -> List[Tuple[str, str, Optional[Any]]]:
        return [
            r for r in self.requests
            if r[1] == path and (method is None or r[0] == method)
        ]

    def bodies(self, path: str) -> List[Any]:
        return [body for _, p, body in self.requests if p == path]


# =============================================================================
# PYTEST FIXTURES
# =============================================================================

ENDPOINT = "http://bitmovin.test/"


@pytest.fixture
def bitmovin_config() -> BitmovinConfig:
    return BitmovinConfig(
        api_key="apikey",
        endpoint=ENDPOINT,
        timeout=5,
        access_key_id="accesskey",
        secret_access_key="secretaccesskey",
        destination="s3://some-output-bucket/",
        encoding_region="AWS_US_EAST_1",
        aws_storage_region="US_EAST_1",
    )


@pytest.fixture
def make_provider(bitmovin_config):
    """
    Factory fixture: build a BitmovinProvider talking to a FakeBitmovin.

    Usage:
        def test_something(make_provider):
            provider, fake = make_provider({"/encoding/encodings": success()})
    """
    providers = []

    def _make(routes: Dict[str, Any], **config_overrides) -> Tuple[BitmovinProvider, FakeBitmovin]:
        fake = FakeBitmovin(routes)
        config = bitmovin_config.model_copy(update=config_overrides)
        client = BitmovinClient(
            api_key=config.api_key,
            endpoint=config.endpoint,
            timeout=config.timeout,
            transport=fake.transport,
        )
        provider = BitmovinProvider(config, client=client)
        providers.append(provider)
        return provider, fake

    yield _make

    for provider in providers:
        provider.close()


def build_job(source_media: str, job_id: str = "job-123") -> Job:
    """One MP4 rendition and two HLS renditions, mapped to videoID1..3."""
    preset_maps = [
        PresetMap(
            name="mp4_1080p",
            provider_mapping={"bitmovin": "videoID1"},
            output_opts=OutputOptions(extension="mp4"),
        ),
        PresetMap(
            name="hls_360p",
            provider_mapping={"bitmovin": "videoID2"},
            output_opts=OutputOptions(extension="m3u8"),
        ),
        PresetMap(
            name="hls_480p",
            provider_mapping={"bitmovin": "videoID3"},
            output_opts=OutputOptions(extension="m3u8"),
        ),
    ]

    outputs = []
    for preset_map in preset_maps:
        extension = preset_map.output_opts.extension
        file_name = f"output-{preset_map.name}.{extension}"
        if extension == "m3u8":
            file_name = f"hls/output-{preset_map.name}.m3u8"
        outputs.append(TranscodeOutput(preset=preset_map, file_name=file_name))

    return Job(
        id=job_id,
        provider_name="bitmovin",
        source_media=source_media,
        outputs=outputs,
        streaming_params=StreamingParams(
            segment_duration=4,
            playlist_file_name="hls/master_playlist.m3u8",
        ),
    )
