"""
Tests for the provider registry and the bundled provider factories.
"""

import pytest

from cloudtranscode.config import BitmovinConfig, CloudTranscodeConfig
from cloudtranscode.errors import (
    InvalidProviderConfigError,
    ProviderAlreadyRegisteredError,
    ProviderNotFoundError,
    TransportError,
)
from cloudtranscode.models import Capabilities
from cloudtranscode.provider import Provider, ProviderRegistry, default_registry
from cloudtranscode.provider.bitmovin import BitmovinProvider, bitmovin_factory


class StubProvider(Provider):
    """Provider double with a configurable healthcheck."""

    name = "stub"

    def __init__(self, health_error=None):
        self.health_error = health_error
        self.closed = False

    def create_preset(self, preset):
        return "preset-1"

    def delete_preset(self, preset_id):
        pass

    def get_preset(self, preset_id):
        return None

    def transcode(self, job):
        raise NotImplementedError

    def job_status(self, job):
        raise NotImplementedError

    def cancel_job(self, provider_job_id):
        pass

    def healthcheck(self):
        if self.health_error is not None:
            raise self.health_error

    def capabilities(self):
        return Capabilities(input_formats=["h264"], output_formats=["mp4"], destinations=["s3"])

    def close(self):
        self.closed = True


@pytest.fixture
def config():
    return CloudTranscodeConfig(bitmovin=BitmovinConfig(
        api_key="apikey",
        destination="s3://some-output-bucket/",
    ))


class TestProviderRegistry:

    def test_register_and_get(self, config):
        registry = ProviderRegistry()
        stub = StubProvider()
        registry.register("stub", lambda cfg: stub)

        assert registry.get("stub", config) is stub
        assert registry.names() == ["stub"]

    def test_duplicate_registration_fails(self):
        registry = ProviderRegistry()
        registry.register("stub", lambda cfg: StubProvider())

        with pytest.raises(ProviderAlreadyRegisteredError):
            registry.register("stub", lambda cfg: StubProvider())

    def test_unknown_provider(self, config):
        registry = ProviderRegistry()

        with pytest.raises(ProviderNotFoundError):
            registry.get("encoding.com", config)
        with pytest.raises(ProviderNotFoundError):
            registry.describe("encoding.com", config)

    def test_names_are_sorted(self):
        registry = ProviderRegistry()
        registry.register("zencoder", lambda cfg: StubProvider())
        registry.register("bitmovin", lambda cfg: StubProvider())

        assert registry.names() == ["bitmovin", "zencoder"]


class TestDescribe:

    def test_healthy_provider(self, config):
        stub = StubProvider()
        registry = ProviderRegistry()
        registry.register("stub", lambda cfg: stub)

        description = registry.describe("stub", config)

        assert description.enabled is True
        assert description.health.ok is True
        assert description.capabilities.output_formats == ["mp4"]
        assert stub.closed

    def test_unhealthy_provider(self, config):
        registry = ProviderRegistry()
        registry.register("stub", lambda cfg: StubProvider(TransportError("GET", "/", "boom")))

        description = registry.describe("stub", config)

        assert description.enabled is True
        assert description.health.ok is False
        assert "boom" in description.health.message

    def test_unconfigured_provider_is_disabled(self):
        registry = default_registry()

        description = registry.describe("bitmovin", CloudTranscodeConfig())

        assert description.enabled is False
        assert description.health.ok is False
        assert description.capabilities == Capabilities()


class TestBitmovinFactory:

    def test_default_registry_has_bitmovin(self, config):
        registry = default_registry()

        assert registry.names() == ["bitmovin"]
        with registry.get("bitmovin", config) as provider:
            assert isinstance(provider, BitmovinProvider)

    def test_missing_section(self):
        with pytest.raises(InvalidProviderConfigError):
            bitmovin_factory(CloudTranscodeConfig())

    def test_missing_api_key(self):
        config = CloudTranscodeConfig(bitmovin=BitmovinConfig(destination="s3://bucket/"))

        with pytest.raises(InvalidProviderConfigError):
            bitmovin_factory(config)

    def test_missing_destination(self):
        config = CloudTranscodeConfig(bitmovin=BitmovinConfig(api_key="apikey"))

        with pytest.raises(InvalidProviderConfigError):
            bitmovin_factory(config)

    def test_non_s3_destination(self):
        config = CloudTranscodeConfig(bitmovin=BitmovinConfig(
            api_key="apikey",
            destination="gs://bucket/",
        ))

        with pytest.raises(InvalidProviderConfigError):
            bitmovin_factory(config)

    def test_bad_destination_builds_no_client(self, monkeypatch):
        built = []
        monkeypatch.setattr(
            "cloudtranscode.provider.bitmovin.provider.BitmovinClient",
            lambda **kwargs: built.append(kwargs),
        )
        registry = default_registry()
        config = CloudTranscodeConfig(bitmovin=BitmovinConfig(
            api_key="apikey",
            destination="gs://bucket/",
        ))

        description = registry.describe("bitmovin", config)

        assert description.enabled is False
        assert built == []
