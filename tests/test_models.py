"""
Tests for the canonical data models and customData links.
"""

import pydantic
import pytest

from cloudtranscode.errors import PresetMapNotFoundError
from cloudtranscode.models import Job, JobStatus, Preset, PresetMap, Status, VideoPreset
from cloudtranscode.provider.bitmovin.links import EncodingLinks, PresetLinks


class TestStatus:

    def test_values(self):
        assert [s.value for s in Status] == ["queued", "started", "finished", "failed"]

    def test_job_status_serializes_status_value(self):
        job_status = JobStatus(provider_name="bitmovin", provider_job_id="enc-1", status=Status.QUEUED)

        assert job_status.model_dump(mode="json")["status"] == "queued"


class TestPresetMap:

    def test_provider_preset_id(self):
        preset_map = PresetMap(name="mp4_1080p", provider_mapping={"bitmovin": "video-1"})

        assert preset_map.provider_preset_id("bitmovin") == "video-1"

    def test_missing_provider(self):
        preset_map = PresetMap(name="mp4_1080p", provider_mapping={"zencoder": "z-1"})

        with pytest.raises(PresetMapNotFoundError) as exc_info:
            preset_map.provider_preset_id("bitmovin")
        assert exc_info.value.preset_name == "mp4_1080p"
        assert exc_info.value.provider_name == "bitmovin"


class TestJob:

    def test_needs_outputs(self):
        with pytest.raises(pydantic.ValidationError):
            Job(provider_name="bitmovin", source_media="s3://bucket/file.mp4", outputs=[])

    def test_defaults(self):
        job = Job(
            provider_name="bitmovin",
            source_media="s3://bucket/file.mp4",
            outputs=[{"preset": {"name": "mp4"}, "file_name": "out.mp4"}],
        )

        assert job.provider_job_id == ""
        assert job.streaming_params.segment_duration == 0

    def test_preset_is_immutable(self):
        preset = Preset(name="mp4_1080p", video=VideoPreset(codec="h264"))

        with pytest.raises(pydantic.ValidationError):
            preset.name = "other"


class TestLinks:

    def test_preset_links_skip_empty_values(self):
        assert PresetLinks().to_custom_data() == {}
        assert PresetLinks(audio_config_id="a-1", container="mp4").to_custom_data() == {
            "audio": "a-1",
            "container": "mp4",
        }

    def test_preset_links_read_missing_keys(self):
        links = PresetLinks.from_custom_data({"unrelated": True})

        assert links.audio_config_id is None
        assert links.container == ""

    def test_preset_links_read_none(self):
        assert PresetLinks.from_custom_data(None) == PresetLinks()

    def test_encoding_links(self):
        assert EncodingLinks(manifest_id="m-1").to_custom_data() == {"manifest": "m-1"}
        assert EncodingLinks.from_custom_data({"manifest": "m-1"}).manifest_id == "m-1"
        assert EncodingLinks.from_custom_data({"manifest": ""}).manifest_id is None
