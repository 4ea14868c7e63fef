"""
Preset translation between canonical presets and Bitmovin codec configs.

A canonical preset is split into an AAC audio config and an H.264 video
config. The video config is the preset's identity: its ID is what callers
store, and its customData links to the audio config.
"""

import logging
from typing import Dict, Optional

from ...errors import PresetValidationError
from ...models import Preset
from .client import BitmovinClient
from .links import PresetLinks
from .models import AACCodecConfiguration, BitmovinPreset, H264CodecConfiguration

logger = logging.getLogger(__name__)

VIDEO_CODECS = ("h264",)
AUDIO_CODECS = ("aac",)

AUDIO_SAMPLING_RATE = 48000.0

H264_PROFILES: Dict[str, str] = {
    "baseline": "BASELINE",
    "main": "MAIN",
    "high": "HIGH",
}


def _to_int(field: str, value: str) -> Optional[int]:
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        raise PresetValidationError(f"{field} must be an integer, got {value!r}")


def build_audio_config(preset: Preset) -> AACCodecConfiguration:
    return AACCodecConfiguration(
        name=preset.name,
        description=preset.description or None,
        bitrate=_to_int("audio bitrate", preset.audio.bitrate),
        rate=AUDIO_SAMPLING_RATE,
    )


def build_video_config(preset: Preset, links: PresetLinks) -> H264CodecConfiguration:
    video = preset.video
    profile = video.profile.lower()
    if profile and profile not in H264_PROFILES:
        raise PresetValidationError(f"unsupported H.264 profile: {video.profile}")

    gop_size = None
    if video.gop_mode.lower() == "fixed":
        gop_size = _to_int("GOP size", video.gop_size)

    return H264CodecConfiguration(
        name=preset.name,
        description=preset.description or None,
        bitrate=_to_int("video bitrate", video.bitrate),
        profile=H264_PROFILES.get(profile),
        level=video.profile_level or None,
        width=_to_int("width", video.width),
        height=_to_int("height", video.height),
        min_gop=gop_size,
        max_gop=gop_size,
        custom_data=links.to_custom_data() or None,
    )


class BitmovinPresetTranslator:
    """Creates, reads and deletes the codec config pair behind a preset."""

    def __init__(self, client: BitmovinClient):
        self.client = client

    def create(self, preset: Preset) -> str:
        """Create audio then video config; return the video config ID."""
        video_codec = preset.video.codec.lower()
        audio_codec = preset.audio.codec.lower()
        if video_codec not in VIDEO_CODECS:
            raise PresetValidationError(f"unsupported video codec: {preset.video.codec!r}")
        if audio_codec and audio_codec not in AUDIO_CODECS:
            raise PresetValidationError(f"unsupported audio codec: {preset.audio.codec!r}")

        audio_config_id = None
        if audio_codec:
            audio_config_id = self.client.create_aac_config(build_audio_config(preset))
            logger.debug(f"[Bitmovin] Created AAC config {audio_config_id} for preset {preset.name}")

        links = PresetLinks(audio_config_id=audio_config_id, container=preset.container)
        video_config_id = self.client.create_h264_config(build_video_config(preset, links))

        logger.info(f"[Bitmovin] Created preset {preset.name} as video config {video_config_id}")
        return video_config_id

    def get(self, preset_id: str) -> BitmovinPreset:
        """Join the video config with the audio config it links to."""
        video = self.client.get_h264_config(preset_id)
        custom_data = self.client.get_h264_custom_data(preset_id)
        video = video.model_copy(update={"custom_data": custom_data})

        links = PresetLinks.from_custom_data(custom_data)
        if links.audio_config_id is None:
            return BitmovinPreset(video=video, audio=AACCodecConfiguration())

        audio = self.client.get_aac_config(links.audio_config_id)
        return BitmovinPreset(video=video, audio=audio)

    def delete(self, preset_id: str) -> None:
        """Delete the linked audio config, then the video config.

        The link is read first; once the video config is gone it cannot be
        recovered.
        """
        links = PresetLinks.from_custom_data(self.client.get_h264_custom_data(preset_id))

        if links.audio_config_id is not None:
            self.client.delete_aac_config(links.audio_config_id)
            logger.debug(f"[Bitmovin] Deleted AAC config {links.audio_config_id}")

        self.client.delete_h264_config(preset_id)
        logger.info(f"[Bitmovin] Deleted preset {preset_id}")
