"""
Cross-resource links stored in Bitmovin ``customData``.

Bitmovin has no relation between a video and an audio codec config, or
between an encoding and its HLS manifest. The adapter keeps those links as
the values below and writes them into the owning resource's free-form
``customData`` bag. Only this module knows the bag's key names.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

AUDIO_KEY = "audio"
CONTAINER_KEY = "container"
MANIFEST_KEY = "manifest"


def _str_or_none(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)


@dataclass(frozen=True)
class PresetLinks:
    """Links owned by a video codec config."""
    audio_config_id: Optional[str] = None
    container: str = ""

    def to_custom_data(self) -> Dict[str, str]:
        data = {}
        if self.audio_config_id:
            data[AUDIO_KEY] = self.audio_config_id
        if self.container:
            data[CONTAINER_KEY] = self.container
        return data

    @classmethod
    def from_custom_data(cls, data: Optional[Dict[str, Any]]) -> "PresetLinks":
        data = data or {}
        return cls(
            audio_config_id=_str_or_none(data.get(AUDIO_KEY)),
            container=_str_or_none(data.get(CONTAINER_KEY)) or "",
        )


@dataclass(frozen=True)
class EncodingLinks:
    """Links owned by an encoding."""
    manifest_id: Optional[str] = None

    def to_custom_data(self) -> Dict[str, str]:
        if self.manifest_id:
            return {MANIFEST_KEY: self.manifest_id}
        return {}

    @classmethod
    def from_custom_data(cls, data: Optional[Dict[str, Any]]) -> "EncodingLinks":
        data = data or {}
        return cls(manifest_id=_str_or_none(data.get(MANIFEST_KEY)))
