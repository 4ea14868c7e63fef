"""
Bitmovin encoding API adapter.
"""

from .client import BitmovinClient
from .models import AACCodecConfiguration, BitmovinPreset, H264CodecConfiguration
from .provider import NAME, BitmovinProvider, bitmovin_factory

__all__ = [
    "NAME",
    "BitmovinClient",
    "BitmovinProvider",
    "BitmovinPreset",
    "H264CodecConfiguration",
    "AACCodecConfiguration",
    "bitmovin_factory",
]
