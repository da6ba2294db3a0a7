"""MPEG-1 Layer III frame header decoding.

Header bit layout (bit 31 first)::

    AAAAAAAA AAABBCCD EEEEFFGH IIJJKLMM

    A  frame sync (11 bits, all ones)
    B  version (0b11 = MPEG-1)
    C  layer (0b01 = Layer III)
    D  protection
    E  bitrate index
    F  sample rate index
    G  padding
    H-M  not needed for frame counting
"""
from dataclasses import dataclass
from typing import Optional

from .bitops import extract_bits

FRAME_SYNC = 0x7FF
VERSION_MPEG_1 = 0b11
LAYER_III = 0b01

# kbps, indexed by the 4-bit bitrate field; 0 is free format, 15 is bad
BITRATES = (0, 32, 40, 48, 56, 64, 80, 96, 112, 128, 160, 192, 224, 256, 320, 0)
BITRATE_FREE = 0b0000
BITRATE_BAD = 0b1111

SAMPLERATES = (44100, 48000, 32000)
SAMPLERATE_RESERVED = 0b11

# floor(144 * bitrate_bps / sample_rate) with the bitrate in kbps
FRAME_LENGTH_MULTIPLIER = 144 * 1000

@dataclass(frozen=True)
class FrameHeader:
    bitrate_kbps: int
    sample_rate_hz: int
    padding: int

    @property
    def frame_length(self) -> int:
        return frame_length(self)

def frame_length(header: FrameHeader) -> int:
    return FRAME_LENGTH_MULTIPLIER * header.bitrate_kbps // header.sample_rate_hz + header.padding

def parse_frame_header(value: int) -> Optional[FrameHeader]:
    """Decode a big-endian 32-bit candidate header, or return None if it is not a valid frame."""
    if extract_bits(value, 31, 11) != FRAME_SYNC:
        return None
    if extract_bits(value, 20, 2) != VERSION_MPEG_1:
        return None
    if extract_bits(value, 18, 2) != LAYER_III:
        return None

    br = extract_bits(value, 15, 4)
    if br == BITRATE_FREE or br == BITRATE_BAD:
        return None
    sr = extract_bits(value, 11, 2)
    if sr == SAMPLERATE_RESERVED:
        return None
    pad = extract_bits(value, 9, 1)

    return FrameHeader(bitrate_kbps=BITRATES[br], sample_rate_hz=SAMPLERATES[sr], padding=pad)
