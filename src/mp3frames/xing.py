"""Xing/Info statistics frame detection.

LAME and other encoders write a frame that is a valid MPEG frame but carries
file statistics instead of audio, marked with "Xing" (VBR) or "Info" (CBR)
36 bytes into the frame (MPEG-1, stereo side info). It is not counted.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from .bitops import read_uint32_be
from .header import parse_frame_header
from .source import ByteSource, read_at

logger = logging.getLogger(__name__)

MARKER_OFFSET = 36
MARKER_VBR = "Xing"
MARKER_CBR = "Info"
MARKERS = (MARKER_VBR, MARKER_CBR)
# header + offset to marker + marker
MIN_INFO_FRAME_BYTES = 4 + MARKER_OFFSET + 4

@dataclass(frozen=True)
class InfoFrame:
    marker: str
    length: int

    @property
    def is_vbr(self) -> bool:
        return self.marker == MARKER_VBR

def find_info_frame(source: ByteSource, position: int, size: int) -> Optional[InfoFrame]:
    if position + MIN_INFO_FRAME_BYTES > size:
        return None
    head = read_at(source, position, 4)
    if len(head) < 4:
        return None
    hdr = parse_frame_header(read_uint32_be(head))
    if hdr is None:
        return None
    length = hdr.frame_length
    if length <= 0 or position + length > size:
        return None

    raw = read_at(source, position + MARKER_OFFSET, 4)
    if len(raw) < 4:
        return None
    marker = raw.decode("ascii", errors="replace")
    if marker not in MARKERS:
        return None
    logger.debug("%s frame at %d (%d bytes) excluded from count", marker, position, length)
    return InfoFrame(marker=marker, length=length)

def skip_info_frame(source: ByteSource, position: int, size: int) -> int:
    """Return the offset after a Xing/Info frame at `position`, or `position` if there is none."""
    info = find_info_frame(source, position, size)
    if info is None:
        return position
    return position + info.length
