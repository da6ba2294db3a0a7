"""Sequential MPEG-1 Layer III frame walk.

Frame boundaries are only known after the previous frame's length has been
computed, so a stream is always walked front to back in a single pass.
"""
import logging
import os
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator, List, Optional

from .bitops import read_uint32_be
from .errors import ParseError
from .header import FrameHeader, parse_frame_header
from .id3 import skip_id3_tag
from .source import ByteSource, BytesSource, FileSource, read_at
from .xing import InfoFrame, find_info_frame

logger = logging.getLogger(__name__)

HEADER_SIZE = 4

STOP_EOF = "eof"
STOP_INVALID_HEADER = "invalid_header"
STOP_TRUNCATED_FRAME = "truncated_frame"

@dataclass(frozen=True)
class Frame:
    offset: int
    length: int
    header: FrameHeader

@dataclass
class ScanResult:
    frame_count: int = 0
    tag_end: int = 0
    info_frame: Optional[InfoFrame] = None
    audio_start: int = 0
    end_offset: int = 0
    stop_reason: str = STOP_EOF
    padded_frames: int = 0
    bitrates: List[int] = field(default_factory=list)

    @property
    def is_vbr(self) -> bool:
        return len(self.bitrates) > 1

    def as_dict(self) -> dict:
        return {
            "frame_count": self.frame_count,
            "tag_end": self.tag_end,
            "info_frame": self.info_frame.marker if self.info_frame else None,
            "audio_start": self.audio_start,
            "end_offset": self.end_offset,
            "stop_reason": self.stop_reason,
            "padded_frames": self.padded_frames,
            "bitrates": list(self.bitrates),
            "vbr": self.is_vbr,
        }

class FrameWalker:
    """Iterates the audio frames of a source from `position` until the stream stops parsing.

    After iteration `position` is where the walk stopped and `stop_reason`
    says why. With `strict`, an invalid header raises ParseError instead of
    ending the walk.
    """

    def __init__(self, source: ByteSource, position: int, size: int, strict: bool = False):
        self.source = source
        self.position = position
        self.size = size
        self.strict = strict
        self.count = 0
        self.stop_reason: Optional[str] = None

    def __iter__(self) -> Iterator[Frame]:
        while self.position + HEADER_SIZE <= self.size:
            buf = read_at(self.source, self.position, HEADER_SIZE)
            if len(buf) < HEADER_SIZE:
                self.stop_reason = STOP_TRUNCATED_FRAME
                return
            hdr = parse_frame_header(read_uint32_be(buf))
            if hdr is None:
                if self.strict:
                    raise ParseError(f"Invalid frame header 0x{buf.hex()}", offset=self.position)
                logger.debug("no frame header at %d, stopping", self.position)
                self.stop_reason = STOP_INVALID_HEADER
                return
            length = hdr.frame_length
            if length <= 0 or self.position + length > self.size:
                logger.debug("frame at %d needs %d bytes, only %d left", self.position, length, self.size - self.position)
                self.stop_reason = STOP_TRUNCATED_FRAME
                return

            frame = Frame(offset=self.position, length=length, header=hdr)
            self.position += length
            self.count += 1
            yield frame
        self.stop_reason = STOP_EOF

def iter_frames(source: ByteSource, position: int, size: int, strict: bool = False) -> Iterator[Frame]:
    return iter(FrameWalker(source, position, size, strict=strict))

@contextmanager
def _opened(src):
    if isinstance(src, (bytes, bytearray, memoryview)):
        yield BytesSource(src)
    elif isinstance(src, (str, os.PathLike)):
        try:
            fs = FileSource(src)
        except OSError as e:
            raise ParseError(f"Cannot open {src}: {e}") from e
        with fs:
            yield fs
    else:
        yield src

def _source_size(source: ByteSource) -> int:
    try:
        return source.size()
    except OSError as e:
        raise ParseError(f"Cannot determine source size: {e}") from e

def scan(source, strict: bool = False) -> ScanResult:
    """Walk a stream and report where its audio frames are.

    `source` may be a ByteSource, a bytes-like object or a file path.
    """
    with _opened(source) as src:
        size = _source_size(src)
        res = ScanResult()
        if size < HEADER_SIZE:
            return res

        pos = skip_id3_tag(src, 0, size)
        res.tag_end = pos
        res.info_frame = find_info_frame(src, pos, size)
        if res.info_frame is not None:
            pos += res.info_frame.length
        res.audio_start = pos

        walker = FrameWalker(src, pos, size, strict=strict)
        rates = set()
        for fr in walker:
            if fr.header.padding:
                res.padded_frames += 1
            rates.add(fr.header.bitrate_kbps)
        res.frame_count = walker.count
        res.end_offset = walker.position
        res.stop_reason = walker.stop_reason or STOP_EOF
        res.bitrates = sorted(rates)
        logger.debug("counted %d frames, stopped at %d (%s)", res.frame_count, res.end_offset, res.stop_reason)
        return res

def count_frames(source, strict: bool = False) -> int:
    """Count the MPEG-1 Layer III audio frames in `source`.

    A leading ID3v2 tag and a Xing/Info statistics frame are skipped and not
    counted. The walk ends at the first position that is not a frame header
    or whose frame would run past the end of the source.
    """
    return scan(source, strict=strict).frame_count
