"""Leading ID3v2 tag detection.

The 10-byte tag header:

    0-2  "ID3"
    3-4  version, revision (ignored)
    5    flags (ignored)
    6-9  tag size as a 28-bit synchsafe integer, excluding this header
"""
import logging

from .bitops import synchsafe_to_int
from .source import ByteSource, read_at

logger = logging.getLogger(__name__)

ID3_HEADER_SIZE = 10
ID3_TAG_IDENTIFIER = b"ID3"

def skip_id3_tag(source: ByteSource, position: int, size: int) -> int:
    """Return the offset just past an ID3v2 tag at `position`, or `position` if there is none."""
    if position + ID3_HEADER_SIZE > size:
        return position
    buf = read_at(source, position, ID3_HEADER_SIZE)
    if len(buf) < ID3_HEADER_SIZE or buf[:3] != ID3_TAG_IDENTIFIER:
        return position

    tag_size = synchsafe_to_int(buf[6:10])
    nxt = position + ID3_HEADER_SIZE + tag_size
    logger.debug("ID3 tag at %d, payload %d bytes", position, tag_size)
    return min(nxt, size)
