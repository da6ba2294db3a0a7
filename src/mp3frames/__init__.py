from .bitops import extract_bits, read_uint32_be, synchsafe_to_int
from .errors import ParseError
from .header import FrameHeader, frame_length, parse_frame_header
from .id3 import skip_id3_tag
from .source import ByteSource, BytesSource, FileSource
from .walker import Frame, FrameWalker, ScanResult, count_frames, iter_frames, scan
from .xing import InfoFrame, find_info_frame, skip_info_frame

__version__ = "0.1.0"
