import os
import sys
import tempfile
import unittest
from pathlib import Path

# Add src directory to path for imports
BASE_DIR = Path(__file__).resolve().parents[1]
for p in (BASE_DIR, BASE_DIR / "tests"):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))

from mp3frames import BytesSource, FileSource, ParseError, count_frames, iter_frames, scan
from mp3_fixtures import (
    JUNK_TRAILER,
    REFERENCE_FRAME_COUNT,
    frame_len,
    make_frame,
    make_id3,
    reference_audio,
    reference_stream,
)


class FailingSource:
    """Byte source whose reads fail from a given offset on."""

    def __init__(self, data: bytes, fail_from: int):
        self.data = data
        self.fail_from = fail_from

    def size(self):
        return len(self.data)

    def read_at(self, offset, length):
        if offset >= self.fail_from:
            raise OSError("device not ready")
        return self.data[offset:offset + length]


class TestCountFrames(unittest.TestCase):

    def test_short_sources(self):
        for data in (b"", b"\xff", b"\xff\xfb\x90"):
            with self.subTest(size=len(data)):
                self.assertEqual(count_frames(data), 0)
                self.assertEqual(count_frames(data, strict=True), 0)

    def test_reference_stream(self):
        self.assertEqual(count_frames(reference_stream()), REFERENCE_FRAME_COUNT)

    def test_tag_without_frames(self):
        data = make_id3(100) + b"not an mp3 frame at all"
        self.assertEqual(count_frames(data), 0)

    def test_tag_only(self):
        self.assertEqual(count_frames(make_id3(100)), 0)

    def test_no_tag(self):
        data = make_frame() * 5
        self.assertEqual(count_frames(data), 5)

    def test_metadata_frame_excluded(self):
        audio = make_frame() * 3
        self.assertEqual(count_frames(make_frame(marker=b"Xing") + audio), 3)
        self.assertEqual(count_frames(make_frame(marker=b"Info") + audio), 3)
        self.assertEqual(count_frames(make_frame() + audio), 4)

    def test_only_first_metadata_frame_excluded(self):
        data = make_frame(marker=b"Xing") + make_frame(marker=b"Xing") + make_frame()
        self.assertEqual(count_frames(data), 2)

    def test_metadata_frame_mid_stream_counted(self):
        data = make_frame() + make_frame(marker=b"Xing") + make_frame()
        self.assertEqual(count_frames(data), 3)

    def test_truncated_last_frame(self):
        data = make_id3(10) + make_frame() * 4 + make_frame()[:300]
        self.assertEqual(count_frames(data), 4)
        self.assertEqual(count_frames(data, strict=True), 4)

    def test_trailing_partial_header(self):
        data = make_frame() * 2 + b"\xff\xfb"
        self.assertEqual(count_frames(data), 2)

    def test_stops_at_first_invalid_header(self):
        data = make_frame() * 2 + JUNK_TRAILER + make_frame() * 3
        self.assertEqual(count_frames(data), 2)

    def test_tag_size_past_end(self):
        data = make_id3(5000)[:300]
        self.assertEqual(count_frames(data), 0)

    def test_bytes_like_inputs(self):
        data = reference_stream()
        self.assertEqual(count_frames(bytearray(data)), REFERENCE_FRAME_COUNT)
        self.assertEqual(count_frames(memoryview(data)), REFERENCE_FRAME_COUNT)
        self.assertEqual(count_frames(BytesSource(data)), REFERENCE_FRAME_COUNT)


class TestStrictMode(unittest.TestCase):

    def test_invalid_header_raises_with_offset(self):
        data = reference_stream()
        with self.assertRaises(ParseError) as ctx:
            count_frames(data, strict=True)
        self.assertEqual(ctx.exception.offset, len(data) - len(JUNK_TRAILER))
        self.assertIn(str(len(data) - len(JUNK_TRAILER)), str(ctx.exception))

    def test_clean_stream_passes(self):
        data = make_id3(34) + make_frame(marker=b"Info") + reference_audio()
        self.assertEqual(count_frames(data, strict=True), REFERENCE_FRAME_COUNT)

    def test_no_frame_after_tag_raises(self):
        with self.assertRaises(ParseError) as ctx:
            count_frames(make_id3(20) + b"garbage!", strict=True)
        self.assertEqual(ctx.exception.offset, 30)


class TestScan(unittest.TestCase):

    def test_reference_report(self):
        data = reference_stream()
        res = scan(data)
        self.assertEqual(res.frame_count, REFERENCE_FRAME_COUNT)
        self.assertEqual(res.tag_end, 44)
        self.assertEqual(res.info_frame.marker, "Info")
        self.assertEqual(res.audio_start, 44 + 417)
        self.assertEqual(res.end_offset, len(data) - len(JUNK_TRAILER))
        self.assertEqual(res.stop_reason, "invalid_header")
        self.assertEqual(res.padded_frames, 6)
        self.assertEqual(res.bitrates, [128, 320])
        self.assertTrue(res.is_vbr)

    def test_report_dict(self):
        d = scan(make_frame() * 2).as_dict()
        self.assertEqual(d["frame_count"], 2)
        self.assertIsNone(d["info_frame"])
        self.assertEqual(d["stop_reason"], "eof")
        self.assertEqual(d["bitrates"], [128])
        self.assertFalse(d["vbr"])

    def test_truncated_stop_reason(self):
        data = make_frame() + make_frame()[:100]
        res = scan(data)
        self.assertEqual(res.stop_reason, "truncated_frame")
        self.assertEqual(res.end_offset, 417)

    def test_empty_report(self):
        res = scan(b"")
        self.assertEqual(res.frame_count, 0)
        self.assertEqual(res.stop_reason, "eof")
        self.assertEqual(res.bitrates, [])

    def test_info_frame_logged_once(self):
        with self.assertLogs("mp3frames", level="DEBUG") as logs:
            scan(make_frame(marker=b"Xing") + make_frame())
        hits = [m for m in logs.output if "Xing frame" in m]
        self.assertEqual(len(hits), 1)
        self.assertIn("excluded from count", hits[0])


class TestIterFrames(unittest.TestCase):

    def test_offsets_and_lengths(self):
        data = make_frame(padding=1) + make_frame(bitrate_idx=14) + make_frame(samplerate_idx=1)
        frames = list(iter_frames(BytesSource(data), 0, len(data)))
        self.assertEqual([f.offset for f in frames], [0, 418, 418 + 1044])
        self.assertEqual([f.length for f in frames], [418, 1044, frame_len(9, 1, 0)])
        self.assertEqual(frames[1].header.bitrate_kbps, 320)
        self.assertEqual(frames[2].header.sample_rate_hz, 48000)

    def test_starts_at_position(self):
        data = b"\x00" * 7 + make_frame() * 2
        self.assertEqual(len(list(iter_frames(BytesSource(data), 7, len(data)))), 2)
        self.assertEqual(len(list(iter_frames(BytesSource(data), 0, len(data)))), 0)


class TestSources(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.path = os.path.join(self.tmpdir.name, 'sample.mp3')
        Path(self.path).write_bytes(reference_stream())

    def tearDown(self):
        self.tmpdir.cleanup()

    def test_count_from_path(self):
        self.assertEqual(count_frames(self.path), REFERENCE_FRAME_COUNT)
        self.assertEqual(count_frames(Path(self.path)), REFERENCE_FRAME_COUNT)

    def test_file_source(self):
        with FileSource(self.path) as src:
            self.assertEqual(src.size(), len(reference_stream()))
            self.assertEqual(src.read_at(0, 3), b"ID3")
            self.assertEqual(src.read_at(src.size() - 2, 10), b"\x00\x00")
            self.assertEqual(count_frames(src), REFERENCE_FRAME_COUNT)

    def test_missing_file(self):
        with self.assertRaises(ParseError):
            count_frames(os.path.join(self.tmpdir.name, 'missing.mp3'))

    def test_read_failure_becomes_parse_error(self):
        data = make_frame() * 4
        with self.assertRaises(ParseError) as ctx:
            count_frames(FailingSource(data, fail_from=417 * 2))
        self.assertEqual(ctx.exception.offset, 417 * 2)
        self.assertIsInstance(ctx.exception.__cause__, OSError)


if __name__ == '__main__':
    unittest.main(verbosity=2)
