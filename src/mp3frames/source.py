"""Random-access byte sources the frame walker reads from."""
import os
from pathlib import Path
from typing import Optional, Protocol, Union, runtime_checkable

from .errors import ParseError

@runtime_checkable
class ByteSource(Protocol):
    def size(self) -> int: ...

    def read_at(self, offset: int, length: int) -> bytes:
        """Return up to `length` bytes starting at `offset`; fewer only at end of source."""
        ...

class BytesSource:
    def __init__(self, data: Union[bytes, bytearray, memoryview]):
        self.data = bytes(data)

    def size(self) -> int:
        return len(self.data)

    def read_at(self, offset: int, length: int) -> bytes:
        return self.data[offset:offset + length]

class FileSource:
    """Read-only view of a file on disk. Use as a context manager or call close()."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._fh = open(self.path, "rb")
        self._size: Optional[int] = None

    def size(self) -> int:
        if self._size is None:
            self._size = os.fstat(self._fh.fileno()).st_size
        return self._size

    def read_at(self, offset: int, length: int) -> bytes:
        self._fh.seek(offset)
        return self._fh.read(length)

    def close(self):
        if not self._fh.closed:
            self._fh.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

def read_at(source: ByteSource, offset: int, length: int) -> bytes:
    """Read from `source`, turning I/O failures into ParseError."""
    try:
        return bytes(source.read_at(offset, length))
    except OSError as e:
        raise ParseError(f"Read of {length} bytes failed: {e}", offset=offset) from e
