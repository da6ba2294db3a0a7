from typing import Optional

class ParseError(Exception):
    """Raised when a stream cannot be walked: strict-mode invalid header or a failed read."""

    def __init__(self, message: str, offset: Optional[int] = None):
        if offset is not None:
            message = f"{message} (at byte offset {offset})"
        super().__init__(message)
        self.offset = offset
