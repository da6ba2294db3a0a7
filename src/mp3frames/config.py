"""Runtime settings for the CLI and the upload service, read from the environment."""
import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

DEFAULT_MAX_UPLOAD_BYTES = 100 * 1024 * 1024
DEFAULT_PORT = 3000

LOG_LEVELS = frozenset({"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"})
_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}

def _parse_bool(name: str, raw: str) -> bool:
    v = raw.strip().lower()
    if v in _TRUE:
        return True
    if v in _FALSE:
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")

def _parse_int(name: str, raw: str) -> int:
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None

@dataclass(frozen=True)
class Settings:
    """
    Attributes:
        strict: raise ParseError on a mid-stream invalid header instead of
            stopping the count there.
        log_level: name of a standard logging level.
        log_dir: also log to ``<log_dir>/mp3frames.log`` when set.
        spool_dir: directory uploads are written to before counting.
        max_upload_bytes: uploads larger than this are rejected.
        host, port: bind address of the HTTP server.
    """

    strict: bool = False
    log_level: str = "INFO"
    log_dir: Optional[Path] = None
    spool_dir: Path = Path(tempfile.gettempdir())
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
    host: str = "127.0.0.1"
    port: int = DEFAULT_PORT

    def __post_init__(self) -> None:
        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"Unknown log level {self.log_level!r}, valid options: {sorted(LOG_LEVELS)}")
        if self.max_upload_bytes <= 0:
            raise ValueError(f"max_upload_bytes must be positive, got {self.max_upload_bytes}")
        if not (0 < self.port < 65536):
            raise ValueError(f"port must be in 1..65535, got {self.port}")

    @property
    def level(self) -> int:
        return getattr(logging, self.log_level.upper())

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if env is None else env
        kw = {}
        if "MP3FRAMES_STRICT" in env:
            kw["strict"] = _parse_bool("MP3FRAMES_STRICT", env["MP3FRAMES_STRICT"])
        if env.get("MP3FRAMES_LOG_LEVEL"):
            kw["log_level"] = env["MP3FRAMES_LOG_LEVEL"]
        if env.get("MP3FRAMES_LOG_DIR"):
            kw["log_dir"] = Path(env["MP3FRAMES_LOG_DIR"])
        if env.get("MP3FRAMES_SPOOL_DIR"):
            kw["spool_dir"] = Path(env["MP3FRAMES_SPOOL_DIR"])
        if env.get("MP3FRAMES_MAX_UPLOAD_BYTES"):
            kw["max_upload_bytes"] = _parse_int("MP3FRAMES_MAX_UPLOAD_BYTES", env["MP3FRAMES_MAX_UPLOAD_BYTES"])
        if env.get("HOST"):
            kw["host"] = env["HOST"]
        if env.get("PORT"):
            kw["port"] = _parse_int("PORT", env["PORT"])
        return cls(**kw)
