"""
HTTP front end: accepts an MP3 upload and responds with its frame count.

Endpoints:
    GET  /api             : service name
    GET  /health          : liveness check
    POST /api/count-frames: multipart upload (field ``file``) → ``{"frameCount": n}``

The upload is spooled to a uniquely named file in the spool directory so the
walker can read it at random offsets; the file is deleted on every path.
"""

from __future__ import annotations

import logging
import uuid
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, File, HTTPException, Request, UploadFile

from .config import Settings
from .errors import ParseError
from .source import FileSource
from .walker import count_frames

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024

class UploadTooLarge(Exception):
    pass

def _spool_path(spool_dir: Path) -> Path:
    spool_dir.mkdir(parents=True, exist_ok=True)
    return spool_dir / f"{uuid.uuid4()}.mp3"

def _spool_upload(upload: UploadFile, path: Path, limit: int) -> None:
    written = 0
    with open(path, "wb") as out:
        while True:
            chunk = upload.file.read(CHUNK_SIZE)
            if not chunk:
                break
            written += len(chunk)
            if written > limit:
                raise UploadTooLarge(f"Upload exceeds {limit} bytes")
            out.write(chunk)

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the FastAPI app. Settings default to ``Settings.from_env()``."""
    settings = settings or Settings.from_env()
    app = FastAPI(title="mp3frames")
    app.state.settings = settings

    @app.get("/api")
    def api_info() -> dict[str, str]:
        return {"name": "mp3frames"}

    @app.get("/health")
    def health() -> dict[str, str]:
        """Return a simple liveness check."""
        return {"status": "ok"}

    @app.post("/api/count-frames")
    def count_uploaded_frames(request: Request, file: Optional[UploadFile] = File(None)) -> dict[str, int]:
        """Count the audio frames of an uploaded MP3.

        Raises:
            400: no file in the request.
            413: upload larger than ``max_upload_bytes``.
            422: the stream could not be walked.
            500: the upload could not be stored or reopened.
        """
        if file is None:
            raise HTTPException(status_code=400, detail="No file uploaded")

        cfg: Settings = request.app.state.settings
        path: Optional[Path] = None
        try:
            path = _spool_path(cfg.spool_dir)
            try:
                _spool_upload(file, path, cfg.max_upload_bytes)
            except UploadTooLarge as exc:
                logger.warning("Rejected upload %r: %s", file.filename, exc)
                raise HTTPException(status_code=413, detail=str(exc)) from exc

            with FileSource(path) as src:
                n = count_frames(src, strict=cfg.strict)
        except ParseError as exc:
            logger.warning("Frame count failed for %r: %s", file.filename, exc)
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        except OSError as exc:
            logger.warning("Could not store upload %r: %s", file.filename, exc)
            raise HTTPException(status_code=500, detail=f"Could not store upload: {exc}") from exc
        finally:
            file.file.close()
            if path is not None:
                path.unlink(missing_ok=True)

        logger.info("Counted %d frames in %r", n, file.filename)
        return {"frameCount": n}

    return app
