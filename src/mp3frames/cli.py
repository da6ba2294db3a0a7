from __future__ import annotations

import argparse
import json
import sys
from dataclasses import replace
from typing import List, Optional

from .config import Settings
from .errors import ParseError
from .logging_setup import setup_logging
from .walker import scan

def count_cmd(args: argparse.Namespace, settings: Settings) -> int:
    strict = args.strict or settings.strict
    failed = False
    reports = []
    for path in args.files:
        try:
            res = scan(path, strict=strict)
        except ParseError as e:
            print(f"{path}: error: {e}", file=sys.stderr)
            failed = True
            continue
        if args.json:
            reports.append({"file": path, **res.as_dict()})
        else:
            print(f"{path}: {res.frame_count}")
    if args.json:
        print(json.dumps(reports, indent=2))
    return 1 if failed else 0

def serve_cmd(args: argparse.Namespace, settings: Settings) -> int:
    import uvicorn

    from .service import create_app

    uvicorn.run(create_app(settings), host=settings.host, port=settings.port, log_config=None)
    return 0

def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="mp3frames", description="Count MPEG-1 Layer III audio frames")
    p.add_argument("--log-level", default=None, help="Override MP3FRAMES_LOG_LEVEL")

    sub = p.add_subparsers(dest="cmd", required=True)

    c = sub.add_parser("count", help="Count frames in one or more files")
    c.add_argument("files", nargs="+")
    c.add_argument("--strict", action="store_true", help="Fail on an invalid frame header instead of stopping there")
    c.add_argument("--json", action="store_true", help="Print full scan reports as JSON")
    c.set_defaults(func=count_cmd)

    s = sub.add_parser("serve", help="Run the upload service")
    s.add_argument("--host", default=None)
    s.add_argument("--port", type=int, default=None)
    s.set_defaults(func=serve_cmd)
    return p

def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = Settings.from_env()
        if args.log_level:
            settings = replace(settings, log_level=args.log_level)
        if getattr(args, "host", None) is not None:
            settings = replace(settings, host=args.host)
        if getattr(args, "port", None) is not None:
            settings = replace(settings, port=args.port)
    except ValueError as e:
        parser.error(str(e))
    setup_logging(settings.level, settings.log_dir)

    return int(args.func(args, settings))

if __name__ == "__main__":
    raise SystemExit(main())
