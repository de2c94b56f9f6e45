from __future__ import annotations

import argparse
import logging
from typing import List, Optional

import uvicorn

from src.protocol.http.app import create_app


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Serve the tree-search chess engine over HTTP")
    parser.add_argument("--host", type=str, default="0.0.0.0", help="Bind address")
    parser.add_argument("--port", type=int, default=8000, help="Bind port (default: 8000)")
    parser.add_argument(
        "--max-depth",
        type=int,
        default=2,
        help="Deepest tree level each search worker expands (default: 2)",
    )
    parser.add_argument(
        "--reply-timeout",
        type=float,
        default=30.0,
        help="Seconds to wait for the engine's reply (default: 30)",
    )
    parser.add_argument("--log-level", type=str, default="info", help="Logging level")
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    if args.max_depth < 0:
        raise SystemExit("--max-depth must be >= 0")
    logging.basicConfig(level=args.log_level.upper())
    app = create_app(max_depth=args.max_depth, reply_timeout_s=args.reply_timeout)
    uvicorn.run(app, host=args.host, port=args.port, log_level=args.log_level.lower())


if __name__ == "__main__":
    main()
