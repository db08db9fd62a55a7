"""Command line entry point: open the viewer or serve the scene over HTTP."""
from __future__ import annotations

import argparse
import os

from .constants import FPS
from .logging_config import configure_logging

DEBUG_ENV = "WATERSKETCH_DEBUG"


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in ("1", "true", "yes", "on")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="watersketch", description="Animated water scene: click to capture fish")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the initial school (reproducible layout)")
    parser.add_argument("--fps", type=int, default=FPS, help="Viewer frame rate")
    parser.add_argument(
        "--debug",
        action="store_true",
        default=_env_flag(DEBUG_ENV),
        help=f"Show the parameter sliders and fail fast on invalid state (also {DEBUG_ENV}=1)",
    )
    parser.add_argument("--serve", action="store_true", help="Run the HTTP/WebSocket server instead of a window")
    parser.add_argument("--host", default="127.0.0.1", help="Server bind address")
    parser.add_argument("--port", type=int, default=8000, help="Server port")
    parser.add_argument("--log-level", default=None, help="Log level (default: $WATERSKETCH_LOG_LEVEL or INFO)")
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level, include_uvicorn=args.serve)

    if args.serve:
        import uvicorn

        from .server import create_app

        uvicorn.run(create_app(seed=args.seed, strict=args.debug), host=args.host, port=args.port)
        return

    from .renderer import run_viewer

    run_viewer(seed=args.seed, fps=args.fps, debug=args.debug)


if __name__ == "__main__":
    main()
