import argparse
import logging
import re

import uvicorn

from lyricdb.config import settings

INTERVAL_UNITS = {"": 1, "s": 1, "m": 60, "h": 3600}


def parse_interval(value: str) -> float:
    """Seconds from "600", "30s", "10m" or "1h"."""
    match = re.fullmatch(r"\s*(\d+(?:\.\d+)?)\s*([smh]?)\s*", str(value).lower())
    if not match:
        raise argparse.ArgumentTypeError(f"invalid interval: {value!r}")
    seconds = float(match.group(1)) * INTERVAL_UNITS[match.group(2)]
    if seconds <= 0:
        raise argparse.ArgumentTypeError("interval must be positive")
    return seconds


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Lyric dataset search API server")
    parser.add_argument("--no-sync", action="store_true", help="Disable git sync and use local data only")
    parser.add_argument("--no-download", action="store_true", help="Disable the download API")
    parser.add_argument("--data-dir", default=str(settings.DATA_DIR), help="Preferred path to the data directory")
    parser.add_argument(
        "--interval",
        type=parse_interval,
        default=settings.SYNC_INTERVAL_SEC,
        help="Interval for automatic sync (e.g. 600, 10m, 1h)",
    )
    parser.add_argument("--host", default=settings.API_HOST)
    parser.add_argument("--port", type=int, default=settings.API_PORT)
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL, logging.INFO),
        format="[%(levelname)s] %(asctime)s %(message)s",
    )
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    from lyricdb.api.main import create_app
    from lyricdb.service import build_service

    service = build_service(
        data_dir=args.data_dir,
        sync_enabled=settings.SYNC_ENABLED and not args.no_sync,
        download_enabled=settings.DOWNLOAD_ENABLED and not args.no_download,
        sync_interval=args.interval,
    )
    app = create_app(service)

    logging.getLogger(__name__).info("Server is listening on %s:%d", args.host, args.port)
    uvicorn.run(app, host=args.host, port=args.port, log_config=None)


if __name__ == "__main__":
    main()
