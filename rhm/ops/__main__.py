#!/usr/bin/env python
"""
Run the RHM ops server.

Serves /api/admin/health, /health, /ready and /metrics, and records a health
snapshot every --snapshot-interval minutes.

Usage:
    python -m rhm.ops
    python -m rhm.ops --port 9090 --snapshot-interval 5
    python -m rhm.ops --init-db
"""

import argparse
import sys
from pathlib import Path

from loguru import logger

from rhm.utils.config import get_config
from rhm.utils.log_filter import mask_record

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level:<8} | {message}"


def _setup_logging(level: str, log_file: str | None = None) -> None:
    """Configure loguru for stderr and an optional rotating file, secrets masked."""
    logger.remove()
    logger.configure(patcher=mask_record)
    logger.add(sys.stderr, level=level, format=LOG_FORMAT)

    if log_file:
        path = Path(log_file).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            str(path),
            rotation="10 MB",
            retention="30 days",
            level=level,
            format=LOG_FORMAT,
        )


def main(argv: list[str] | None = None) -> int:
    config = get_config()

    parser = argparse.ArgumentParser(
        description="Run the RHM admin health server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--host", type=str, default="0.0.0.0", help="Bind address (default: 0.0.0.0)")
    parser.add_argument("--port", type=int, default=8080, help="Port (default: 8080)")
    parser.add_argument(
        "--snapshot-interval",
        type=int,
        default=config.health.snapshot_interval_minutes,
        help="Minutes between background health snapshots, 0 disables "
        f"(default: {config.health.snapshot_interval_minutes})",
    )
    parser.add_argument(
        "--init-db",
        action="store_true",
        help="Create the pipeline tables in the configured database and exit",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        default=str(config.data.logs_dir / "ops.log"),
        help="Log file path (default: ~/rhm-data/logs/ops.log)",
    )

    args = parser.parse_args(argv)
    _setup_logging(config.log_level, args.log_file)

    if args.init_db:
        from rhm.data.schema import init_schema

        init_schema(str(config.data.db_path))
        return 0

    from rhm.ops.scheduler import SnapshotScheduler
    from rhm.ops.server import build_service, create_app, run_server

    service = build_service(config)
    app = create_app(service=service, config=config)

    scheduler = None
    if args.snapshot_interval > 0:
        scheduler = SnapshotScheduler(service, interval_minutes=args.snapshot_interval)
        scheduler.start()

    logger.info(f"Starting RHM ops server on {args.host}:{args.port}")
    try:
        run_server(host=args.host, port=args.port, app=app)
    finally:
        if scheduler is not None:
            scheduler.shutdown(wait=False)

    return 0


if __name__ == "__main__":
    sys.exit(main())
