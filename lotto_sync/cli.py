"""Command line entrypoint.

Usage:
  lotto-sync sync                      # catch up from the latest stored draw
  lotto-sync sync --max 10 --delay 0   # at most 10 draws, no pacing
  lotto-sync init-db [--reset]
  lotto-sync load-json data/lotto-history.json

Exit code is 0 whenever a sync run stops normally (including when the
upstream has nothing new) and 1 on fatal storage failures or a --start past
the next missing draw.
"""

from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import pathlib
from collections.abc import Sequence
from typing import Any

from dotenv import load_dotenv
from tqdm import tqdm

from lotto_sync.db import build_store
from lotto_sync.errors import InitializationError, PayloadValidationError, StorageError
from lotto_sync.logging_config import setup_logging
from lotto_sync.services.validator import DrawValidator


logger = logging.getLogger(__name__)


def _load_env() -> None:
    load_dotenv()
    p = pathlib.Path(".env.local")
    if p.exists():
        load_dotenv(dotenv_path=p, override=True)


def _positive_int(raw: str) -> int:
    value = int(raw)
    if value < 1:
        raise argparse.ArgumentTypeError("must be >= 1")
    return value


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="lotto-sync", description="Sync lotto draws into the database")
    parser.add_argument(
        "--database-url",
        dest="database_url",
        type=str,
        default=None,
        help="Override DB connection string (e.g. sqlite:///./lotto.db)",
    )
    parser.add_argument("--log-level", dest="log_level", type=str, default=None)
    sub = parser.add_subparsers(dest="command", required=True)

    sync = sub.add_parser("sync", help="Fetch draws after the latest stored one")
    sync.add_argument("--source-url", dest="source_url", type=str, default=None, help="URL template with {draw_no}")
    sync.add_argument("--delay", dest="delay_seconds", type=float, default=None, help="Seconds between draws")
    sync.add_argument("--timeout", dest="timeout_seconds", type=float, default=None)
    sync.add_argument("--max", dest="max_records", type=_positive_int, default=None, help="Stop after N draws")
    sync.add_argument("--start", dest="start_at", type=_positive_int, default=None, help="Start from this draw")
    sync.set_defaults(handler=_cmd_sync)

    init = sub.add_parser("init-db", help="Create the draw table")
    init.add_argument("--reset", action="store_true", help="Drop & recreate before creating (DANGEROUS)")
    init.set_defaults(handler=_cmd_init_db)

    load = sub.add_parser("load-json", help="Insert draws from a JSON array of upstream payloads")
    load.add_argument("path", type=pathlib.Path)
    load.set_defaults(handler=_cmd_load_json)

    return parser


def _resolve_config(args: argparse.Namespace) -> dict[str, Any]:
    # Imported here so .env is loaded before the config classes read os.environ.
    from lotto_sync.config import get_config

    config = dataclasses.asdict(get_config()())
    if args.database_url:
        config["DATABASE_URL"] = str(args.database_url)
        config["DB_BACKEND"] = "sql"
    if args.log_level:
        config["LOG_LEVEL"] = str(args.log_level)

    overrides = {
        "SOURCE_URL_TEMPLATE": getattr(args, "source_url", None),
        "SYNC_DELAY_SECONDS": getattr(args, "delay_seconds", None),
        "SOURCE_TIMEOUT_SECONDS": getattr(args, "timeout_seconds", None),
    }
    config.update({k: v for k, v in overrides.items() if v is not None})
    return config


def _open_store(config: dict[str, Any], *, reset: bool = False):  # type: ignore[no-untyped-def]
    try:
        return build_store(config, create_schema=True, reset=reset)
    except StorageError as exc:
        raise InitializationError("Cannot reach draw storage") from exc


def _cmd_sync(args: argparse.Namespace, config: dict[str, Any]) -> int:
    from lotto_sync.services.sync_service import build_sync_service

    store = _open_store(config)
    with build_sync_service(config, store) as service:
        try:
            result = service.run(max_records=args.max_records, start_at=args.start_at)
        except ValueError as exc:
            logger.error("Cannot start sync: %s", exc)
            return 1
    return 1 if result.fatal else 0


def _cmd_init_db(args: argparse.Namespace, config: dict[str, Any]) -> int:
    _open_store(config, reset=bool(args.reset))
    logger.info("Tables created (or already exist).")
    return 0


def _cmd_load_json(args: argparse.Namespace, config: dict[str, Any]) -> int:
    path: pathlib.Path = args.path
    try:
        items = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logger.error("Cannot read %s: %s", path, exc)
        return 1
    if not isinstance(items, list):
        logger.error("%s must contain a JSON array of draws", path)
        return 1

    store = _open_store(config)
    validator = DrawValidator()

    inserted = 0
    existing = 0
    rejected = 0
    for item in tqdm(items, desc="Loading"):
        try:
            record = validator.validate(item)
        except PayloadValidationError as exc:
            logger.warning("Skipping entry: %s", exc.messages)
            rejected += 1
            continue

        if store.upsert(record):
            inserted += 1
        else:
            existing += 1

    logger.info(
        "Loaded %s: inserted %s, already stored %s, rejected %s | latest #%s, total %s",
        path,
        inserted,
        existing,
        rejected,
        store.latest_key(),
        store.count(),
    )
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    _load_env()
    config = _resolve_config(args)
    setup_logging(str(config.get("LOG_LEVEL") or "INFO"))

    try:
        return int(args.handler(args, config))
    except InitializationError as exc:
        logger.error("%s: %s", exc, exc.__cause__)
        return 1
    except StorageError:
        logger.exception("Storage failure")
        return 1
    except Exception:
        logger.exception("Unexpected failure")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
