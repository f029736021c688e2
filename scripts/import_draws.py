"""Import Pension Lottery rows into the configured draw storage.

The source is a JSON array of 14-integer rows
(``[round, group, d1..d6, b1..b6]``), read from a local path or fetched over
HTTP(S).

Usage:
  python scripts/import_draws.py data/PensionLottery.json
  python scripts/import_draws.py https://example.org/PensionLottery.json --skip-existing

Options:
  --backend file|sql   (default: DATA_BACKEND)
  --skip-existing      skip rounds already stored instead of failing
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import pathlib
import sys
from collections.abc import Sequence
from typing import Any

import requests
from dotenv import load_dotenv
from marshmallow import ValidationError as MarshmallowValidationError
from requests.adapters import HTTPAdapter
from sqlalchemy.orm import Session, sessionmaker
from tqdm import tqdm
from urllib3.util.retry import Retry

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT))

from pension_lottery.config import resolve_database_url
from pension_lottery.db import create_app_engine
from pension_lottery.errors import AppError
from pension_lottery.logging_config import configure_script_logging
from pension_lottery.models.base import Base
from pension_lottery.repositories.draw_repository import JsonFileDrawRepository, SqlDrawRepository
from pension_lottery.schemas.lottery_data import AppendDrawRequestSchema
from pension_lottery.services.lottery_data_service import LotteryDataService


logger = logging.getLogger(__name__)


def _build_http_session(retries: int, backoff_factor: float) -> requests.Session:
    """Create a requests session with retry/backoff for transient network errors."""

    retry = Retry(
        total=retries,
        connect=retries,
        read=retries,
        status=retries,
        backoff_factor=backoff_factor,
        status_forcelist=(429, 500, 502, 503, 504),
        allowed_methods=("GET",),
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retry)

    session = requests.Session()
    session.headers.update({"User-Agent": "pension-lottery-import/0.1"})
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


def _load_env() -> None:
    load_dotenv()
    env_local = PROJECT_ROOT / ".env.local"
    if env_local.exists():
        load_dotenv(dotenv_path=env_local, override=True)


def _read_source(source: str, *, retries: int, backoff: float, timeout_seconds: float) -> list[Any]:
    if source.startswith(("http://", "https://")):
        http = _build_http_session(retries=retries, backoff_factor=backoff)
        resp = http.get(source, timeout=timeout_seconds)
        resp.raise_for_status()
        payload: Any = resp.json()
    else:
        payload = json.loads(pathlib.Path(source).read_text(encoding="utf-8"))

    if not isinstance(payload, list):
        raise ValueError(f"Source must be a JSON array of rows: {source}")
    return payload


def _import_rows(
    service: LotteryDataService,
    session: Session | None,
    rows: list[Any],
    *,
    skip_existing: bool,
) -> tuple[int, int]:
    schema = AppendDrawRequestSchema()
    existing = {row[0] for row in service.load_rows(session)}

    pending: list[list[int]] = []
    skipped = 0
    for row in tqdm(rows, desc="Validating", unit="round"):
        try:
            clean = schema.load({"newData": row})["new_data"]
        except MarshmallowValidationError as exc:
            raise ValueError(f"Invalid row {row}: {exc.messages}") from exc

        if clean[0] in existing:
            if skip_existing:
                skipped += 1
                continue
            raise ValueError(f"Round {clean[0]} already exists (use --skip-existing)")

        pending.append(clean)
        existing.add(clean[0])

    if pending:
        service.append_rows(session, pending)
    return len(pending), skipped


def main(argv: Sequence[str] | None = None) -> int:
    _load_env()

    parser = argparse.ArgumentParser(description="Import Pension Lottery rows into draw storage")
    parser.add_argument("source", help="Path or URL of a JSON array of 14-integer rows")
    parser.add_argument("--backend", choices=("file", "sql"), default=os.getenv("DATA_BACKEND", "file").lower().strip())
    parser.add_argument("--data-file", dest="data_file", default=os.getenv("DATA_FILE", "./data/PensionLottery.json"))
    parser.add_argument("--timeout", dest="timeout_seconds", type=float, default=10.0)
    parser.add_argument("--retries", dest="retries", type=int, default=3)
    parser.add_argument("--backoff", dest="backoff", type=float, default=0.3)
    parser.add_argument("--skip-existing", action="store_true")
    args = parser.parse_args(argv)

    configure_script_logging(os.getenv("LOG_LEVEL", "INFO"))

    rows = _read_source(
        args.source,
        retries=args.retries,
        backoff=args.backoff,
        timeout_seconds=float(args.timeout_seconds),
    )
    logger.info("Loaded %s rows from %s", len(rows), args.source)

    try:
        if args.backend == "sql":
            database_url = resolve_database_url()
            engine = create_app_engine(database_url)
            Base.metadata.create_all(bind=engine)
            session_factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)

            logger.info("Database: %s", engine.url.render_as_string(hide_password=True))
            with session_factory() as session:
                with session.begin():
                    service = LotteryDataService(SqlDrawRepository())
                    imported, skipped = _import_rows(service, session, rows, skip_existing=args.skip_existing)
        else:
            repo = JsonFileDrawRepository(args.data_file)
            repo.initialize()
            logger.info("Draw file: %s", repo.path)
            service = LotteryDataService(repo)
            imported, skipped = _import_rows(service, None, rows, skip_existing=args.skip_existing)
    except (AppError, ValueError) as exc:
        logger.error("Import failed: %s", exc)
        return 1

    logger.info("Imported %s rounds (skipped %s)", imported, skipped)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
