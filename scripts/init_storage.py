"""Prepare the configured draw storage.

With DATA_BACKEND=file an empty JSON array is written to DATA_FILE when the file
does not exist yet. With DATA_BACKEND=sql all registered ORM tables are created
in DATABASE_URL.

Usage:
  python scripts/init_storage.py
  python scripts/init_storage.py --backend sql
"""

from __future__ import annotations

import argparse
import os
import pathlib
import sys
from collections.abc import Sequence

from dotenv import load_dotenv

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT))

from pension_lottery.config import resolve_database_url
from pension_lottery.db import create_app_engine
from pension_lottery.models.base import Base
from pension_lottery.repositories.draw_repository import JsonFileDrawRepository

# Import models so they register with Base.metadata
from pension_lottery import models  # noqa: F401


def _load_env() -> None:
    load_dotenv()
    env_local = PROJECT_ROOT / ".env.local"
    if env_local.exists():
        load_dotenv(dotenv_path=env_local, override=True)


def main(argv: Sequence[str] | None = None) -> int:
    _load_env()

    parser = argparse.ArgumentParser(description="Create the draw file or draw tables")
    parser.add_argument("--backend", choices=("file", "sql"), default=os.getenv("DATA_BACKEND", "file").lower().strip())
    parser.add_argument("--data-file", dest="data_file", default=os.getenv("DATA_FILE", "./data/PensionLottery.json"))
    args = parser.parse_args(argv)

    if args.backend == "sql":
        engine = create_app_engine(resolve_database_url())
        Base.metadata.create_all(bind=engine)
        print("Tables created (or already exist).")
        return 0

    repo = JsonFileDrawRepository(args.data_file)
    if repo.initialize():
        print(f"Created empty draw file: {repo.path}")
    else:
        print(f"Draw file already exists: {repo.path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
