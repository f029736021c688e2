"""Repository layer for draw row persistence.

Both backends expose the same two operations over 14-integer rows:
``list_rows`` (whole collection, newest round first) and ``append_row``.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from collections.abc import Mapping
from pathlib import Path
from threading import Lock
from typing import Any

from flask import current_app
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pension_lottery.errors import ConflictError, StorageError
from pension_lottery.models.pension_draw import PensionDraw

logger = logging.getLogger(__name__)

_WRITE_LOCK = Lock()


def _sort_rows(rows: list[list[int]]) -> list[list[int]]:
    return sorted(rows, key=lambda r: r[0], reverse=True)


def _conflict(round_id: int) -> ConflictError:
    return ConflictError(
        message=f"Round {round_id} already exists",
        details={"round_id": round_id},
    )


def _check_new_rounds(existing: set[int], new_rows: list[list[int]]) -> None:
    seen = set(existing)
    for row in new_rows:
        if row[0] in seen:
            raise _conflict(row[0])
        seen.add(row[0])


class JsonFileDrawRepository:
    """Rows kept in a JSON array file (the original flat data file format)."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def initialize(self) -> bool:
        """Create an empty collection file if none exists. Returns True if created."""

        if self._path.exists():
            return False
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._write([])
        return True

    def list_rows(self, session: Session | None = None) -> list[list[int]]:
        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as exc:
            logger.error("Failed to read draw file %s: %s", self._path, exc)
            raise StorageError(
                message=f"Draw file could not be read: {self._path}",
                details={"reason": str(exc)},
            ) from exc

        try:
            data: Any = json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.error("Draw file %s is not valid JSON", self._path)
            raise StorageError(
                message=f"Draw file is corrupt: {self._path}",
                details={"reason": str(exc)},
            ) from exc

        if not isinstance(data, list) or any(not isinstance(row, list) or not row for row in data):
            raise StorageError(
                message=f"Draw file must hold an array of rows: {self._path}",
            )
        return data

    def _write(self, rows: list[list[int]]) -> None:
        fd, tmp_name = tempfile.mkstemp(prefix=".draws-", suffix=".json", dir=str(self._path.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(rows, fh, indent=2)
            os.replace(tmp_name, self._path)
        except OSError as exc:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StorageError(
                message=f"Draw file could not be written: {self._path}",
                details={"reason": str(exc)},
            ) from exc

    def append_row(self, session: Session | None, row: list[int]) -> list[list[int]]:
        return self.extend_rows(session, [row])

    def extend_rows(self, session: Session | None, new_rows: list[list[int]]) -> list[list[int]]:
        """Insert several rows with a single rewrite; any duplicate round rejects the whole batch."""

        with _WRITE_LOCK:
            rows = self.list_rows()
            _check_new_rounds({existing[0] for existing in rows}, new_rows)

            rows.extend(list(row) for row in new_rows)
            rows = _sort_rows(rows)
            self._write(rows)
            return rows


class SqlDrawRepository:
    """Rows kept in the ``pension_draws`` table."""

    def list_rows(self, session: Session | None = None) -> list[list[int]]:
        if session is None:
            raise RuntimeError("SQLAlchemy session required for sql backend")

        stmt = select(PensionDraw).order_by(PensionDraw.round_id.desc())
        try:
            return [draw.to_row() for draw in session.scalars(stmt).all()]
        except SQLAlchemyError as exc:
            logger.error("Failed to read draws from database: %s", exc)
            raise StorageError(message="Draw table could not be read", details={"reason": str(exc)}) from exc

    def append_row(self, session: Session | None, row: list[int]) -> list[list[int]]:
        return self.extend_rows(session, [row])

    def extend_rows(self, session: Session | None, new_rows: list[list[int]]) -> list[list[int]]:
        if session is None:
            raise RuntimeError("SQLAlchemy session required for sql backend")

        ids = [row[0] for row in new_rows]
        stored = session.scalars(select(PensionDraw.round_id).where(PensionDraw.round_id.in_(ids))).all()
        _check_new_rounds(set(stored), new_rows)

        session.add_all(PensionDraw.from_row(list(row)) for row in new_rows)
        session.flush()  # surface unique violations before the teardown commit
        return self.list_rows(session)


DrawRepository = JsonFileDrawRepository | SqlDrawRepository


def get_draw_repository(config: Mapping[str, Any]) -> DrawRepository:
    """Pick the repository for ``DATA_BACKEND`` ("file" | "sql")."""

    backend = str(config.get("DATA_BACKEND", "file")).lower().strip()
    if backend == "sql":
        return SqlDrawRepository()
    if backend == "file":
        return JsonFileDrawRepository(str(config.get("DATA_FILE", "./data/PensionLottery.json")))
    raise ValueError(f"Unknown DATA_BACKEND: {backend}")


def current_draw_repository() -> DrawRepository:
    """Repository registered on the running app by ``create_app``."""

    repo = current_app.extensions.get("draw_repository")
    if repo is None:
        repo = get_draw_repository(current_app.config)
        current_app.extensions["draw_repository"] = repo
    return repo
