"""Use-cases over the stored draw collection: load, filter, append."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from pension_lottery.repositories.draw_repository import DrawRepository
from pension_lottery.services.record_parser import (
    DrawRecord,
    expand_bonus,
    get_data_by_range,
    get_recent_data,
    parse_lottery_data,
    validate_row,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecordFilter:
    include_bonus: bool = False
    recent: int | None = None
    start_round: int | None = None
    end_round: int | None = None


@dataclass(frozen=True)
class AppendResult:
    round_id: int
    total_count: int
    message: str


class LotteryDataService:
    """Load and append Pension Lottery rows through a repository."""

    def __init__(self, repository: DrawRepository) -> None:
        self._repo = repository

    def load_rows(self, session: Session | None) -> list[list[int]]:
        return self._repo.list_rows(session)

    def load_records(self, session: Session | None, record_filter: RecordFilter | None = None) -> list[DrawRecord]:
        """Parse the full collection, then narrow it.

        The round range applies first, then ``recent`` keeps the newest rounds;
        bonus records are added last so ``recent`` always counts rounds.
        """

        f = record_filter or RecordFilter()
        records = parse_lottery_data(self.load_rows(session))
        records.sort(key=lambda r: r.round_id, reverse=True)

        if f.start_round is not None or f.end_round is not None:
            start = f.start_round if f.start_round is not None else min((r.round_id for r in records), default=0)
            end = f.end_round if f.end_round is not None else max((r.round_id for r in records), default=0)
            records = get_data_by_range(records, start, end)
        if f.recent is not None:
            records = get_recent_data(records, f.recent)

        return expand_bonus(records) if f.include_bonus else records

    def append_row(self, session: Session | None, row: object) -> AppendResult:
        """Validate, reject duplicates, persist; the stored collection stays newest first."""

        clean = validate_row(row)
        rows = self._repo.append_row(session, clean)
        logger.info("Appended round %s (total=%s)", clean[0], len(rows))

        return AppendResult(
            round_id=clean[0],
            total_count=len(rows),
            message=f"Round {clean[0]} was added",
        )

    def append_rows(self, session: Session | None, rows: list[object]) -> AppendResult:
        """Validate every row first, then persist the batch in one storage write."""

        clean = [validate_row(row) for row in rows]
        stored = self._repo.extend_rows(session, clean)
        logger.info("Appended %s rounds (total=%s)", len(clean), len(stored))

        return AppendResult(
            round_id=max((row[0] for row in clean), default=0),
            total_count=len(stored),
            message=f"{len(clean)} rounds were added",
        )
