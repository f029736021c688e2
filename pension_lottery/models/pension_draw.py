"""Pension Lottery draws stored in one wide table.

Columns:
- round_id (PK)
- group_id
- digit1..digit6 (winning digits, most significant first)
- bonus1..bonus6 (bonus digits)
"""

from __future__ import annotations

from sqlalchemy import Integer, SmallInteger
from sqlalchemy.orm import Mapped, mapped_column

from pension_lottery.models.base import Base


class PensionDraw(Base):
    """One row per round: group, 6 digits and 6 bonus digits."""

    __tablename__ = "pension_draws"

    round_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    group_id: Mapped[int] = mapped_column(SmallInteger, nullable=False)

    digit1: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    digit2: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    digit3: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    digit4: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    digit5: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    digit6: Mapped[int] = mapped_column(SmallInteger, nullable=False)

    bonus1: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    bonus2: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    bonus3: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    bonus4: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    bonus5: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    bonus6: Mapped[int] = mapped_column(SmallInteger, nullable=False)

    def to_row(self) -> list[int]:
        return [
            int(self.round_id),
            int(self.group_id),
            int(self.digit1),
            int(self.digit2),
            int(self.digit3),
            int(self.digit4),
            int(self.digit5),
            int(self.digit6),
            int(self.bonus1),
            int(self.bonus2),
            int(self.bonus3),
            int(self.bonus4),
            int(self.bonus5),
            int(self.bonus6),
        ]

    @classmethod
    def from_row(cls, row: list[int]) -> "PensionDraw":
        return cls(
            round_id=row[0],
            group_id=row[1],
            digit1=row[2],
            digit2=row[3],
            digit3=row[4],
            digit4=row[5],
            digit5=row[6],
            digit6=row[7],
            bonus1=row[8],
            bonus2=row[9],
            bonus3=row[10],
            bonus4=row[11],
            bonus5=row[12],
            bonus6=row[13],
        )
