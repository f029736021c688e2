from __future__ import annotations

import json

import pytest

from pension_lottery import create_app
from pension_lottery.services.record_parser import DrawRecord, parse_lottery_data

SAMPLE_ROWS = [
    [6, 4, 7, 1, 5, 9, 0, 2, 3, 8, 4, 6, 0, 9],
    [5, 1, 2, 6, 8, 4, 4, 3, 0, 4, 2, 7, 5, 8],
    [4, 3, 9, 0, 1, 7, 5, 6, 8, 3, 0, 9, 6, 2],
    [3, 2, 5, 8, 2, 0, 6, 1, 1, 6, 8, 5, 3, 7],
    [2, 5, 6, 2, 9, 3, 1, 7, 4, 9, 7, 1, 2, 0],
    [1, 4, 8, 7, 6, 5, 3, 9, 7, 2, 9, 4, 8, 3],
]


def make_record(round_id: int, digits: str, group_id: int = 1) -> DrawRecord:
    return DrawRecord(round_id=round_id, group_id=group_id, digits=tuple(int(ch) for ch in digits))


class ConstantRandom:
    """RandomSource that always returns the same value."""

    def __init__(self, value: float) -> None:
        self.value = value
        self.calls = 0

    def random(self) -> float:
        self.calls += 1
        return self.value


@pytest.fixture
def sample_records() -> list[DrawRecord]:
    return parse_lottery_data(SAMPLE_ROWS)


@pytest.fixture
def data_file(tmp_path):
    path = tmp_path / "PensionLottery.json"
    path.write_text(json.dumps(SAMPLE_ROWS), encoding="utf-8")
    return path


@pytest.fixture
def app(data_file):
    return create_app(
        {
            "TESTING": True,
            "DATA_BACKEND": "file",
            "DATA_FILE": str(data_file),
            "LOG_LEVEL": "WARNING",
        }
    )


@pytest.fixture
def client(app):
    return app.test_client()
