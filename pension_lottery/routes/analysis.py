"""Analysis routes (controllers). No business logic here.

Every endpoint accepts the record filters of ``/api/lottery-data``
(include_bonus, recent, start, end) and recomputes from the stored collection.
"""

from __future__ import annotations

from flask import Blueprint, request

from pension_lottery.db import get_optional_session
from pension_lottery.routes.lottery_data import data_service, record_filter_from_args
from pension_lottery.schemas.lottery_data import TrendQuerySchema
from pension_lottery.services.analysis_service import AnalysisService, chronological_numbers
from pension_lottery.services.digit_sum_service import analyze_digit_sum
from pension_lottery.services.duplicate_pattern_service import (
    analyze_duplicate_frequency,
    analyze_duplicate_patterns,
    analyze_duplicate_position_patterns,
)
from pension_lottery.services.position_frequency_service import analyze_position_frequency
from pension_lottery.services.record_parser import DrawRecord
from pension_lottery.services.statistics_service import analyze_numbers
from pension_lottery.services.transition_service import (
    analyze_position_transition,
    analyze_round_comparison,
    analyze_trend,
)
from pension_lottery.utils.responses import ok

analysis_bp = Blueprint("analysis", __name__, url_prefix="/api/analysis")

_trend_schema = TrendQuerySchema()


def _service() -> AnalysisService:
    return AnalysisService(data_service())


def _records() -> list[DrawRecord]:
    return _service().records(get_optional_session(), record_filter_from_args())


@analysis_bp.get("")
def get_snapshot():
    """Every analysis in one response."""

    return ok(_service().snapshot(get_optional_session(), record_filter_from_args()))


@analysis_bp.get("/statistics")
def get_statistics():
    records = _records()
    return ok(analyze_numbers(chronological_numbers(records)))


@analysis_bp.get("/positions")
def get_position_frequency():
    return ok({"positions": analyze_position_frequency(_records())})


@analysis_bp.get("/digit-sum")
def get_digit_sum():
    return ok(analyze_digit_sum(_records()))


@analysis_bp.get("/duplicates")
def get_duplicates():
    records = _records()
    return ok(
        {
            "patterns": analyze_duplicate_patterns(records),
            "positions": analyze_duplicate_position_patterns(records),
            "frequency": analyze_duplicate_frequency(records),
        }
    )


@analysis_bp.get("/comparison")
def get_round_comparison():
    return ok(analyze_round_comparison(_records()))


@analysis_bp.get("/transitions")
def get_position_transitions():
    return ok(analyze_position_transition(_records()))


@analysis_bp.get("/trend")
def get_trend():
    """Per-round change labelled up/down/stable against ``threshold`` (default 10000)."""

    args = _trend_schema.load(request.args.to_dict())
    return ok(analyze_trend(_records(), threshold=args["threshold"]))
