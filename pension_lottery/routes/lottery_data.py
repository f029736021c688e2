"""Lottery data routes (controllers). No business logic here."""

from __future__ import annotations

from flask import Blueprint, request

from pension_lottery.db import get_optional_session
from pension_lottery.repositories.draw_repository import current_draw_repository
from pension_lottery.schemas.lottery_data import AppendDrawRequestSchema, DrawRecordSchema, RecordQuerySchema
from pension_lottery.services.lottery_data_service import LotteryDataService, RecordFilter
from pension_lottery.services.record_parser import get_data_statistics
from pension_lottery.utils.responses import ok

lottery_data_bp = Blueprint("lottery_data", __name__)

_append_schema = AppendDrawRequestSchema()
_query_schema = RecordQuerySchema()
_records_schema = DrawRecordSchema(many=True)


def data_service() -> LotteryDataService:
    return LotteryDataService(current_draw_repository())


def record_filter_from_args() -> RecordFilter:
    args = _query_schema.load(request.args.to_dict())
    return RecordFilter(
        include_bonus=bool(args["include_bonus"]),
        recent=args.get("recent"),
        start_round=args.get("start"),
        end_round=args.get("end"),
    )


@lottery_data_bp.get("/api/lottery-data")
def list_lottery_data():
    """Stored draws (newest first) plus a summary of their combined values.

    Query params: include_bonus, recent, start, end.
    """

    record_filter = record_filter_from_args()
    records = data_service().load_records(get_optional_session(), record_filter)

    return ok(
        {
            "records": _records_schema.dump(records),
            "summary": get_data_statistics(records),
        }
    )


@lottery_data_bp.post("/api/add-lottery-data")
def add_lottery_data():
    """Append one 14-integer row: ``{"newData": [round, group, d1..d6, b1..b6]}``."""

    payload = request.get_json(silent=True) or {}
    data = _append_schema.load(payload)

    result = data_service().append_row(get_optional_session(), data["new_data"])
    return ok(result, status_code=201)
