"""Schemas for the lottery data API."""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, ValidationError, fields, validate, validates_schema

from pension_lottery.services.record_parser import ROW_LENGTH
from pension_lottery.services.transition_service import TREND_THRESHOLD

FIELD_LABELS = [
    "round",
    "group",
    "digit1",
    "digit2",
    "digit3",
    "digit4",
    "digit5",
    "digit6",
    "bonus1",
    "bonus2",
    "bonus3",
    "bonus4",
    "bonus5",
    "bonus6",
]


class AppendDrawRequestSchema(Schema):
    new_data = fields.List(
        fields.Integer(strict=True),
        required=True,
        data_key="newData",
        validate=validate.Length(equal=ROW_LENGTH),
    )

    @validates_schema
    def _validate_ranges(self, data, **kwargs):  # type: ignore[no-untyped-def]
        row = data.get("new_data") or []
        if len(row) != ROW_LENGTH:
            return

        problems: list[str] = []
        if row[0] < 1:
            problems.append("round must be >= 1")
        if not 1 <= row[1] <= 5:
            problems.append("group must be within 1..5")
        bad = [FIELD_LABELS[i] for i in range(2, ROW_LENGTH) if not 0 <= row[i] <= 9]
        if bad:
            problems.append(f"digits must be within 0..9 (bad fields: {', '.join(bad)})")
        if problems:
            raise ValidationError({"newData": problems})


class RecordQuerySchema(Schema):
    class Meta:
        unknown = EXCLUDE

    include_bonus = fields.Boolean(required=False, load_default=False)
    recent = fields.Integer(required=False, load_default=None, validate=validate.Range(min=1))
    start = fields.Integer(required=False, load_default=None, validate=validate.Range(min=1))
    end = fields.Integer(required=False, load_default=None, validate=validate.Range(min=1))

    @validates_schema
    def _validate_range(self, data, **kwargs):  # type: ignore[no-untyped-def]
        start = data.get("start")
        end = data.get("end")
        if start is not None and end is not None and start > end:
            raise ValidationError({"start": ["start must be <= end"]})


class PredictionRequestSchema(RecordQuerySchema):
    count = fields.Integer(required=False, load_default=1, validate=validate.Range(min=1, max=100))
    seed = fields.Integer(required=False, load_default=None, allow_none=True)


class DrawRecordSchema(Schema):
    round_id = fields.Int(required=True)
    group_id = fields.Int(required=True)
    digits = fields.List(fields.Int(), required=True)
    bonus_digits = fields.List(fields.Int(), required=True)
    is_bonus = fields.Bool(required=True)
    combined_value = fields.Int(dump_only=True)
    digit_sum = fields.Int(dump_only=True)


class TrendQuerySchema(Schema):
    class Meta:
        unknown = EXCLUDE

    threshold = fields.Integer(required=False, load_default=TREND_THRESHOLD, validate=validate.Range(min=0))
