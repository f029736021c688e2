"""Prediction routes (controllers). No business logic here."""

from __future__ import annotations

import random

from flask import Blueprint, current_app, request

from pension_lottery.db import get_optional_session
from pension_lottery.errors import ValidationError
from pension_lottery.routes.lottery_data import data_service
from pension_lottery.schemas.lottery_data import PredictionRequestSchema
from pension_lottery.services.lottery_data_service import RecordFilter
from pension_lottery.services.prediction_service import PredictionService, describe_prediction
from pension_lottery.utils.responses import ok

prediction_bp = Blueprint("prediction", __name__)

_request_schema = PredictionRequestSchema()


@prediction_bp.post("/api/prediction")
def generate_predictions():
    """Generate ``count`` heuristic draws.

    Body: ``{"count": 1, "seed": null, "include_bonus": false, "recent": null}``.
    A seed makes the output reproducible.
    """

    payload = request.get_json(silent=True) or {}
    data = _request_schema.load(payload)

    count = int(data["count"])
    max_count = int(current_app.config.get("PREDICTION_MAX_COUNT", 20))
    if count > max_count:
        raise ValidationError(
            message="Invalid count",
            details={"count": [f"Must be <= {max_count}"]},
        )

    record_filter = RecordFilter(
        include_bonus=bool(data["include_bonus"]),
        recent=data.get("recent"),
        start_round=data.get("start"),
        end_round=data.get("end"),
    )
    records = data_service().load_records(get_optional_session(), record_filter)

    seed = data.get("seed")
    service = PredictionService(rng=random.Random(seed) if seed is not None else None)

    predictions = []
    for _ in range(count):
        result = service.generate(records)
        predictions.append({"result": result, "insight": describe_prediction(result.digits, records)})

    return ok({"count": count, "total_records": len(records), "predictions": predictions})
