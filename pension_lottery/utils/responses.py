"""Helpers for consistent JSON response schema."""

from __future__ import annotations

from dataclasses import asdict, is_dataclass
from typing import Any

from flask import Response, jsonify


def to_payload(data: Any) -> Any:
    """Turn result dataclasses (or lists/dicts of them) into JSON-ready values."""

    if is_dataclass(data) and not isinstance(data, type):
        return asdict(data)
    if isinstance(data, (list, tuple)):
        return [to_payload(item) for item in data]
    if isinstance(data, dict):
        return {key: to_payload(value) for key, value in data.items()}
    return data


def ok(data: Any, status_code: int = 200) -> tuple[Response, int]:
    """Success response."""

    return jsonify({"success": True, "data": to_payload(data), "error": None}), status_code


def fail(code: str, message: str, status_code: int, details: Any | None = None) -> tuple[Response, int]:
    """Error response."""

    return (
        jsonify(
            {
                "success": False,
                "data": None,
                "error": {"code": code, "message": message, "details": details},
            }
        ),
        status_code,
    )
