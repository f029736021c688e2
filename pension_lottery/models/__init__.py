"""ORM models."""

from pension_lottery.models.pension_draw import PensionDraw

__all__ = ["PensionDraw"]
