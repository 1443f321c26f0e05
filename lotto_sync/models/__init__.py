"""ORM models."""

from lotto_sync.models.lotto_draw import LottoDraw

__all__ = ["LottoDraw"]
