"""Core primitives shared by the batch workflow."""

from .rate_limiter import Pacer

__all__ = ["Pacer"]
