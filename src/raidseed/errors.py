from __future__ import annotations

__all__ = ["InvalidTemplateError"]


class InvalidTemplateError(ValueError):
    """A template field is outside its documented domain."""
