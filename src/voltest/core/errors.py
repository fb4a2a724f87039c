"""Exceptions raised while generating datatype and dataspace descriptors."""
from __future__ import annotations


class GenerationError(Exception):
    """Base class for every descriptor generation failure."""


class UnsupportedCategorySelected(GenerationError):
    """A drawn category cannot be produced in the current context.

    Raised by the per-category builders and consumed by the re-roll loop of
    :class:`voltest.generators.TypeDescriptorGenerator`; callers never see it.
    """

    def __init__(self, category: object, reason: str = "") -> None:
        self.category = category
        self.reason = reason
        message = f"category {category} not producible"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class ConstructionFailure(GenerationError):
    """A primitive construction step failed; fatal for the current call."""


class InvalidArgument(GenerationError, ValueError):
    """Bad rank, malformed bounds or an out-of-range limit."""


class RerollLimitExceeded(GenerationError):
    """Too many consecutive disallowed categories were drawn in one call."""

    def __init__(self, attempts: int) -> None:
        self.attempts = attempts
        super().__init__(f"no producible category drawn after {attempts} attempts")
