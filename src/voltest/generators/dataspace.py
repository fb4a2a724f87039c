"""Random dataspace (shape) generation."""
from __future__ import annotations

import operator
from typing import Optional, Sequence, Tuple

from voltest.core.errors import InvalidArgument
from voltest.core.limits import GeneratorLimits
from voltest.core.models import UNLIMITED, ShapeDescriptor

from .base import RandomSource, draw, make_rng


class ShapeGenerator:
    """Draws extents in ``[1, max_dim_size]`` for a requested rank."""

    def __init__(self, rng: Optional[RandomSource] = None, *, limits: Optional[GeneratorLimits] = None) -> None:
        self._rng = rng if rng is not None else make_rng()
        self.limits = limits or GeneratorLimits()

    def generate_shape(self, rank: int, max_extents: Optional[Sequence[int]] = None) -> ShapeDescriptor:
        """Return a fresh shape of ``rank`` dimensions.

        ``max_extents`` is passed through untouched; extents are not clamped
        to it.
        """

        rank = self._check_rank(rank)
        bounds = self._check_bounds(rank, max_extents)
        extents = tuple(draw(self._rng, 1, self.limits.max_dim_size + 1) for _ in range(rank))
        return ShapeDescriptor(extents=extents, max_extents=bounds)

    def _check_rank(self, rank: int) -> int:
        if isinstance(rank, bool):
            raise InvalidArgument(f"rank must be an integer, got {rank!r}")
        try:
            value = operator.index(rank)
        except TypeError as exc:
            raise InvalidArgument(f"rank must be an integer, got {rank!r}") from exc
        if value < 0 or value > self.limits.max_rank:
            raise InvalidArgument(f"rank {value} outside [0, {self.limits.max_rank}]")
        return value

    def _check_bounds(self, rank: int, max_extents: Optional[Sequence[int]]) -> Optional[Tuple[int, ...]]:
        if max_extents is None:
            return None
        bounds = tuple(max_extents)
        if len(bounds) != rank:
            raise InvalidArgument(f"max_extents has {len(bounds)} entries, expected {rank}")
        checked = []
        for dim in bounds:
            if isinstance(dim, bool):
                raise InvalidArgument(f"max extent must be an integer, got {dim!r}")
            try:
                value = operator.index(dim)
            except TypeError as exc:
                raise InvalidArgument(f"max extent must be an integer, got {dim!r}") from exc
            if value != UNLIMITED and value < 1:
                raise InvalidArgument(f"max extent {value} must be positive or UNLIMITED")
            checked.append(value)
        return tuple(checked)


def generate_shape(
    rank: int,
    max_extents: Optional[Sequence[int]] = None,
    *,
    rng: Optional[RandomSource] = None,
    limits: Optional[GeneratorLimits] = None,
) -> ShapeDescriptor:
    """One-shot helper around :class:`ShapeGenerator`."""

    return ShapeGenerator(rng, limits=limits).generate_shape(rank, max_extents)
