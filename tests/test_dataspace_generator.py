from __future__ import annotations

import numpy as np
import pytest

from voltest.core import UNLIMITED, GeneratorLimits, InvalidArgument
from voltest.generators import ShapeGenerator, generate_shape
from voltest.suite.checks import check_shape


def test_scalar_shape_draws_nothing(scripted) -> None:
    rng = scripted([])
    shape = generate_shape(0, rng=rng)
    assert shape.extents == ()
    assert shape.rank == 0
    assert shape.npoints == 1
    assert shape.describe() == "scalar"
    assert rng.calls == []


def test_extents_come_from_draws(scripted) -> None:
    rng = scripted([3, 16])
    shape = generate_shape(2, rng=rng)
    assert shape.extents == (3, 16)
    assert shape.max_extents is None
    assert rng.calls == [(1, 17), (1, 17)]


def test_max_extents_pass_through_unclamped(scripted) -> None:
    shape = generate_shape(2, [2, UNLIMITED], rng=scripted([10, 5]))
    assert shape.extents == (10, 5)
    assert shape.max_extents == (2, UNLIMITED)
    assert shape.to_dict()["max_extents"] == [2, "unlimited"]
    assert shape.describe() == "10x5 (max 2xinf)"


def test_custom_dim_limit(scripted) -> None:
    rng = scripted([1])
    generate_shape(1, rng=rng, limits=GeneratorLimits(max_dim_size=4))
    assert rng.calls == [(1, 5)]


@pytest.mark.parametrize("rank", [-1, 33, "2", 1.5, True, False])
def test_invalid_rank_rejected(rank) -> None:
    with pytest.raises(InvalidArgument):
        generate_shape(rank, rng=np.random.default_rng(0))


def test_invalid_rank_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        generate_shape(-5, rng=np.random.default_rng(0))


@pytest.mark.parametrize(
    "max_extents",
    [
        [4],
        [4, 4, 4],
        [0, 4],
        [-2, 4],
        ["x", 4],
        [True, 4],
    ],
)
def test_malformed_max_extents_rejected(max_extents) -> None:
    with pytest.raises(InvalidArgument):
        generate_shape(2, max_extents, rng=np.random.default_rng(0))


def test_max_rank_is_accepted() -> None:
    shape = generate_shape(32, rng=np.random.default_rng(5))
    assert shape.rank == 32
    assert check_shape(shape, 32) == []


def test_random_shapes_stay_in_bounds() -> None:
    generator = ShapeGenerator(np.random.default_rng(11))
    for rank in range(33):
        for _ in range(20):
            shape = generator.generate_shape(rank)
            assert check_shape(shape, rank) == []
            assert all(1 <= dim <= 16 for dim in shape.extents)
