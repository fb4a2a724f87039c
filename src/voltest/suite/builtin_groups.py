"""Built-in test groups exercising the datatype and dataspace generators."""
from __future__ import annotations

import logging

from voltest.core import UNLIMITED, GenerationError, InvalidArgument

from .checks import check_datatype, check_shape
from .models import ProbeContext

_logger = logging.getLogger(__name__)

DEFAULT_ITERATIONS = 100


def datatype_group(context: ProbeContext) -> int:
    """Generate ``iterations`` datatypes, validate and release each one."""

    iterations = int(context.params.get("iterations", DEFAULT_ITERATIONS))
    errors = 0
    oversized = 0
    for index in range(iterations):
        try:
            dtype = context.generate_type()
        except GenerationError as exc:
            _logger.error("datatype %d: generation failed: %s", index, exc)
            errors += 1
            continue
        with context.factory.closing(dtype):
            problems = check_datatype(dtype, context.limits)
            if dtype.size > context.limits.datatype_max_size:
                oversized += 1
            _logger.debug("datatype %d: %s (%d bytes)", index, dtype.describe(), dtype.size)
        if problems:
            errors += 1
            for problem in problems:
                _logger.error("datatype %d: %s", index, problem)
    if context.factory.open_count:
        _logger.error("%d datatype handle(s) leaked", context.factory.open_count)
        errors += 1
    if oversized:
        _logger.info(
            "%d of %d datatypes exceed %d bytes", oversized, iterations, context.limits.datatype_max_size
        )
    return errors


def dataspace_group(context: ProbeContext) -> int:
    """Generate a shape for every legal rank and make sure bad ranks are refused."""

    errors = 0
    max_rank = context.limits.max_rank
    for rank in range(max_rank + 1):
        shape = context.generate_shape(rank)
        bounded = context.generate_shape(rank, [UNLIMITED] * rank)
        problems = check_shape(shape, rank, context.limits) + check_shape(bounded, rank, context.limits)
        if bounded.max_extents != tuple([UNLIMITED] * rank):
            problems.append(f"max extents not passed through: {bounded.max_extents}")
        if problems:
            errors += 1
            for problem in problems:
                _logger.error("rank %d: %s", rank, problem)
        else:
            _logger.debug("rank %d: %s", rank, shape.describe())
    for bad_rank in (-1, max_rank + 1):
        try:
            context.generate_shape(bad_rank)
        except InvalidArgument:
            continue
        _logger.error("rank %d was accepted", bad_rank)
        errors += 1
    return errors


BUILTIN_GROUPS = (
    ("datatype", datatype_group),
    ("dataspace", dataspace_group),
)
