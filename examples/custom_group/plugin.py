"""Example plugin adding a test group through ``VOLTEST_PLUGINS``.

Run with::

    VOLTEST_PLUGINS=plugin PYTHONPATH=examples/custom_group \
        voltest run --config examples/custom_group/suite.yaml
"""
from __future__ import annotations

import logging

from voltest.core import ArrayType, CompoundType
from voltest.suite import ProbeContext, registry

_logger = logging.getLogger(__name__)


def composite_sizes(context: ProbeContext) -> int:
    """Check that compound and array sizes add up from their parts."""

    errors = 0
    for index in range(int(context.params.get("iterations", 200))):
        dtype = context.generate_type()
        with context.factory.closing(dtype):
            if isinstance(dtype, CompoundType):
                expected = sum(member.type.size for member in dtype.members)
            elif isinstance(dtype, ArrayType):
                expected = dtype.base.size
                for dim in dtype.dims:
                    expected *= dim
            else:
                continue
            if dtype.size != expected:
                _logger.error("type %d: %s has size %d, expected %d", index, dtype.describe(), dtype.size, expected)
                errors += 1
    return errors


def register() -> None:
    registry.update_or_register("composite_sizes", composite_sizes)
