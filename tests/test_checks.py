from __future__ import annotations

from voltest.core import (
    ArrayType,
    CompoundMember,
    CompoundType,
    GeneratorLimits,
    ReferenceKind,
    ReferenceType,
    ShapeDescriptor,
    StringPad,
    StringType,
)
from voltest.core.factory import PREDEFINED_FLOATS, PREDEFINED_INTEGERS
from voltest.suite.checks import check_datatype, check_shape, composite_depth

I32 = PREDEFINED_INTEGERS[4]
F64 = PREDEFINED_FLOATS[3]


def _compound(*types) -> CompoundType:
    compound = CompoundType()
    for index, dtype in enumerate(types):
        compound.members.append(CompoundMember(f"compound_member{index}", compound.size, dtype))
        compound.size += dtype.size
    return compound


def test_well_formed_compound_passes() -> None:
    dtype = _compound(I32, ArrayType(base=F64, dims=(2, 2)), StringType(None, StringPad.NULLTERM))
    assert check_datatype(dtype) == []
    assert composite_depth(dtype) == 2


def test_bad_offset_reported() -> None:
    dtype = _compound(I32, F64)
    dtype.members[1].offset = 0
    problems = check_datatype(dtype)
    assert any("offset 0, expected 4" in p for p in problems)


def test_array_of_compound_reported() -> None:
    dtype = ArrayType(base=_compound(I32), dims=(2,))
    problems = check_datatype(dtype)
    assert any("not a legal array element" in p for p in problems)


def test_region_reference_reported() -> None:
    problems = check_datatype(ReferenceType(ReferenceKind.REGION))
    assert problems == ["$: only object references are produced, got region"]


def test_depth_limit_reported() -> None:
    dtype = _compound(_compound(I32))
    assert check_datatype(dtype, GeneratorLimits(recursion_max_depth=2)) == []
    problems = check_datatype(dtype, GeneratorLimits(recursion_max_depth=1))
    assert any("nesting depth 2" in p for p in problems)


def test_string_padding_reported() -> None:
    problems = check_datatype(StringType(8, StringPad.NULLTERM))
    assert problems == ["$: fixed-length string must be null-padded"]


def test_check_shape() -> None:
    assert check_shape(ShapeDescriptor((1, 16)), 2) == []
    problems = check_shape(ShapeDescriptor((17,), (4, 4)), 2)
    assert "rank 1, expected 2" in problems
    assert "extent 0 = 17 outside [1, 16]" in problems
    assert "2 max extents for rank 1" in problems
