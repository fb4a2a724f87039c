"""Structural checks for generated descriptors.

Each checker returns a list of human-readable problems; an empty list means
the descriptor satisfies every invariant the generators promise.
"""
from __future__ import annotations

from typing import List, Optional

from voltest.core import (
    SUPPORTED_CATEGORIES,
    ArrayType,
    CompoundType,
    Datatype,
    EnumType,
    FloatType,
    GeneratorLimits,
    IntegerType,
    ReferenceKind,
    ReferenceType,
    ShapeDescriptor,
    StringPad,
    StringType,
    TypeCategory,
)
from voltest.core.factory import NATIVE_INT, PREDEFINED_FLOATS, PREDEFINED_INTEGERS

ARRAY_ELEMENT_CATEGORIES = frozenset({TypeCategory.INTEGER, TypeCategory.FLOAT, TypeCategory.STRING})

_PREDEFINED_NAMES = frozenset(t.name for t in PREDEFINED_INTEGERS + PREDEFINED_FLOATS)


def composite_depth(dtype: Datatype) -> int:
    """Number of compound/array levels on the deepest path through ``dtype``."""

    if isinstance(dtype, CompoundType):
        return 1 + max((composite_depth(member.type) for member in dtype.members), default=0)
    if isinstance(dtype, ArrayType):
        return 1 + composite_depth(dtype.base)
    return 0


def check_datatype(dtype: Datatype, limits: Optional[GeneratorLimits] = None) -> List[str]:
    limits = limits or GeneratorLimits()
    problems: List[str] = []
    depth = composite_depth(dtype)
    if depth > limits.recursion_max_depth:
        problems.append(f"$: nesting depth {depth} exceeds {limits.recursion_max_depth}")
    _check_node(dtype, None, limits, problems, "$")
    return problems


def _check_node(
    dtype: Datatype,
    parent: Optional[TypeCategory],
    limits: GeneratorLimits,
    problems: List[str],
    path: str,
) -> None:
    category = dtype.category
    if category not in SUPPORTED_CATEGORIES:
        problems.append(f"{path}: unsupported class {category.label}")
        return
    if parent is TypeCategory.ARRAY and category not in ARRAY_ELEMENT_CATEGORIES:
        problems.append(f"{path}: {category.label} is not a legal array element")

    if isinstance(dtype, (IntegerType, FloatType)):
        if dtype.name not in _PREDEFINED_NAMES:
            problems.append(f"{path}: '{dtype.name}' is not a predefined encoding")
    elif isinstance(dtype, StringType):
        _check_string(dtype, limits, problems, path)
    elif isinstance(dtype, ReferenceType):
        if dtype.kind is not ReferenceKind.OBJECT:
            problems.append(f"{path}: only object references are produced, got {dtype.kind.value}")
    elif isinstance(dtype, EnumType):
        _check_enum(dtype, limits, problems, path)
    elif isinstance(dtype, ArrayType):
        _check_array(dtype, limits, problems, path)
    elif isinstance(dtype, CompoundType):
        _check_compound(dtype, limits, problems, path)


def _check_string(dtype: StringType, limits: GeneratorLimits, problems: List[str], path: str) -> None:
    if dtype.length is None:
        if dtype.pad is not StringPad.NULLTERM:
            problems.append(f"{path}: variable-length string must be null-terminated")
        return
    if dtype.pad is not StringPad.NULLPAD:
        problems.append(f"{path}: fixed-length string must be null-padded")
    if not 0 <= dtype.length < limits.string_max_size:
        problems.append(f"{path}: string length {dtype.length} outside [0, {limits.string_max_size})")


def _check_enum(dtype: EnumType, limits: GeneratorLimits, problems: List[str], path: str) -> None:
    if dtype.base.name != NATIVE_INT.name:
        problems.append(f"{path}: enum base must be {NATIVE_INT.name}, got {dtype.base.name}")
    count = len(dtype.members)
    if not 1 <= count <= limits.enum_max_members:
        problems.append(f"{path}: {count} enum members outside [1, {limits.enum_max_members}]")
    for member in dtype.members:
        if len(member.name) >= limits.enum_max_member_name_length:
            problems.append(f"{path}.{member.name}: enum member name too long")


def _check_array(dtype: ArrayType, limits: GeneratorLimits, problems: List[str], path: str) -> None:
    if not 1 <= len(dtype.dims) <= limits.array_max_dims:
        problems.append(f"{path}: array rank {len(dtype.dims)} outside [1, {limits.array_max_dims}]")
    for dim in dtype.dims:
        if not 1 <= dim <= limits.max_dim_size:
            problems.append(f"{path}: array extent {dim} outside [1, {limits.max_dim_size}]")
    _check_node(dtype.base, TypeCategory.ARRAY, limits, problems, f"{path}[]")


def _check_compound(dtype: CompoundType, limits: GeneratorLimits, problems: List[str], path: str) -> None:
    count = len(dtype.members)
    if not 1 <= count <= limits.compound_max_members:
        problems.append(f"{path}: {count} compound members outside [1, {limits.compound_max_members}]")
    expected_offset = 0
    for index, member in enumerate(dtype.members):
        member_path = f"{path}.{member.name}"
        if member.name != f"compound_member{index}":
            problems.append(f"{member_path}: expected name compound_member{index}")
        if member.offset != expected_offset:
            problems.append(f"{member_path}: offset {member.offset}, expected {expected_offset}")
        expected_offset += member.type.size
        _check_node(member.type, TypeCategory.COMPOUND, limits, problems, member_path)
    if dtype.size != expected_offset:
        problems.append(f"{path}: compound size {dtype.size}, members add up to {expected_offset}")


def check_shape(shape: ShapeDescriptor, rank: int, limits: Optional[GeneratorLimits] = None) -> List[str]:
    limits = limits or GeneratorLimits()
    problems: List[str] = []
    if shape.rank != rank:
        problems.append(f"rank {shape.rank}, expected {rank}")
    for index, dim in enumerate(shape.extents):
        if not 1 <= dim <= limits.max_dim_size:
            problems.append(f"extent {index} = {dim} outside [1, {limits.max_dim_size}]")
    if shape.max_extents is not None and len(shape.max_extents) != shape.rank:
        problems.append(f"{len(shape.max_extents)} max extents for rank {shape.rank}")
    return problems
