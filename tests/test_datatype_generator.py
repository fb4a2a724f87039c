from __future__ import annotations

import numpy as np
import pytest

from voltest.core import (
    SUPPORTED_CATEGORIES,
    ArrayType,
    CompoundType,
    ConstructionFailure,
    DatatypeFactory,
    EnumType,
    GeneratorLimits,
    ReferenceKind,
    RerollLimitExceeded,
    StringPad,
    StringType,
    TypeCategory,
)
from voltest.core.factory import PREDEFINED_FLOATS, PREDEFINED_INTEGERS
from voltest.generators import TypeDescriptorGenerator, generate_type
from voltest.suite.checks import ARRAY_ELEMENT_CATEGORIES, check_datatype, composite_depth


def _walk(dtype, parent=None):
    yield dtype, parent
    if isinstance(dtype, CompoundType):
        for member in dtype.members:
            yield from _walk(member.type, dtype.category)
    elif isinstance(dtype, ArrayType):
        yield from _walk(dtype.base, dtype.category)


class FailingCopyFactory(DatatypeFactory):
    """Raises on the ``fail_at``-th predefined copy."""

    def __init__(self, fail_at: int) -> None:
        super().__init__()
        self.fail_at = fail_at
        self.copies = 0

    def copy_predefined(self, template):
        self.copies += 1
        if self.copies == self.fail_at:
            raise ConstructionFailure("copy failed")
        return super().copy_predefined(template)


class FailingInsertFactory(DatatypeFactory):
    def __init__(self, fail_at: int) -> None:
        super().__init__()
        self.fail_at = fail_at
        self.inserts = 0

    def insert_member(self, compound, name, member):
        self.inserts += 1
        if self.inserts == self.fail_at:
            raise ConstructionFailure("insert failed")
        return super().insert_member(compound, name, member)


class FailingArrayFactory(DatatypeFactory):
    def create_array(self, base, dims):
        raise ConstructionFailure("array creation failed")


def test_compound_of_int_and_float(scripted) -> None:
    rng = scripted([6, 2, 0, 4, 1, 1])
    factory = DatatypeFactory()
    dtype = generate_type(rng=rng, factory=factory)

    assert isinstance(dtype, CompoundType)
    assert dtype.size == 8
    assert [member.name for member in dtype.members] == ["compound_member0", "compound_member1"]
    assert [member.offset for member in dtype.members] == [0, 4]
    assert dtype.members[0].type.name == "STD_I32BE"
    assert dtype.members[1].type.name == "IEEE_F32LE"
    assert rng.remaining == 0

    assert factory.open_count == 3
    factory.close(dtype)
    assert factory.open_count == 0


@pytest.mark.parametrize("case", range(16))
def test_integer_cases_follow_table_order(scripted, case: int) -> None:
    dtype = generate_type(rng=scripted([0, case]))
    assert dtype.name == PREDEFINED_INTEGERS[case].name


@pytest.mark.parametrize("case", range(4))
def test_float_cases_follow_table_order(scripted, case: int) -> None:
    dtype = generate_type(rng=scripted([1, case]))
    assert dtype.name == PREDEFINED_FLOATS[case].name


def test_unimplemented_classes_reroll(scripted) -> None:
    rng = scripted([2, 4, 5, 9, 0, 0])
    dtype = generate_type(rng=rng)
    assert dtype.name == "STD_I8BE"
    assert rng.remaining == 0


def test_region_reference_rerolls(scripted) -> None:
    rng = scripted([7, 1, 7, 0])
    dtype = generate_type(rng=rng)
    assert dtype.kind is ReferenceKind.OBJECT
    assert dtype.size == 8
    assert rng.remaining == 0


def test_zero_length_fixed_string(scripted) -> None:
    dtype = generate_type(rng=scripted([3, 0, 0]))
    assert isinstance(dtype, StringType)
    assert dtype.length == 0
    assert dtype.size == 0
    assert dtype.pad is StringPad.NULLPAD


def test_variable_length_string(scripted) -> None:
    dtype = generate_type(rng=scripted([3, 1]))
    assert dtype.is_variable
    assert dtype.size == 8
    assert dtype.pad is StringPad.NULLTERM


def test_enum_keeps_duplicate_values(scripted) -> None:
    dtype = generate_type(rng=scripted([8, 3, 5, 5, 7]))
    assert isinstance(dtype, EnumType)
    assert [member.name for member in dtype.members] == ["enum_val0", "enum_val1", "enum_val2"]
    assert [member.value for member in dtype.members] == [5, 5, 7]
    assert dtype.base.name == "NATIVE_INT"
    assert dtype.size == 4


def test_enum_member_names_are_truncated(scripted) -> None:
    limits = GeneratorLimits(enum_max_member_name_length=5)
    dtype = generate_type(rng=scripted([8, 1, 42]), limits=limits)
    assert dtype.members[0].name == "enum"


def test_truncated_enum_names_colliding_fail_and_release(scripted) -> None:
    limits = GeneratorLimits(enum_max_member_name_length=5)
    factory = DatatypeFactory()
    with pytest.raises(ConstructionFailure):
        generate_type(rng=scripted([8, 2, 1, 2]), limits=limits, factory=factory)
    assert factory.open_count == 0


def test_array_element_rerolls_enum(scripted) -> None:
    rng = scripted([10, 2, 3, 4, 8, 0, 1])
    dtype = generate_type(rng=rng)
    assert isinstance(dtype, ArrayType)
    assert dtype.dims == (3, 4)
    assert dtype.base.name == "STD_I8LE"
    assert dtype.size == 12
    assert rng.remaining == 0


def test_array_never_holds_array_compound_or_reference(scripted) -> None:
    rng = scripted([10, 1, 2, 10, 6, 7, 3, 1])
    dtype = generate_type(rng=rng)
    assert isinstance(dtype.base, StringType)
    assert dtype.base.is_variable
    assert dtype.size == 16
    assert rng.remaining == 0


def test_array_parent_at_top_level(scripted) -> None:
    dtype = generate_type(TypeCategory.ARRAY, rng=scripted([6, 0, 0]))
    assert dtype.category is TypeCategory.INTEGER


def test_recursion_limit_blocks_nested_composites(scripted) -> None:
    limits = GeneratorLimits(recursion_max_depth=1)
    rng = scripted([6, 1, 6, 10, 0, 0])
    dtype = generate_type(rng=rng, limits=limits)
    assert isinstance(dtype, CompoundType)
    assert composite_depth(dtype) == 1
    assert rng.remaining == 0


def test_zero_recursion_depth_allows_only_leaves(scripted) -> None:
    limits = GeneratorLimits(recursion_max_depth=0)
    dtype = generate_type(rng=scripted([6, 10, 1, 0]), limits=limits)
    assert dtype.name == "IEEE_F32BE"


def test_reroll_limit_exceeded(scripted) -> None:
    factory = DatatypeFactory()
    with pytest.raises(RerollLimitExceeded) as excinfo:
        generate_type(rng=scripted([2]), limits=GeneratorLimits(max_rerolls=0), factory=factory)
    assert excinfo.value.attempts == 1
    assert factory.open_count == 0

    with pytest.raises(RerollLimitExceeded) as excinfo:
        generate_type(rng=scripted([2, 4, 5]), limits=GeneratorLimits(max_rerolls=2))
    assert excinfo.value.attempts == 3


def test_reroll_counter_resets_per_member(scripted) -> None:
    limits = GeneratorLimits(max_rerolls=1)
    rng = scripted([6, 2, 2, 0, 0, 9, 1, 0])
    dtype = generate_type(rng=rng, limits=limits)
    assert [member.type.category for member in dtype.members] == [TypeCategory.INTEGER, TypeCategory.FLOAT]


@pytest.mark.parametrize("fail_at", [1, 2, 3, 4])
def test_compound_member_failure_releases_everything(scripted, fail_at: int) -> None:
    factory = FailingCopyFactory(fail_at)
    rng = scripted([6, 4] + [0, 0] * 4)
    with pytest.raises(ConstructionFailure):
        generate_type(rng=rng, factory=factory)
    assert factory.open_count == 0
    # the compound is handle 1 and goes last, after the members built before the failure
    assert factory.released[-1] == 1
    assert len(factory.released[:-1]) == fail_at - 1
    assert len(set(factory.released)) == len(factory.released)


def test_failed_insert_releases_member_and_compound(scripted) -> None:
    factory = FailingInsertFactory(fail_at=2)
    with pytest.raises(ConstructionFailure):
        generate_type(rng=scripted([6, 2, 0, 0, 0, 0]), factory=factory)
    assert factory.open_count == 0
    assert len(factory.released) == 3


def test_nested_array_failure_releases_enclosing_compound(scripted) -> None:
    factory = FailingCopyFactory(fail_at=1)
    with pytest.raises(ConstructionFailure):
        generate_type(rng=scripted([6, 1, 10, 1, 2, 0, 0]), factory=factory)
    assert factory.open_count == 0
    assert len(factory.released) == 1


def test_failed_array_creation_releases_base(scripted) -> None:
    factory = FailingArrayFactory()
    with pytest.raises(ConstructionFailure):
        generate_type(rng=scripted([10, 1, 2, 0, 0]), factory=factory)
    assert factory.open_count == 0
    assert len(factory.released) == 1


@pytest.mark.parametrize("seed", [0, 1, 2, 3])
def test_random_types_hold_invariants(seed: int) -> None:
    limits = GeneratorLimits()
    generator = TypeDescriptorGenerator(np.random.default_rng(seed), limits=limits)
    seen = set()
    for _ in range(500):
        dtype = generator.generate_type()
        assert check_datatype(dtype, limits) == []
        assert composite_depth(dtype) <= limits.recursion_max_depth
        for node, parent in _walk(dtype):
            seen.add(node.category)
            if parent is TypeCategory.ARRAY:
                assert node.category in ARRAY_ELEMENT_CATEGORIES
        generator.factory.close(dtype)
    assert seen <= SUPPORTED_CATEGORIES
    assert generator.factory.open_count == 0


def test_every_supported_class_is_produced() -> None:
    generator = TypeDescriptorGenerator(np.random.default_rng(1234))
    seen = set()
    for _ in range(2000):
        dtype = generator.generate_type()
        seen.update(node.category for node, _ in _walk(dtype))
        generator.factory.close(dtype)
    assert seen == SUPPORTED_CATEGORIES


def test_same_seed_same_types() -> None:
    first = TypeDescriptorGenerator(np.random.default_rng(99))
    second = TypeDescriptorGenerator(np.random.default_rng(99))
    for _ in range(50):
        assert first.generate_type().to_dict() == second.generate_type().to_dict()


def test_generation_terminates() -> None:
    generator = TypeDescriptorGenerator(np.random.default_rng(2024))
    for _ in range(10_000):
        generator.factory.close(generator.generate_type())
    assert generator.factory.open_count == 0
