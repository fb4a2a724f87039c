"""Random datatype generation.

A category is drawn uniformly from every datatype class the storage library
knows about, including the ones this generator never produces (time,
bitfield, opaque, variable-length sequences, region references). Drawing one
of those, or a category that is not allowed in the current context, simply
re-rolls. Compound and array types recurse; the nesting depth is threaded
through the recursion and, once it passes ``recursion_max_depth``, only the
non-recursive classes can be built.

Array elements are restricted to integer, float and string types: arrays of
arrays, enums, compounds or references re-roll.

Descriptors are created through a :class:`~voltest.core.factory.DatatypeFactory`.
A failure part-way through a compound or array releases everything this call
built before the error propagates.
"""
from __future__ import annotations

import functools
from typing import Callable, Dict, Optional

from voltest.core.errors import RerollLimitExceeded, UnsupportedCategorySelected
from voltest.core.factory import (
    NATIVE_INT,
    PREDEFINED_FLOATS,
    PREDEFINED_INTEGERS,
    STD_REF_OBJ,
    DatatypeFactory,
)
from voltest.core.limits import GeneratorLimits
from voltest.core.models import ALL_CATEGORIES, Datatype, StringPad, TypeCategory

from .base import RandomSource, draw, make_rng

# Enum values cover the full range of the C library's rand().
ENUM_VALUE_LIMIT = 2**31

Builder = Callable[[Optional[TypeCategory], int], Datatype]


class TypeDescriptorGenerator:
    """Builds random, legal datatype descriptors."""

    def __init__(
        self,
        rng: Optional[RandomSource] = None,
        *,
        limits: Optional[GeneratorLimits] = None,
        factory: Optional[DatatypeFactory] = None,
    ) -> None:
        self._rng = rng if rng is not None else make_rng()
        self.limits = limits or GeneratorLimits()
        self.factory = factory or DatatypeFactory()
        self._builders: Dict[TypeCategory, Builder] = {
            TypeCategory.INTEGER: self._build_integer,
            TypeCategory.FLOAT: self._build_float,
            TypeCategory.TIME: functools.partial(self._reject, TypeCategory.TIME),
            TypeCategory.STRING: self._build_string,
            TypeCategory.BITFIELD: functools.partial(self._reject, TypeCategory.BITFIELD),
            TypeCategory.OPAQUE: functools.partial(self._reject, TypeCategory.OPAQUE),
            TypeCategory.COMPOUND: self._build_compound,
            TypeCategory.REFERENCE: self._build_reference,
            TypeCategory.ENUM: self._build_enum,
            TypeCategory.VLEN: functools.partial(self._reject, TypeCategory.VLEN),
            TypeCategory.ARRAY: self._build_array,
        }

    def generate_type(self, parent_class: Optional[TypeCategory] = None) -> Datatype:
        """Return a new descriptor owned by the caller.

        ``parent_class`` is the category of the enclosing type, or ``None`` at
        top level. The caller releases the result with ``factory.close``.
        """

        return self._generate(parent_class, 1)

    def _generate(self, parent_class: Optional[TypeCategory], depth: int) -> Datatype:
        rejected = 0
        while True:
            category = ALL_CATEGORIES[draw(self._rng, 0, len(ALL_CATEGORIES))]
            try:
                return self._builders[category](parent_class, depth)
            except UnsupportedCategorySelected:
                rejected += 1
                if rejected > self.limits.max_rerolls:
                    raise RerollLimitExceeded(rejected) from None

    def _too_deep(self, depth: int) -> bool:
        return depth > self.limits.recursion_max_depth

    def _reject(self, category: TypeCategory, parent_class: Optional[TypeCategory], depth: int) -> Datatype:
        raise UnsupportedCategorySelected(category, "not implemented by the connector surface")

    def _build_integer(self, parent_class: Optional[TypeCategory], depth: int) -> Datatype:
        template = PREDEFINED_INTEGERS[draw(self._rng, 0, len(PREDEFINED_INTEGERS))]
        return self.factory.copy_predefined(template)

    def _build_float(self, parent_class: Optional[TypeCategory], depth: int) -> Datatype:
        template = PREDEFINED_FLOATS[draw(self._rng, 0, len(PREDEFINED_FLOATS))]
        return self.factory.copy_predefined(template)

    def _build_string(self, parent_class: Optional[TypeCategory], depth: int) -> Datatype:
        # Fixed-length strings are null-padded, variable-length ones null-terminated.
        if draw(self._rng, 0, 2) == 0:
            length = draw(self._rng, 0, self.limits.string_max_size)
            return self.factory.create_string(length, StringPad.NULLPAD)
        return self.factory.create_string(None, StringPad.NULLTERM)

    def _build_reference(self, parent_class: Optional[TypeCategory], depth: int) -> Datatype:
        if parent_class is TypeCategory.ARRAY:
            raise UnsupportedCategorySelected(TypeCategory.REFERENCE, "array of references")
        if draw(self._rng, 0, 2) == 0:
            return self.factory.copy_predefined(STD_REF_OBJ)
        raise UnsupportedCategorySelected(TypeCategory.REFERENCE, "region references")

    def _build_compound(self, parent_class: Optional[TypeCategory], depth: int) -> Datatype:
        if parent_class is TypeCategory.ARRAY:
            raise UnsupportedCategorySelected(TypeCategory.COMPOUND, "array of compounds")
        if self._too_deep(depth):
            raise UnsupportedCategorySelected(TypeCategory.COMPOUND, "recursion limit")
        num_members = draw(self._rng, 1, self.limits.compound_max_members + 1)
        compound = self.factory.create_compound()
        try:
            for index in range(num_members):
                member = self._generate(None, depth + 1)
                try:
                    self.factory.insert_member(compound, f"compound_member{index}", member)
                except Exception:
                    self.factory.close(member)
                    raise
        except Exception:
            self.factory.close(compound)
            raise
        return compound

    def _build_enum(self, parent_class: Optional[TypeCategory], depth: int) -> Datatype:
        if parent_class is TypeCategory.ARRAY:
            raise UnsupportedCategorySelected(TypeCategory.ENUM, "array of enums")
        num_members = draw(self._rng, 1, self.limits.enum_max_members + 1)
        name_limit = self.limits.enum_max_member_name_length - 1
        enum_type = self.factory.create_enum(NATIVE_INT)
        try:
            for index in range(num_members):
                name = f"enum_val{index}"[:name_limit]
                value = draw(self._rng, 0, ENUM_VALUE_LIMIT)
                self.factory.insert_enum_value(enum_type, name, value)
        except Exception:
            self.factory.close(enum_type)
            raise
        return enum_type

    def _build_array(self, parent_class: Optional[TypeCategory], depth: int) -> Datatype:
        if parent_class is TypeCategory.ARRAY:
            raise UnsupportedCategorySelected(TypeCategory.ARRAY, "array of arrays")
        if self._too_deep(depth):
            raise UnsupportedCategorySelected(TypeCategory.ARRAY, "recursion limit")
        ndims = draw(self._rng, 1, self.limits.array_max_dims + 1)
        dims = tuple(draw(self._rng, 1, self.limits.max_dim_size + 1) for _ in range(ndims))
        base = self._generate(TypeCategory.ARRAY, depth + 1)
        try:
            return self.factory.create_array(base, dims)
        except Exception:
            self.factory.close(base)
            raise


def generate_type(
    parent_class: Optional[TypeCategory] = None,
    *,
    rng: Optional[RandomSource] = None,
    limits: Optional[GeneratorLimits] = None,
    factory: Optional[DatatypeFactory] = None,
) -> Datatype:
    """One-shot helper around :class:`TypeDescriptorGenerator`."""

    generator = TypeDescriptorGenerator(rng, limits=limits, factory=factory)
    return generator.generate_type(parent_class)
