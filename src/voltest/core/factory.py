"""Construction and ownership tracking for datatype descriptors.

Every descriptor handed out by :class:`DatatypeFactory` carries a handle and
stays *open* until :meth:`DatatypeFactory.close` releases it. Composite
descriptors own their children: inserting a member into a compound or building
an array over a base type transfers ownership, and closing the parent releases
the children with it.
"""
from __future__ import annotations

import contextlib
import dataclasses
import itertools
from typing import Dict, Iterator, List, Optional, Sequence, Set

from .errors import ConstructionFailure
from .models import (
    ArrayType,
    ByteOrder,
    CharSet,
    CompoundMember,
    CompoundType,
    Datatype,
    EnumMember,
    EnumType,
    FloatType,
    IntegerType,
    ReferenceKind,
    ReferenceType,
    StringPad,
    StringType,
)
from .limits import MAX_RANK


def _integer(name: str) -> IntegerType:
    signed = name[0] == "I"
    order = ByteOrder(name[-2:])
    bits = int(name[1:-2])
    return IntegerType(name=f"STD_{name}", size=bits // 8, order=order, signed=signed)


def _float(name: str) -> FloatType:
    order = ByteOrder(name[-2:])
    bits = int(name[1:-2])
    return FloatType(name=f"IEEE_{name}", size=bits // 8, order=order)


# Draw order matters: index N of each table is "case N" of the generator.
PREDEFINED_INTEGERS = tuple(
    _integer(f"{sign}{bits}{order}")
    for sign in ("I", "U")
    for bits in (8, 16, 32, 64)
    for order in ("BE", "LE")
)
PREDEFINED_FLOATS = tuple(_float(f"F{bits}{order}") for bits in (32, 64) for order in ("BE", "LE"))
NATIVE_INT = IntegerType(name="NATIVE_INT", size=4, order=ByteOrder.LE, signed=True)
STD_REF_OBJ = ReferenceType(kind=ReferenceKind.OBJECT)
STD_REF_DSETREG = ReferenceType(kind=ReferenceKind.REGION)


class DatatypeFactory:
    """Builds descriptors and counts how many are still alive."""

    def __init__(self) -> None:
        self._handles = itertools.count(1)
        self._live: Dict[int, Datatype] = {}
        self._owned: Set[int] = set()
        self.released: List[int] = []

    @property
    def open_count(self) -> int:
        """Number of descriptors not yet released, owned children included."""

        return len(self._live)

    def is_open(self, dtype: Datatype) -> bool:
        return dtype.handle in self._live

    def copy_predefined(self, template: Datatype) -> Datatype:
        if isinstance(template, IntegerType):
            dtype: Datatype = IntegerType(
                name=template.name, size=template.size, order=template.order, signed=template.signed
            )
        elif isinstance(template, FloatType):
            dtype = FloatType(name=template.name, size=template.size, order=template.order)
        elif isinstance(template, ReferenceType):
            dtype = ReferenceType(kind=template.kind)
        else:
            raise ConstructionFailure(f"'{template.describe()}' is not a predefined datatype")
        return self._track(dtype)

    def create_string(self, length: Optional[int], pad: StringPad) -> StringType:
        if length is not None and length < 0:
            raise ConstructionFailure(f"invalid string length {length}")
        return self._track(StringType(length=length, pad=pad, cset=CharSet.ASCII))

    def create_compound(self) -> CompoundType:
        return self._track(CompoundType())

    def insert_member(self, compound: CompoundType, name: str, member: Datatype) -> CompoundMember:
        """Append ``member`` at the running offset; the compound takes ownership."""

        self._require_free(compound)
        self._require_free(member)
        if any(existing.name == name for existing in compound.members):
            raise ConstructionFailure(f"duplicate compound member name '{name}'")
        entry = CompoundMember(name=name, offset=compound.size, type=member)
        compound.members.append(entry)
        compound.size += member.size
        self._owned.add(member.handle)
        return entry

    def create_enum(self, base: IntegerType) -> EnumType:
        if not isinstance(base, IntegerType):
            raise ConstructionFailure("enum base type must be an integer type")
        return self._track(EnumType(base=dataclasses.replace(base, handle=0)))

    def insert_enum_value(self, enum_type: EnumType, name: str, value: int) -> EnumMember:
        self._require_free(enum_type)
        if any(existing.name == name for existing in enum_type.members):
            raise ConstructionFailure(f"duplicate enum member name '{name}'")
        member = EnumMember(name=name, value=int(value))
        enum_type.members.append(member)
        return member

    def create_array(self, base: Datatype, dims: Sequence[int]) -> ArrayType:
        """Build an array over ``base``; the array takes ownership of it."""

        self._require_free(base)
        extents = tuple(int(dim) for dim in dims)
        if not extents or len(extents) > MAX_RANK:
            raise ConstructionFailure(f"invalid array rank {len(extents)}")
        if any(dim < 1 for dim in extents):
            raise ConstructionFailure(f"invalid array dimensions {extents}")
        array = self._track(ArrayType(base=base, dims=extents))
        self._owned.add(base.handle)
        return array

    def close(self, dtype: Datatype) -> None:
        """Release ``dtype`` and every descriptor it owns."""

        self._require_free(dtype)
        self._release(dtype)

    @contextlib.contextmanager
    def closing(self, dtype: Datatype) -> Iterator[Datatype]:
        try:
            yield dtype
        finally:
            if self.is_open(dtype) and dtype.handle not in self._owned:
                self.close(dtype)

    def _track(self, dtype):
        dtype.handle = next(self._handles)
        self._live[dtype.handle] = dtype
        return dtype

    def _require_free(self, dtype: Datatype) -> None:
        if dtype.handle not in self._live:
            raise ValueError(f"datatype handle {dtype.handle} is not open")
        if dtype.handle in self._owned:
            raise ValueError(f"datatype handle {dtype.handle} is owned by another datatype")

    def _release(self, dtype: Datatype) -> None:
        if isinstance(dtype, CompoundType):
            for member in dtype.members:
                self._release(member.type)
        elif isinstance(dtype, ArrayType):
            self._release(dtype.base)
        del self._live[dtype.handle]
        self._owned.discard(dtype.handle)
        self.released.append(dtype.handle)
