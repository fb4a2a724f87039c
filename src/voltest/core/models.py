"""Datatype and dataspace descriptors produced by the generators."""
from __future__ import annotations

import enum
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union


class TypeCategory(enum.IntEnum):
    """Datatype classes of the storage library, in library order."""

    INTEGER = 0
    FLOAT = 1
    TIME = 2
    STRING = 3
    BITFIELD = 4
    OPAQUE = 5
    COMPOUND = 6
    REFERENCE = 7
    ENUM = 8
    VLEN = 9
    ARRAY = 10

    @property
    def label(self) -> str:
        return self.name.lower()


ALL_CATEGORIES: Tuple[TypeCategory, ...] = tuple(TypeCategory)

SUPPORTED_CATEGORIES = frozenset(
    {
        TypeCategory.INTEGER,
        TypeCategory.FLOAT,
        TypeCategory.STRING,
        TypeCategory.COMPOUND,
        TypeCategory.REFERENCE,
        TypeCategory.ENUM,
        TypeCategory.ARRAY,
    }
)


class ByteOrder(str, enum.Enum):
    BE = "BE"
    LE = "LE"


class StringPad(str, enum.Enum):
    NULLTERM = "nullterm"
    NULLPAD = "nullpad"


class CharSet(str, enum.Enum):
    ASCII = "ascii"


class ReferenceKind(str, enum.Enum):
    OBJECT = "object"
    REGION = "region"


# Sizes the storage library reports for pointer-backed types.
VLEN_STRING_SIZE = 8
REFERENCE_SIZES = {ReferenceKind.OBJECT: 8, ReferenceKind.REGION: 12}


@dataclass
class IntegerType:
    name: str
    size: int
    order: ByteOrder
    signed: bool
    handle: int = field(default=0, compare=False, repr=False)

    category = TypeCategory.INTEGER

    def to_dict(self) -> Dict[str, Any]:
        return {
            "class": self.category.label,
            "name": self.name,
            "size": self.size,
            "order": self.order.value,
            "signed": self.signed,
        }

    def describe(self) -> str:
        return self.name


@dataclass
class FloatType:
    name: str
    size: int
    order: ByteOrder
    handle: int = field(default=0, compare=False, repr=False)

    category = TypeCategory.FLOAT

    def to_dict(self) -> Dict[str, Any]:
        return {"class": self.category.label, "name": self.name, "size": self.size, "order": self.order.value}

    def describe(self) -> str:
        return self.name


@dataclass
class StringType:
    """Fixed-length (``length`` bytes) or variable-length (``length is None``) string."""

    length: Optional[int]
    pad: StringPad
    cset: CharSet = CharSet.ASCII
    handle: int = field(default=0, compare=False, repr=False)

    category = TypeCategory.STRING

    @property
    def is_variable(self) -> bool:
        return self.length is None

    @property
    def size(self) -> int:
        return VLEN_STRING_SIZE if self.length is None else self.length

    def to_dict(self) -> Dict[str, Any]:
        return {
            "class": self.category.label,
            "length": "variable" if self.length is None else self.length,
            "size": self.size,
            "pad": self.pad.value,
            "cset": self.cset.value,
        }

    def describe(self) -> str:
        if self.length is None:
            return "string(variable)"
        return f"string({self.length})"


@dataclass
class ReferenceType:
    kind: ReferenceKind
    handle: int = field(default=0, compare=False, repr=False)

    category = TypeCategory.REFERENCE

    @property
    def size(self) -> int:
        return REFERENCE_SIZES[self.kind]

    def to_dict(self) -> Dict[str, Any]:
        return {"class": self.category.label, "kind": self.kind.value, "size": self.size}

    def describe(self) -> str:
        return f"ref({self.kind.value})"


@dataclass(frozen=True)
class EnumMember:
    name: str
    value: int


@dataclass
class EnumType:
    """Enumeration over an integer base; member values may repeat."""

    base: IntegerType
    members: List[EnumMember] = field(default_factory=list)
    handle: int = field(default=0, compare=False, repr=False)

    category = TypeCategory.ENUM

    @property
    def size(self) -> int:
        return self.base.size

    def to_dict(self) -> Dict[str, Any]:
        return {
            "class": self.category.label,
            "base": self.base.to_dict(),
            "size": self.size,
            "members": [{"name": m.name, "value": m.value} for m in self.members],
        }

    def describe(self) -> str:
        return f"enum<{self.base.describe()}>[{len(self.members)}]"


@dataclass
class ArrayType:
    base: "Datatype"
    dims: Tuple[int, ...]
    handle: int = field(default=0, compare=False, repr=False)

    category = TypeCategory.ARRAY

    @property
    def size(self) -> int:
        return math.prod(self.dims) * self.base.size

    def to_dict(self) -> Dict[str, Any]:
        return {
            "class": self.category.label,
            "dims": list(self.dims),
            "size": self.size,
            "base": self.base.to_dict(),
        }

    def describe(self) -> str:
        dims = "x".join(str(dim) for dim in self.dims)
        return f"array[{dims}]<{self.base.describe()}>"


@dataclass
class CompoundMember:
    name: str
    offset: int
    type: "Datatype"


@dataclass
class CompoundType:
    """Packed compound; members are contiguous in declaration order."""

    members: List[CompoundMember] = field(default_factory=list)
    size: int = 0
    handle: int = field(default=0, compare=False, repr=False)

    category = TypeCategory.COMPOUND

    def to_dict(self) -> Dict[str, Any]:
        return {
            "class": self.category.label,
            "size": self.size,
            "members": [
                {"name": m.name, "offset": m.offset, "type": m.type.to_dict()} for m in self.members
            ],
        }

    def describe(self) -> str:
        inner = ", ".join(f"{m.name}@{m.offset}: {m.type.describe()}" for m in self.members)
        return f"compound{{{inner}}}"


Datatype = Union[IntegerType, FloatType, StringType, ReferenceType, EnumType, ArrayType, CompoundType]


UNLIMITED = -1


@dataclass(frozen=True)
class ShapeDescriptor:
    """Current (and optionally maximum) extents of a simple dataspace."""

    extents: Tuple[int, ...]
    max_extents: Optional[Tuple[int, ...]] = None

    @property
    def rank(self) -> int:
        return len(self.extents)

    @property
    def npoints(self) -> int:
        return math.prod(self.extents)

    def to_dict(self) -> Dict[str, Any]:
        max_extents = None
        if self.max_extents is not None:
            max_extents = ["unlimited" if dim == UNLIMITED else dim for dim in self.max_extents]
        return {"rank": self.rank, "extents": list(self.extents), "max_extents": max_extents}

    def describe(self) -> str:
        if not self.extents:
            return "scalar"
        text = "x".join(str(dim) for dim in self.extents)
        if self.max_extents is not None:
            bounds = "x".join("inf" if dim == UNLIMITED else str(dim) for dim in self.max_extents)
            text = f"{text} (max {bounds})"
        return text
