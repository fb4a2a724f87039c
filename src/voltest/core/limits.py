"""Fixed limits used by the datatype and dataspace generators."""
from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Mapping, Optional

from .errors import InvalidArgument

# Largest datatype the storage library can keep in an object header.
GENERATED_DATATYPE_MAX_SIZE = 65536

# Nesting level past which only non-recursive classes may be chosen.
TYPE_GEN_RECURSION_MAX_DEPTH = 3

COMPOUND_TYPE_MAX_MEMBERS = 4

ARRAY_TYPE_MAX_DIMS = 4

ENUM_TYPE_MAX_MEMBER_NAME_LENGTH = 256
ENUM_TYPE_MAX_MEMBERS = 16

STRING_TYPE_MAX_SIZE = 1024

MAX_DIM_SIZE = 16

MAX_RANK = 32

MAX_REROLLS = 10_000

_ZERO_ALLOWED = frozenset({"recursion_max_depth", "max_rerolls"})


@dataclass(frozen=True)
class GeneratorLimits:
    """Overridable set of generator limits."""

    datatype_max_size: int = GENERATED_DATATYPE_MAX_SIZE
    recursion_max_depth: int = TYPE_GEN_RECURSION_MAX_DEPTH
    compound_max_members: int = COMPOUND_TYPE_MAX_MEMBERS
    array_max_dims: int = ARRAY_TYPE_MAX_DIMS
    enum_max_member_name_length: int = ENUM_TYPE_MAX_MEMBER_NAME_LENGTH
    enum_max_members: int = ENUM_TYPE_MAX_MEMBERS
    string_max_size: int = STRING_TYPE_MAX_SIZE
    max_dim_size: int = MAX_DIM_SIZE
    max_rank: int = MAX_RANK
    max_rerolls: int = MAX_REROLLS

    def __post_init__(self) -> None:
        for item in fields(self):
            value = getattr(self, item.name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidArgument(f"limit '{item.name}' must be an integer, got {value!r}")
            minimum = 0 if item.name in _ZERO_ALLOWED else 1
            if value < minimum:
                raise InvalidArgument(f"limit '{item.name}' must be >= {minimum}, got {value}")
        if self.array_max_dims > self.max_rank:
            raise InvalidArgument(
                f"array_max_dims ({self.array_max_dims}) cannot exceed max_rank ({self.max_rank})"
            )

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "GeneratorLimits":
        if not data:
            return cls()
        known = {item.name for item in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise InvalidArgument(f"unknown generator limit(s): {', '.join(unknown)}")
        return cls(**dict(data))

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)
