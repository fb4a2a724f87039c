"""Core models, limits and errors exposed at the package level."""
from .errors import (
    ConstructionFailure,
    GenerationError,
    InvalidArgument,
    RerollLimitExceeded,
    UnsupportedCategorySelected,
)
from .factory import DatatypeFactory
from .limits import GeneratorLimits
from .models import (
    ALL_CATEGORIES,
    SUPPORTED_CATEGORIES,
    UNLIMITED,
    ArrayType,
    CompoundMember,
    CompoundType,
    Datatype,
    EnumMember,
    EnumType,
    FloatType,
    IntegerType,
    ReferenceKind,
    ReferenceType,
    ShapeDescriptor,
    StringPad,
    StringType,
    TypeCategory,
)

__all__ = [
    "ALL_CATEGORIES",
    "SUPPORTED_CATEGORIES",
    "UNLIMITED",
    "ArrayType",
    "CompoundMember",
    "CompoundType",
    "ConstructionFailure",
    "Datatype",
    "DatatypeFactory",
    "EnumMember",
    "EnumType",
    "FloatType",
    "GenerationError",
    "GeneratorLimits",
    "IntegerType",
    "InvalidArgument",
    "ReferenceKind",
    "ReferenceType",
    "RerollLimitExceeded",
    "ShapeDescriptor",
    "StringPad",
    "StringType",
    "TypeCategory",
    "UnsupportedCategorySelected",
]
