"""Datatype and dataspace generators."""
from .base import RandomSource, make_rng, resolve_seed
from .dataspace import ShapeGenerator, generate_shape
from .datatype import TypeDescriptorGenerator, generate_type

__all__ = [
    "RandomSource",
    "ShapeGenerator",
    "TypeDescriptorGenerator",
    "generate_shape",
    "generate_type",
    "make_rng",
    "resolve_seed",
]
