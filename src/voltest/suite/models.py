"""Data models for run configuration and test-group execution."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Mapping, Optional, Sequence

import numpy as np

from voltest.core import Datatype, DatatypeFactory, GeneratorLimits, ShapeDescriptor, TypeCategory
from voltest.generators import ShapeGenerator, TypeDescriptorGenerator


@dataclass(frozen=True)
class GroupConfig:
    name: str
    target: Optional[str] = None
    params: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class SuiteConfig:
    connector: Optional[str] = None
    seed: Optional[int] = None
    limits: GeneratorLimits = field(default_factory=GeneratorLimits)
    groups: Sequence[GroupConfig] = field(default_factory=tuple)
    fail_fast: bool = False
    source: Optional[Path] = None


@dataclass
class ProbeContext:
    """Everything a test group needs to exercise the connector under test.

    Each group gets its own random generator and datatype factory, so groups
    never share generator state.
    """

    connector: str
    seed: int
    limits: GeneratorLimits
    params: Mapping[str, Any] = field(default_factory=dict)
    factory: DatatypeFactory = field(default_factory=DatatypeFactory)
    rng: np.random.Generator = field(init=False)
    type_generator: TypeDescriptorGenerator = field(init=False)
    shape_generator: ShapeGenerator = field(init=False)

    def __post_init__(self) -> None:
        self.rng = np.random.default_rng(self.seed)
        self.type_generator = TypeDescriptorGenerator(self.rng, limits=self.limits, factory=self.factory)
        self.shape_generator = ShapeGenerator(self.rng, limits=self.limits)

    def generate_type(self, parent_class: Optional[TypeCategory] = None) -> Datatype:
        return self.type_generator.generate_type(parent_class)

    def generate_shape(self, rank: int, max_extents: Optional[Sequence[int]] = None) -> ShapeDescriptor:
        return self.shape_generator.generate_shape(rank, max_extents)


GroupFunc = Callable[[ProbeContext], int]


@dataclass(frozen=True)
class GroupResult:
    name: str
    status: str
    errors: int
    duration_s: float
    seed: int
    details: str = ""

    @property
    def passed(self) -> bool:
        return self.status == "passed"
