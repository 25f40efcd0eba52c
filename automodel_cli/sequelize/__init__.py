"""Sequelize model generation module for automodel-cli.

This module turns introspected raw metadata into Sequelize ModelBuilder
descriptors: type mapping, attribute translation, text rendering and
file output, orchestrated by ModelGenerator.
"""

from .type_mappers import TypeKind, TypeExpr, TypeMapper
from .attributes import (
    AttributeLine,
    AttributeMapper,
    CanonicalAttribute,
    DefaultExpr,
    DefaultKind,
    Reference,
)
from .renderer import DescriptorRenderer, class_name, model_name
from .writer import OutputWriter
from .generator import GenerationResult, ModelGenerator

__all__ = [
    "TypeKind",
    "TypeExpr",
    "TypeMapper",
    "AttributeLine",
    "AttributeMapper",
    "CanonicalAttribute",
    "DefaultExpr",
    "DefaultKind",
    "Reference",
    "DescriptorRenderer",
    "class_name",
    "model_name",
    "OutputWriter",
    "GenerationResult",
    "ModelGenerator",
]
