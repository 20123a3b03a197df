"""
Language Atlas
==============

Generate per-variant text accessors for enum classes from a small table DSL.

This package provides:
- A parser, resolver and template analyzer for language tables
- Source (Jinja2) and dispatch-table emitters attaching accessors to enums
- A command line entry point for running generation as a build step
"""

from language_atlas.core.exceptions import (
    DSLSyntaxError,
    EmitError,
    LanguageAtlasError,
    SemanticError,
    TargetMismatchError,
    TemplateSyntaxError,
    UnknownPlaceholderError,
    UnknownVariantError,
    UnresolvedDefaultError,
)
from language_atlas.core.pipeline import (
    compile_unit,
    generate_language_functions,
    generate_source,
    language_functions,
    validate_source,
)
from language_atlas.models.schemas import CompiledUnit, GeneratorStrategy, ValidationResult, VariantType

__version__ = "0.1.0"
__author__ = "Language Atlas Team"

__all__ = [
    "CompiledUnit",
    "DSLSyntaxError",
    "EmitError",
    "GeneratorStrategy",
    "LanguageAtlasError",
    "SemanticError",
    "TargetMismatchError",
    "TemplateSyntaxError",
    "UnknownPlaceholderError",
    "UnknownVariantError",
    "UnresolvedDefaultError",
    "ValidationResult",
    "VariantType",
    "compile_unit",
    "generate_language_functions",
    "generate_source",
    "language_functions",
    "validate_source",
]
