"""
Pydantic Models and Schemas
===========================

Core data models for generation units, resolved fields, templates and
generation results. All models are frozen: each stage builds new ones and
nothing is mutated after resolution.
"""

import keyword
from enum import Enum
from typing import Optional, List, Dict, Any, Mapping, Union, Type

from pydantic import BaseModel, ConfigDict, Field, field_validator


class GeneratorStrategy(str, Enum):
    """Ways of turning a compiled unit into accessors."""
    SOURCE = "source"
    TABLE = "table"


class FrozenModel(BaseModel):
    """Base model for build-time entities."""
    model_config = ConfigDict(frozen=True)


# Target Type
class VariantType(FrozenModel):
    """The enum the generated accessors attach to."""
    name: str = Field(..., description="Enum class name")
    variants: List[str] = Field(..., min_length=1, description="Member names in definition order")

    @field_validator("variants")
    @classmethod
    def validate_variants(cls, v: List[str]) -> List[str]:
        """Variants must be unique identifiers."""
        seen = set()
        for variant in v:
            if not variant.isidentifier() or keyword.iskeyword(variant):
                raise ValueError(f"Variant '{variant}' is not a valid identifier")
            if variant in seen:
                raise ValueError(f"Variant '{variant}' is listed twice")
            seen.add(variant)
        return v

    @property
    def default_variant(self) -> str:
        """First declared variant; fills in for every variant a field leaves out."""
        return self.variants[0]

    @classmethod
    def from_enum(cls, enum_cls: Type[Enum]) -> "VariantType":
        """Read the ordered member names of an Enum class (aliases are skipped)."""
        return cls(name=enum_cls.__name__, variants=[member.name for member in enum_cls])


# DSL Models
class ParamDef(FrozenModel):
    """One accessor parameter."""
    name: str = Field(..., description="Parameter name")
    type_hint: Optional[str] = Field(None, description="Annotation source text, None for any renderable value")

    @property
    def annotation(self) -> str:
        return self.type_hint if self.type_hint is not None else "object"


class FieldDef(FrozenModel):
    """One field block as authored in the DSL."""
    name: str = Field(..., description="Accessor name")
    params: Optional[List[ParamDef]] = Field(None, description="Declared parameters, None when no list was written")
    templates: Dict[str, str] = Field(default_factory=dict, description="Variant tag to template, authored order")
    line: int = Field(0, description="Line the field starts on")

    @property
    def is_placeholder(self) -> bool:
        return not self.templates


class GenerationUnit(FrozenModel):
    """A parsed DSL unit."""
    target_type: str = Field(..., description="Name given after 'LanguageEnum:'")
    fields: List[FieldDef] = Field(default_factory=list, description="Fields in authored order")


class ResolvedField(FrozenModel):
    """A field whose templates cover every variant of the target."""
    definition: FieldDef
    templates: Dict[str, str] = Field(..., description="Variant tag to template, in variant order")
    filled_variants: List[str] = Field(default_factory=list, description="Variants that took the default template")
    is_placeholder: bool = False

    @property
    def name(self) -> str:
        return self.definition.name

    @property
    def line(self) -> int:
        return self.definition.line


# Template Models
class LiteralSegment(FrozenModel):
    """Text copied to the output unchanged (escapes already decoded)."""
    text: str


class PlaceholderSegment(FrozenModel):
    """A `{name}` or `{name:spec}` reference."""
    name: str
    format_spec: str = ""


Segment = Union[LiteralSegment, PlaceholderSegment]


class Template(FrozenModel):
    """A template string split into literal and placeholder segments."""
    source: str = Field(..., description="Template as authored")
    segments: List[Segment] = Field(default_factory=list)

    @property
    def placeholders(self) -> List[str]:
        """Distinct placeholder names in order of first occurrence."""
        names: List[str] = []
        for segment in self.segments:
            if isinstance(segment, PlaceholderSegment) and segment.name not in names:
                names.append(segment.name)
        return names

    @property
    def is_constant(self) -> bool:
        return all(isinstance(segment, LiteralSegment) for segment in self.segments)

    @property
    def constant_text(self) -> str:
        """Rendered text of a template without placeholders."""
        if not self.is_constant:
            raise ValueError("Template has placeholders and no constant text")
        return "".join(segment.text for segment in self.segments)  # type: ignore[union-attr]

    def render(self, values: Mapping[str, Any]) -> str:
        """Substitute each placeholder with the text rendering of its value."""
        parts: List[str] = []
        for segment in self.segments:
            if isinstance(segment, LiteralSegment):
                parts.append(segment.text)
            else:
                parts.append(format(str(values[segment.name]), segment.format_spec))
        return "".join(parts)


class AnalyzedField(FrozenModel):
    """A resolved field with its parameter list settled and templates parsed."""
    resolved: ResolvedField
    params: List[ParamDef] = Field(default_factory=list, description="Explicit or inferred parameters")
    params_inferred: bool = False
    templates: Dict[str, Template] = Field(..., description="Variant tag to parsed template, in variant order")
    unused_params: List[str] = Field(default_factory=list)

    @property
    def name(self) -> str:
        return self.resolved.name

    @property
    def is_placeholder(self) -> bool:
        return self.resolved.is_placeholder

    @property
    def returns_constant(self) -> bool:
        """Zero-parameter authored fields hand back pre-rendered text."""
        return not self.params and not self.is_placeholder

    @property
    def param_names(self) -> List[str]:
        return [param.name for param in self.params]


# Generation Results
class CompiledUnit(FrozenModel):
    """Everything the emitters need for one unit."""
    variant_type: VariantType
    unit: GenerationUnit
    fields: List[AnalyzedField] = Field(default_factory=list)

    def get_field(self, name: str) -> AnalyzedField:
        for field in self.fields:
            if field.name == name:
                return field
        raise KeyError(name)


class ValidationResult(BaseModel):
    """Result of checking a DSL unit without generating anything."""
    success: bool = Field(..., description="Whether the unit compiles")
    compiled: Optional[CompiledUnit] = Field(None, description="Compiled unit when successful")
    errors: List[str] = Field(default_factory=list, description="Generation errors")
    warnings: List[str] = Field(default_factory=list, description="Generation warnings")
    processing_time: Optional[float] = Field(None, description="Checking time in seconds")
