"""
Accessor Emitter
================

Turn compiled units into accessor methods on the target enum.

Two strategies share one installation path:
- source: render a Python module with Jinja2; the text can be written out
  as a build step or executed in place to obtain the accessors
- table: build immutable dispatch tables once and wrap them in plain
  functions carrying the generated signature
"""

import inspect
import linecache
import warnings
from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional, Type, Union

import jinja2

from language_atlas.config.logging import get_logger
from language_atlas.config.settings import get_settings
from language_atlas.core.exceptions import EmitError
from language_atlas.models.schemas import (
    AnalyzedField,
    CompiledUnit,
    GeneratorStrategy,
    LiteralSegment,
    Template,
    VariantType,
)

logger = get_logger(__name__)

# Set on every generated accessor so a later install may replace it
ACCESSOR_MARKER = "__language_atlas_field__"

_MISSING = object()

# Module-level names of a generated accessor module that a field may not rebind
RESERVED_FIELD_NAMES = frozenset(
    {"warnings", "setattr", "DeprecationWarning", "ACCESSORS", "_VARIANTS", "_DEPRECATION_NOTE", "_name", "_accessor"}
)

# Globals a placeholder accessor reads at call time
PLACEHOLDER_GLOBALS = frozenset({"warnings", "DeprecationWarning", "_DEPRECATION_NOTE"})


class BaseEmitter(ABC):
    """Abstract base class for accessor emitters."""

    def __init__(self) -> None:
        self.settings = get_settings()

    def check_names(self, compiled: CompiledUnit) -> None:
        """
        Reject field and parameter names that would shadow what an accessor reads.

        Both strategies apply the same rules, so a table installs under
        either one or under neither.

        Raises:
            EmitError: If a field or parameter name is reserved
        """
        enum_name = compiled.variant_type.name
        for field in compiled.fields:
            clashes = set()
            if field.name in RESERVED_FIELD_NAMES or field.name == enum_name:
                clashes.add(field.name)
            reserved_params = {enum_name} | (PLACEHOLDER_GLOBALS if field.is_placeholder else set())
            clashes.update(reserved_params.intersection(field.param_names))
            if clashes:
                raise EmitError(
                    f"field '{field.name}' uses names reserved by the generated module: "
                    f"{', '.join(sorted(clashes))}"
                )

    @abstractmethod
    def build_accessors(self, compiled: CompiledUnit, enum_cls: Type[Enum]) -> Dict[str, Callable[..., str]]:
        """Create one accessor function per field, keyed by field name."""
        pass

    def install(self, compiled: CompiledUnit, enum_cls: Type[Enum]) -> Dict[str, Callable[..., str]]:
        """
        Build the accessors and attach them to the enum class.

        Args:
            compiled: Compiled generation unit
            enum_cls: Enum class the unit was compiled for

        Returns:
            The attached accessors keyed by field name

        Raises:
            EmitError: If the enum does not match the unit or a name is taken
        """
        if VariantType.from_enum(enum_cls) != compiled.variant_type:
            raise EmitError(
                f"{enum_cls.__name__} does not match the variant set the unit was compiled for "
                f"({', '.join(compiled.variant_type.variants)})"
            )
        for field in compiled.fields:
            existing = inspect.getattr_static(enum_cls, field.name, _MISSING)
            if existing is not _MISSING and getattr(existing, ACCESSOR_MARKER, None) != field.name:
                raise EmitError(
                    f"field '{field.name}' would replace an existing attribute of {enum_cls.__name__}"
                )
        self.check_names(compiled)

        accessors = self.build_accessors(compiled, enum_cls)
        for name, accessor in accessors.items():
            accessor.__qualname__ = f"{enum_cls.__qualname__}.{name}"
            accessor.__module__ = enum_cls.__module__
            setattr(accessor, ACCESSOR_MARKER, name)
            setattr(enum_cls, name, accessor)

        logger.debug(
            "Installed accessors",
            enum=enum_cls.__name__,
            strategy=type(self).__name__,
            fields=list(accessors),
        )
        return accessors


class SourceEmitter(BaseEmitter):
    """Jinja2-based emitter producing Python module source."""

    TEMPLATE_NAME = "module.py.j2"

    def __init__(self) -> None:
        super().__init__()
        self.logger: Any = logger.bind(emitter="source")  # structlog.BoundLoggerBase
        self._setup_jinja2_environment()

    def _setup_jinja2_environment(self) -> None:
        """Setup Jinja2 template environment."""
        template_dir = Path(__file__).parent / "templates"
        self.env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(template_dir)),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=jinja2.StrictUndefined,
        )
        self.env.filters["pyrepr"] = repr

    def render_module(
        self,
        compiled: CompiledUnit,
        enum_module: Optional[str] = None,
        attach: bool = True,
    ) -> str:
        """
        Render the accessor module for a compiled unit.

        Args:
            compiled: Compiled generation unit
            enum_module: Module to import the enum from; None when the enum is
                provided by the executing namespace
            attach: Whether importing the module attaches the accessors

        Returns:
            Python source text

        Raises:
            EmitError: If a name is reserved, or attach is set without an
                enum_module to import the enum from
        """
        if attach and enum_module is None:
            raise EmitError(
                "an enum_module is required to generate a module that attaches its accessors"
            )
        self.check_names(compiled)

        try:
            template = self.env.get_template(self.TEMPLATE_NAME)
            context = self._prepare_context(compiled, enum_module, attach)
            source = template.render(**context)
        except jinja2.TemplateError as e:
            raise EmitError(f"Failed to render accessor module: {e}") from e

        self.logger.debug(
            "Rendered accessor module", enum=compiled.variant_type.name, source_length=len(source)
        )
        return source

    def build_accessors(self, compiled: CompiledUnit, enum_cls: Type[Enum]) -> Dict[str, Callable[..., str]]:
        source = self.render_module(compiled, enum_module=None, attach=False)
        filename = f"<language_atlas:{enum_cls.__module__}.{enum_cls.__qualname__}>"
        # Registered so tracebacks and inspect.getsource can show generated lines
        linecache.cache[filename] = (len(source), None, source.splitlines(True), filename)

        namespace: Dict[str, Any] = {"__name__": enum_cls.__module__, enum_cls.__name__: enum_cls}
        exec(compile(source, filename, "exec"), namespace)
        return dict(namespace["ACCESSORS"])

    def _prepare_context(
        self, compiled: CompiledUnit, enum_module: Optional[str], attach: bool
    ) -> Dict[str, Any]:
        """Prepare template context."""
        variant_type = compiled.variant_type
        return {
            "header": self.settings.generated_header,
            "enum_name": variant_type.name,
            "enum_module": enum_module,
            "variants": tuple(variant_type.variants),
            "deprecation_note": self.settings.deprecation_note,
            "has_placeholders": any(field.is_placeholder for field in compiled.fields),
            "attach": attach,
            "fields": [self._field_context(field, variant_type) for field in compiled.fields],
        }

    def _field_context(self, field: AnalyzedField, variant_type: VariantType) -> Dict[str, Any]:
        signature = ", ".join(["self"] + [f"{param.name}: {param.annotation}" for param in field.params])
        default = variant_type.default_variant

        arms: List[Dict[str, str]] = []
        if not field.is_placeholder:
            # Authored variants get their own arm; the final return covers the
            # default and every variant filled from it
            for variant in variant_type.variants[1:]:
                if variant in field.resolved.filled_variants:
                    continue
                arms.append({"variant": variant, "expr": self._render_expression(field.templates[variant])})

        return {
            "name": field.name,
            "signature": signature,
            "placeholder": field.is_placeholder,
            "arms": arms,
            "default_expr": self._render_expression(field.templates[default]),
        }

    def _render_expression(self, template: Template) -> str:
        """Python expression producing the rendered template."""
        if template.is_constant:
            return repr(template.constant_text)

        # !s converts inside str.format, so the body reads nothing but its parameters
        parts: List[str] = []
        for segment in template.segments:
            if isinstance(segment, LiteralSegment):
                parts.append(segment.text.replace("{", "{{").replace("}", "}}"))
            elif segment.format_spec:
                parts.append(f"{{{segment.name}!s:{segment.format_spec}}}")
            else:
                parts.append(f"{{{segment.name}!s}}")
        arguments = ", ".join(f"{name}={name}" for name in template.placeholders)
        return f"{''.join(parts)!r}.format({arguments})"


class TableEmitter(BaseEmitter):
    """Emitter backed by immutable in-memory dispatch tables."""

    def __init__(self) -> None:
        super().__init__()
        self.logger: Any = logger.bind(emitter="table")  # structlog.BoundLoggerBase

    def build_dispatch_table(self, field: AnalyzedField, enum_cls: Type[Enum]) -> Mapping[Enum, Any]:
        """
        Map every enum member to what its accessor returns.

        Constant fields map to their text, every other field maps to its
        parsed Template.
        """
        table: Dict[Enum, Any] = {}
        for member in enum_cls:
            template = field.templates[member.name]
            table[member] = template.constant_text if template.is_constant else template

        if set(table) != set(enum_cls):
            raise EmitError(f"dispatch table for '{field.name}' does not cover {enum_cls.__name__}")
        return MappingProxyType(table)

    def build_accessors(self, compiled: CompiledUnit, enum_cls: Type[Enum]) -> Dict[str, Callable[..., str]]:
        accessors: Dict[str, Callable[..., str]] = {}
        for field in compiled.fields:
            table = self.build_dispatch_table(field, enum_cls)
            if field.is_placeholder:
                accessor = self._placeholder_accessor(field, table)
            elif field.returns_constant:
                accessor = self._constant_accessor(table)
            else:
                accessor = self._formatting_accessor(field, table)
            accessor.__name__ = field.name
            self.logger.debug("Built dispatch table", field=field.name, entries=len(table))
            accessors[field.name] = accessor
        return accessors

    def _signature(self, field: AnalyzedField) -> inspect.Signature:
        parameters = [inspect.Parameter("self", inspect.Parameter.POSITIONAL_OR_KEYWORD)]
        for param in field.params:
            parameters.append(
                inspect.Parameter(
                    param.name, inspect.Parameter.POSITIONAL_OR_KEYWORD, annotation=param.annotation
                )
            )
        return inspect.Signature(parameters, return_annotation="str")

    def _constant_accessor(self, table: Mapping[Enum, Any]) -> Callable[..., str]:
        def accessor(self: Enum) -> str:
            return table[self]

        return accessor

    def _formatting_accessor(self, field: AnalyzedField, table: Mapping[Enum, Any]) -> Callable[..., str]:
        signature = self._signature(field)

        def accessor(*args: Any, **kwargs: Any) -> str:
            bound = signature.bind(*args, **kwargs)
            member = bound.arguments.pop("self")
            entry = table[member]
            if isinstance(entry, Template):
                return entry.render(bound.arguments)
            return entry

        accessor.__signature__ = signature  # type: ignore[attr-defined]
        return accessor

    def _placeholder_accessor(self, field: AnalyzedField, table: Mapping[Enum, Any]) -> Callable[..., str]:
        signature = self._signature(field)
        note = self.settings.deprecation_note

        def accessor(*args: Any, **kwargs: Any) -> str:
            bound = signature.bind(*args, **kwargs)
            warnings.warn(note, DeprecationWarning, stacklevel=2)
            return table[bound.arguments["self"]]

        accessor.__signature__ = signature  # type: ignore[attr-defined]
        accessor.__deprecated__ = note  # type: ignore[attr-defined]
        accessor.__doc__ = "Placeholder accessor: no language string has been provided yet."
        return accessor


class EmitterFactory:
    """Factory for creating accessor emitters by strategy."""

    _emitters: Dict[GeneratorStrategy, Type[BaseEmitter]] = {
        GeneratorStrategy.SOURCE: SourceEmitter,
        GeneratorStrategy.TABLE: TableEmitter,
    }

    @classmethod
    def create_emitter(cls, strategy: Union[GeneratorStrategy, str, None] = None) -> BaseEmitter:
        """
        Create an emitter instance.

        Args:
            strategy: GeneratorStrategy or its value ("source" or "table");
                defaults to the configured strategy

        Returns:
            Emitter instance

        Raises:
            ValueError: If the strategy is not supported
        """
        strategy = strategy or get_settings().default_strategy
        try:
            key = GeneratorStrategy(strategy)
        except ValueError:
            raise ValueError(f"Unsupported emitter strategy: {strategy}") from None

        return cls._emitters[key]()
