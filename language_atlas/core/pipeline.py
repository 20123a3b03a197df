"""
Generation Pipeline
===================

Runs one unit through Parse -> Resolve -> Analyze -> Emit. Each call works
on fresh objects; nothing is shared between units.
"""

import time
from enum import Enum
from typing import Any, List, Optional, Type, Union

from language_atlas.config.logging import get_logger
from language_atlas.core.codegen.emitter import EmitterFactory, SourceEmitter
from language_atlas.core.dsl.analyzer import TemplateAnalyzer
from language_atlas.core.dsl.parser import parse_unit
from language_atlas.core.dsl.resolver import VariantResolver
from language_atlas.core.exceptions import LanguageAtlasError
from language_atlas.models.schemas import (
    AnalyzedField,
    CompiledUnit,
    GeneratorStrategy,
    ValidationResult,
    VariantType,
)

logger = get_logger(__name__)

VariantSource = Union[VariantType, Type[Enum]]
StrategyName = Union[GeneratorStrategy, str, None]


def _as_variant_type(target: VariantSource) -> VariantType:
    if isinstance(target, VariantType):
        return target
    return VariantType.from_enum(target)


def _log_emit_failure(compiled: CompiledUnit, error: LanguageAtlasError) -> None:
    logger.error(
        "Accessor emission failed",
        target=compiled.variant_type.name,
        error=str(error),
        error_type=type(error).__name__,
    )


def compile_unit(source: str, target: VariantSource) -> CompiledUnit:
    """
    Parse, resolve and analyze one DSL unit.

    Args:
        source: Raw DSL text
        target: Enum class or VariantType the unit is generated for

    Returns:
        Compiled unit ready for emission

    Raises:
        LanguageAtlasError: On the first structural or semantic failure
    """
    variant_type = _as_variant_type(target)
    log: Any = logger.bind(target=variant_type.name)

    try:
        unit = parse_unit(source)
        resolved = VariantResolver(variant_type).resolve(unit)
        analyzer = TemplateAnalyzer()
        fields = [analyzer.analyze(field) for field in resolved]
    except LanguageAtlasError as e:
        log.error("Unit compilation failed", error=str(e), error_type=type(e).__name__)
        raise

    log.debug("Compiled unit", field_count=len(fields))
    return CompiledUnit(variant_type=variant_type, unit=unit, fields=fields)


def generate_source(source: str, target: VariantSource, enum_module: Optional[str] = None) -> str:
    """
    Compile a unit and render the accessor module as Python source.

    Args:
        source: Raw DSL text
        target: Enum class or VariantType the unit is generated for
        enum_module: Module the generated code imports the enum from

    Returns:
        Python source text

    Raises:
        EmitError: If enum_module is missing or a name is reserved
    """
    compiled = compile_unit(source, target)
    try:
        return SourceEmitter().render_module(compiled, enum_module=enum_module, attach=True)
    except LanguageAtlasError as e:
        _log_emit_failure(compiled, e)
        raise


def generate_language_functions(
    enum_cls: Type[Enum], source: str, strategy: StrategyName = None
) -> CompiledUnit:
    """
    Compile a unit and attach its accessors to an enum class.

    Args:
        enum_cls: Enum class receiving the accessors
        source: Raw DSL text
        strategy: Emitter strategy ("source" or "table"), defaults to settings

    Returns:
        The compiled unit
    """
    compiled = compile_unit(source, enum_cls)
    try:
        EmitterFactory.create_emitter(strategy).install(compiled, enum_cls)
    except LanguageAtlasError as e:
        _log_emit_failure(compiled, e)
        raise
    return compiled


def language_functions(source: str, strategy: StrategyName = None):
    """
    Class decorator form of generate_language_functions.

    Example:
        @language_functions('''
            LanguageEnum: Language
            greeting { English: "Hello" Spanish: "Hola" }
        ''')
        class Language(Enum):
            English = 1
            Spanish = 2
    """

    def decorator(enum_cls: Type[Enum]) -> Type[Enum]:
        generate_language_functions(enum_cls, source, strategy)
        return enum_cls

    return decorator


def validate_source(source: str, target: VariantSource) -> ValidationResult:
    """
    Check a unit and report every failing field instead of only the first.

    Args:
        source: Raw DSL text
        target: Enum class or VariantType the unit is generated for

    Returns:
        ValidationResult with errors and warnings
    """
    start_time = time.time()
    variant_type = _as_variant_type(target)
    errors: List[str] = []
    warnings: List[str] = []

    try:
        unit = parse_unit(source)
    except LanguageAtlasError as e:
        return ValidationResult(
            success=False, errors=[str(e)], processing_time=time.time() - start_time
        )

    resolver = VariantResolver(variant_type)
    analyzer = TemplateAnalyzer()
    try:
        resolver.check_target(unit)
    except LanguageAtlasError as e:
        errors.append(str(e))

    fields: List[AnalyzedField] = []
    for definition in unit.fields:
        try:
            analyzed = analyzer.analyze(resolver.resolve_field(definition))
        except LanguageAtlasError as e:
            errors.append(str(e))
            continue
        fields.append(analyzed)

        if analyzed.is_placeholder:
            warnings.append(
                f"field '{analyzed.name}' has no templates and will return "
                f"{next(iter(analyzed.resolved.templates.values()))!r}"
            )
        elif analyzed.unused_params:
            warnings.append(
                f"field '{analyzed.name}' never uses parameters: {', '.join(analyzed.unused_params)}"
            )

    if errors:
        logger.debug("Unit validation failed", target=variant_type.name, error_count=len(errors))
        return ValidationResult(
            success=False,
            errors=errors,
            warnings=warnings,
            processing_time=time.time() - start_time,
        )

    return ValidationResult(
        success=True,
        compiled=CompiledUnit(variant_type=variant_type, unit=unit, fields=fields),
        warnings=warnings,
        processing_time=time.time() - start_time,
    )
