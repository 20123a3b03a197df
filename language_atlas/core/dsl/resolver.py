"""
Variant Resolver
================

Checks each field's templates against the target enum and makes them total:
variants a field leaves out take the default (first) variant's template, and
fields with no templates at all become placeholder fields.
"""

from typing import Any, Dict, List, Optional

from language_atlas.config.logging import get_logger
from language_atlas.config.settings import get_settings
from language_atlas.core.exceptions import (
    TargetMismatchError,
    UnknownVariantError,
    UnresolvedDefaultError,
)
from language_atlas.models.schemas import FieldDef, GenerationUnit, ResolvedField, VariantType

logger = get_logger(__name__)


class VariantResolver:
    """Resolve the fields of a unit against one VariantType."""

    def __init__(self, variant_type: VariantType, placeholder_text: Optional[str] = None) -> None:
        self.variant_type = variant_type
        self.placeholder_text = (
            placeholder_text if placeholder_text is not None else get_settings().placeholder_text
        )
        self.logger: Any = logger.bind(component="resolver", target=variant_type.name)

    def resolve(self, unit: GenerationUnit) -> List[ResolvedField]:
        """
        Resolve every field of a unit.

        Args:
            unit: Parsed generation unit

        Returns:
            Resolved fields in authored order

        Raises:
            SemanticError: On the first field that cannot be resolved
        """
        self.check_target(unit)
        return [self.resolve_field(field) for field in unit.fields]

    def check_target(self, unit: GenerationUnit) -> None:
        if unit.target_type != self.variant_type.name:
            raise TargetMismatchError(
                None,
                f"unit is declared for '{unit.target_type}' but is being generated for "
                f"'{self.variant_type.name}'",
            )

    def resolve_field(self, field: FieldDef) -> ResolvedField:
        variants = self.variant_type.variants
        default = self.variant_type.default_variant

        for tag in field.templates:
            if tag not in variants:
                raise UnknownVariantError(field.name, tag, variants, field.line)

        if field.is_placeholder:
            self.logger.debug("Field has no templates, generating placeholder", field=field.name)
            return ResolvedField(
                definition=field,
                templates={variant: self.placeholder_text for variant in variants},
                is_placeholder=True,
            )

        if default not in field.templates:
            raise UnresolvedDefaultError(field.name, default, field.line)

        templates: Dict[str, str] = {}
        filled: List[str] = []
        for variant in variants:
            if variant in field.templates:
                templates[variant] = field.templates[variant]
            else:
                templates[variant] = field.templates[default]
                filled.append(variant)

        if filled:
            self.logger.debug("Filled variants from default", field=field.name, variants=filled)

        return ResolvedField(definition=field, templates=templates, filled_variants=filled)
