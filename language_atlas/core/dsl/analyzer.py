"""
Template Analyzer
=================

Splits template strings into literal and placeholder segments, then settles
each field's parameter list: declared lists are checked against the
placeholders, missing lists are inferred from them.

Template syntax follows ``str.format`` restricted to named fields:

- ``{name}`` substitutes the text rendering of argument ``name``
- ``{name:>8}`` additionally pads it (fill, alignment and width only)
- ``{{`` and ``}}`` are literal braces
"""

import keyword
import re
import string
from typing import Any, Dict, List

from language_atlas.config.logging import get_logger
from language_atlas.core.exceptions import TemplateSyntaxError, UnknownPlaceholderError
from language_atlas.models.schemas import (
    AnalyzedField,
    LiteralSegment,
    ParamDef,
    PlaceholderSegment,
    ResolvedField,
    Segment,
    Template,
)

logger = get_logger(__name__)

# [[fill]align][width]; applied to the str() of the argument so it cannot fail at call time
FORMAT_SPEC_PATTERN = re.compile(r"(?:.?[<>^])?\d*", re.DOTALL)


class TemplateAnalyzer:
    """Parse the templates of resolved fields and bind them to parameters."""

    def __init__(self) -> None:
        self.logger: Any = logger.bind(component="analyzer")
        self._formatter = string.Formatter()

    def parse_template(self, field: str, variant: str, source: str) -> Template:
        """
        Split one template string into segments.

        Args:
            field: Field the template belongs to (for error reporting)
            variant: Variant the template was authored for
            source: Template text as authored

        Returns:
            Parsed template

        Raises:
            TemplateSyntaxError: If braces or placeholders are malformed
        """
        try:
            pieces = list(self._formatter.parse(source))
        except ValueError as e:
            raise TemplateSyntaxError(field, variant, source, f"unbalanced brace ({e})")

        segments: List[Segment] = []
        for literal, name, format_spec, conversion in pieces:
            if literal:
                if segments and isinstance(segments[-1], LiteralSegment):
                    # "{{" splits the literal text into separate pieces
                    literal = segments.pop().text + literal  # type: ignore[union-attr]
                segments.append(LiteralSegment(text=literal))
            if name is None:
                continue

            if name == "":
                raise TemplateSyntaxError(field, variant, source, "empty placeholder '{}'")
            if not name.isidentifier() or keyword.iskeyword(name):
                raise TemplateSyntaxError(
                    field, variant, source, f"placeholder '{name}' is not a parameter name"
                )
            if name == "self":
                raise TemplateSyntaxError(field, variant, source, "placeholder cannot be named 'self'")
            if conversion is not None:
                raise TemplateSyntaxError(
                    field, variant, source, f"conversion '!{conversion}' is not supported"
                )
            if "{" in format_spec or "}" in format_spec:
                raise TemplateSyntaxError(
                    field, variant, source, "nested brace inside a format spec"
                )
            if not FORMAT_SPEC_PATTERN.fullmatch(format_spec):
                raise TemplateSyntaxError(
                    field,
                    variant,
                    source,
                    f"format spec '{format_spec}' is not supported (use [[fill]align][width])",
                )
            segments.append(PlaceholderSegment(name=name, format_spec=format_spec))

        return Template(source=source, segments=segments)

    def analyze(self, field: ResolvedField) -> AnalyzedField:
        """
        Parse a resolved field's templates and settle its parameter list.

        Args:
            field: Field with templates for every variant

        Returns:
            Analyzed field

        Raises:
            TemplateSyntaxError: If a template is malformed
            UnknownPlaceholderError: If a template uses an undeclared parameter
        """
        declared = field.definition.params

        if field.is_placeholder:
            # Fixed text, arguments are accepted and ignored
            params = list(declared or [])
            templates = {
                variant: Template(source=text, segments=[LiteralSegment(text=text)])
                for variant, text in field.templates.items()
            }
            return AnalyzedField(
                resolved=field,
                params=params,
                templates=templates,
                unused_params=[param.name for param in params],
            )

        # Authored order drives parameter inference
        authored: Dict[str, Template] = {
            variant: self.parse_template(field.name, variant, source)
            for variant, source in field.definition.templates.items()
        }
        referenced: List[str] = []
        for template in authored.values():
            for name in template.placeholders:
                if name not in referenced:
                    referenced.append(name)

        if declared is None:
            params = [ParamDef(name=name) for name in referenced]
            inferred = bool(params)
            unused: List[str] = []
        else:
            declared_names = {param.name for param in declared}
            for variant, template in authored.items():
                for name in template.placeholders:
                    if name not in declared_names:
                        raise UnknownPlaceholderError(field.name, variant, name, field.line)
            params = list(declared)
            inferred = False
            unused = [param.name for param in declared if param.name not in referenced]

        if unused:
            self.logger.debug("Declared parameters are never used", field=field.name, params=unused)

        default_template = authored[next(iter(field.templates))]
        templates = {
            variant: authored.get(variant, default_template) for variant in field.templates
        }

        return AnalyzedField(
            resolved=field,
            params=params,
            params_inferred=inferred,
            templates=templates,
            unused_params=unused,
        )
