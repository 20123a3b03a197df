"""
Generation Errors
=================

Every failure the generator can report. All of them are raised while a unit
is being compiled; generated accessors never raise any of these.
"""

from typing import Optional


class LanguageAtlasError(Exception):
    """Base class for all generation failures."""

    pass


class DSLSyntaxError(LanguageAtlasError):
    """Structural failure: the DSL text does not match the grammar."""

    def __init__(
        self,
        message: str,
        line: int,
        column: int,
        token: Optional[str] = None,
        expected: Optional[str] = None,
    ) -> None:
        self.line = line
        self.column = column
        self.token = token
        self.expected = expected
        self.detail = message
        super().__init__(f"line {line}, column {column}: {message}")


class SemanticError(LanguageAtlasError):
    """A well-formed unit whose content is inconsistent with the target enum."""

    def __init__(self, field: Optional[str], message: str, line: Optional[int] = None) -> None:
        self.field = field
        self.line = line
        self.detail = message
        prefix = f"field '{field}'" if field else "unit"
        if line is not None:
            prefix = f"line {line}: {prefix}"
        super().__init__(f"{prefix}: {message}")


class TargetMismatchError(SemanticError):
    """The unit header names a different type than the one being generated for."""


class UnknownVariantError(SemanticError):
    """A field authors a template for a variant the enum does not have."""

    def __init__(self, field: str, variant: str, known: list[str], line: Optional[int] = None) -> None:
        self.variant = variant
        super().__init__(
            field,
            f"unknown variant '{variant}' (expected one of: {', '.join(known)})",
            line,
        )


class UnresolvedDefaultError(SemanticError):
    """A non-empty field leaves out the default variant, so nothing can fill the gaps."""

    def __init__(self, field: str, default_variant: str, line: Optional[int] = None) -> None:
        self.default_variant = default_variant
        super().__init__(
            field,
            f"no template for default variant '{default_variant}'",
            line,
        )


class UnknownPlaceholderError(SemanticError):
    """A template references a name missing from the field's declared parameters."""

    def __init__(self, field: str, variant: str, placeholder: str, line: Optional[int] = None) -> None:
        self.variant = variant
        self.placeholder = placeholder
        super().__init__(
            field,
            f"unknown parameter '{placeholder}' referenced in template for '{variant}'",
            line,
        )


class TemplateSyntaxError(LanguageAtlasError):
    """A template string is not a valid placeholder template."""

    def __init__(self, field: str, variant: str, template: str, reason: str) -> None:
        self.field = field
        self.variant = variant
        self.template = template
        self.detail = reason
        super().__init__(f"field '{field}', variant '{variant}': {reason} in {template!r}")


class EmitError(LanguageAtlasError):
    """Accessors could not be generated or attached."""

    pass
