"""
Test Data Generators
====================

Language tables and enum classes for testing scenarios.
"""

from enum import Enum
from typing import Dict, List, Optional, Type


def make_enum(*variants: str, name: str = "Language") -> Type[Enum]:
    """Create a new Enum class with the given member names, in order."""
    return Enum(name, list(variants))  # type: ignore[return-value]


class LanguageTableGenerator:
    """Generate DSL source text."""

    @staticmethod
    def worked_example() -> str:
        """The four-field table used throughout the docs."""
        return '''
LanguageEnum: Language
// returns constant text
greeting {
    English: "Hello"
    Spanish: "Hola"
    French:  "Bonjour"
}
// name only needs to render as text
farewell(name) {
    English: "Goodbye, {name}"
    Spanish: "Adios, {name}"
    French:  "Au revoir, {name}"
}
// English is the default for Spanish
date(day: int, month: int, year: int) {
    French:  "{day}/{month}/{year}"
    English: "{month}/{day}/{year}"
}
dummy {  }
'''

    @staticmethod
    def base_case() -> str:
        """Only the default variant is authored."""
        return '''
LanguageEnum: Language
greeting {
    German:  "Hallo"
}
counter(n: int) {
    German: "#{n}"
}
content(content) {
    German: "C: {content}"
}
'''

    @staticmethod
    def placeholders_only() -> str:
        return '''
LanguageEnum: Language
dummy {  }
dummy_args(a: int, b: int) {  }
dummy_args_general(a, b) {  }
'''

    @staticmethod
    def field(
        name: str,
        templates: Dict[str, str],
        params: Optional[List[str]] = None,
        target: str = "Language",
    ) -> str:
        """Build a single-field unit."""
        header = name if params is None else f"{name}({', '.join(params)})"
        entries = "\n".join(f'    {variant}: "{template}"' for variant, template in templates.items())
        return f"LanguageEnum: {target}\n{header} {{\n{entries}\n}}\n"
