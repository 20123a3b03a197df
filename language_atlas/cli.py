#!/usr/bin/env python3
"""
Language Atlas Command Line
==========================

Run generation as a build step:

    language-atlas check strings.atlas --enum myapp.lang:Language
    language-atlas generate strings.atlas --variants English,Spanish,French \\
        --enum-module myapp.lang -o myapp/lang_strings.py
"""

import argparse
import importlib
import sys
from enum import Enum
from pathlib import Path
from typing import List, Optional

from language_atlas.config.logging import setup_logging
from language_atlas.config.settings import get_settings
from language_atlas.core.dsl.parser import get_validation_suggestions, parse_unit
from language_atlas.core.exceptions import LanguageAtlasError
from language_atlas.core.pipeline import generate_source, validate_source
from language_atlas.models.schemas import VariantType


def load_enum(spec: str) -> VariantType:
    """Import 'module:Class' and read its members."""
    module_name, _, class_name = spec.partition(":")
    if not module_name or not class_name:
        raise ValueError(f"Expected 'module:Class', got '{spec}'")
    enum_cls = getattr(importlib.import_module(module_name), class_name)
    if not (isinstance(enum_cls, type) and issubclass(enum_cls, Enum)):
        raise ValueError(f"{spec} is not an Enum class")
    return VariantType.from_enum(enum_cls)


def resolve_target(args: argparse.Namespace, source: str) -> VariantType:
    if args.enum:
        return load_enum(args.enum)
    variants = [variant.strip() for variant in args.variants.split(",") if variant.strip()]
    # The enum name comes from the unit header when only variants are given
    return VariantType(name=parse_unit(source).target_type, variants=variants)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="language-atlas", description="Generate enum text accessors from language tables"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (
        ("check", "Validate a language table"),
        ("generate", "Write the accessor module for a language table"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("file", help="Language table file")
        target = sub.add_mutually_exclusive_group(required=True)
        target.add_argument("--enum", help="Target enum as 'module:Class'")
        target.add_argument("--variants", help="Comma-separated variant names, default first")
        if name == "generate":
            sub.add_argument("--enum-module", help="Module the generated code imports the enum from")
            sub.add_argument("-o", "--output", help="Output file (defaults to stdout)")

    return parser


def run_check(args: argparse.Namespace, source: str) -> int:
    result = validate_source(source, resolve_target(args, source))
    for warning in result.warnings:
        print(f"⚠️  {warning}")
    if result.success:
        print(f"✅ {args.file}: {len(result.compiled.fields) if result.compiled else 0} fields OK")
        return 0

    for error in result.errors:
        print(f"❌ {error}")
    for suggestion in get_validation_suggestions(source, result.errors):
        print(f"💡 {suggestion}")
    return 1


def run_generate(args: argparse.Namespace, source: str) -> int:
    enum_module = args.enum_module
    if enum_module is None and args.enum:
        enum_module = args.enum.partition(":")[0]
    if enum_module is None:
        enum_module = get_settings().enum_module

    generated = generate_source(source, resolve_target(args, source), enum_module=enum_module)
    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(generated, encoding="utf-8")
        print(f"✅ Wrote {output_path}")
    else:
        sys.stdout.write(generated)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging()

    input_path = Path(args.file)
    if not input_path.exists():
        print(f"❌ Input file does not exist: {input_path}")
        return 1
    source = input_path.read_text(encoding="utf-8")

    try:
        if args.command == "check":
            return run_check(args, source)
        return run_generate(args, source)
    except (LanguageAtlasError, ValueError, ImportError) as e:
        print(f"❌ {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
