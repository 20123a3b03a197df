"""
Test Helpers
============

Helper functions for common testing operations.
"""

import importlib
import os
import sys
from pathlib import Path
from types import ModuleType
from typing import Dict, Optional, Union


def write_module(directory: Union[str, Path], name: str, content: str) -> Path:
    """Write a Python module into a directory on the import path."""
    path = Path(directory) / f"{name}.py"
    path.write_text(content, encoding="utf-8")
    return path


def enum_module_source(*variants: str, name: str = "Language") -> str:
    """Source of a module defining one Enum class."""
    members = "\n".join(f"    {variant} = {index}" for index, variant in enumerate(variants, start=1))
    return f"from enum import Enum\n\n\nclass {name}(Enum):\n{members}\n"


class ImportedModules:
    """Context manager importing modules and dropping them from sys.modules afterwards."""

    def __init__(self, *names: str):
        self.names = names
        self.modules: Dict[str, ModuleType] = {}

    def __enter__(self) -> "ImportedModules":
        return self

    def load(self, name: str) -> ModuleType:
        # Modules may have been written after the last import from the same directory
        importlib.invalidate_caches()
        self.modules[name] = importlib.import_module(name)
        return self.modules[name]

    def __exit__(self, exc_type, exc_val, exc_tb):
        for name in self.names:
            sys.modules.pop(name, None)


class MockEnvironment:
    """Context manager for mocking environment variables."""

    def __init__(self, env_vars: Dict[str, str]):
        self.env_vars = env_vars
        self.original_values: Dict[str, Optional[str]] = {}

    def __enter__(self):
        for key, value in self.env_vars.items():
            self.original_values[key] = os.environ.get(key)
            os.environ[key] = value
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        for key in self.env_vars:
            if self.original_values[key] is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = self.original_values[key]
