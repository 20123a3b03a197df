"""
Test Suite
==========

Test suite matching the language_atlas/ package structure.

Test Categories:
- unit: Unit tests for individual components
- integration: End-to-end generation, installed accessors and the CLI
"""
