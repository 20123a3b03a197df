"""
DSL Processing Module
====================

Language table parsing, validation and analysis.

Components:
- parser: lexer and recursive descent parser producing GenerationUnit
- resolver: variant checks and default filling
- analyzer: template placeholders and parameter lists
"""
