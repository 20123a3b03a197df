"""
Core Generator Logic
==================

Modules:
- dsl: parsing, variant resolution and template analysis
- codegen: accessor emission (Jinja2 source and dispatch tables)
- pipeline: end-to-end generation of one unit
- exceptions: generation failures
"""
