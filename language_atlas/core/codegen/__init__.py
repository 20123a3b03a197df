"""
Code Generation Module
=====================

Accessor emitters: Jinja2-rendered Python source and in-memory dispatch tables.
"""
