"""
Data Models
===========

Pydantic models shared by every stage of the generator.
"""
