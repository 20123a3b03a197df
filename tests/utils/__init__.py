"""
Test Utilities
==============

Assertion helpers, data generators and import helpers shared by the test suite.
"""
