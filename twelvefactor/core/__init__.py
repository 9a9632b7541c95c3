"""
Core backend-agnostic components for twelvefactor.

This package contains the domain schema, configuration loading and the
exceptions shared across scheduler backends.
"""

__all__ = []
