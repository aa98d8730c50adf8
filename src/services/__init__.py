"""
Utility functions for Lambda handler operations.

This package contains reusable service functions such as notification
template loading and rendering.
"""

__all__ = ['templates']
