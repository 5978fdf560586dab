#
# src/testrelay/api/__init__.py
#
"""
HTTP surface for testrelay.
"""
from .app import create_app

__all__ = ["create_app"]

# 🔼⚙️
