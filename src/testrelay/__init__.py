#
# src/testrelay/__init__.py
#
"""
testrelay: trigger, discover and monitor test suite runs against a
checked-out project.
"""
from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("testrelay")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"

__all__ = ["__version__"]

# 🔼⚙️
