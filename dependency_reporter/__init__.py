"""
Dependency Reporter

A tool for reporting version currency, license distribution and authorship
of the dependencies declared in an npm package.json.
"""

__version__ = "0.1.0"

from .cli import main

__all__ = ["main"]
