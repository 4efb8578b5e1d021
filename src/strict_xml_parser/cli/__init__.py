"""Command-line interface module for Strict XML Parser.

This module provides the strict-xml tool for well-formedness checking of
files and directories and for printing parsed document trees.
"""

from .main import main

__all__ = ["main"]
