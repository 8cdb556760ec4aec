"""
itylang Command-Line Interface
==============================

This package provides the command-line tool for itylang:

- **ityc**: scan and check an Ity source file

The tool is a Click-based CLI application with help text and
consistent exit codes (see cli.errors).
"""

__all__ = ["ityc"]
