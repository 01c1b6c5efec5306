"""
PLT Reorder Command-Line Interface
==================================

This package provides the `pltreorder` command:

- **pltreorder reorder**: write a copy of a PLT file with pen groups reordered
- **pltreorder list**: show the header and chunk table of a PLT file

The tool is a Click application with built-in help and uniform
error reporting (see errors.py).
"""

__all__ = ["pltreorder"]
