"""Interactive shell helpers.

The command surface is implemented with Typer and Rich; each helper is also
importable from ``shellkit_cli.facade`` for use from Python.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
