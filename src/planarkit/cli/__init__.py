"""Command-line interface for planarkit.

This module provides the CLI using Typer with rich output for
progress reporting and per-shape summaries.

Key features:
- Progress bars for batch triangulation
- Verbose/quiet output modes
- Shape inspection (orientation, convexity, monotone pieces)
"""

from planarkit.cli.app import cli, main

__all__ = ["cli", "main"]
