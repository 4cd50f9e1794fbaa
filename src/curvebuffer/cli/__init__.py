"""Command-line interface for curvebuffer.

This module provides the CLI using Typer with rich output for
user-friendly feedback and progress reporting.

Key features:
- Progress bars for curve processing
- Verbose/quiet output modes
- Info mode to inspect a curve file
- Detailed error reporting
"""

from curvebuffer.cli.app import cli, main

__all__ = ["cli", "main"]
