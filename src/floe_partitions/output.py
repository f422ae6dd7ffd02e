"""Console output for the floe-partitions CLI.

Canonical declarations are printed verbatim; errors are marked in red unless
``--no-color`` is given or NO_COLOR is set.
"""

from __future__ import annotations

import json
import os
from typing import Any

from rich.console import Console
from rich.markup import escape

_force_no_color = os.environ.get("NO_COLOR") is not None


def create_console(no_color: bool = False) -> Console:
    """Create a console, colorless if requested or if NO_COLOR is set."""
    no_color = no_color or _force_no_color
    return Console(force_terminal=False if no_color else None, no_color=no_color)


console = create_console()


def error(message: str) -> None:
    """Print an error message after a red cross.

    Example:
        >>> error("Cannot bucket by type: double")
        ✗ Cannot bucket by type: double
    """
    console.print(f"[red]✗[/red] {escape(message)}")


def info(message: str) -> None:
    """Print a canonical declaration without markup or highlighting."""
    console.print(message, markup=False, highlight=False, soft_wrap=True)


def print_json(data: dict[str, Any]) -> None:
    """Print a validated spec as highlighted JSON."""
    console.print_json(json.dumps(data))


def set_no_color(no_color: bool) -> None:
    """Replace the module console, used by the ``--no-color`` option."""
    global console
    console = create_console(no_color=no_color)
