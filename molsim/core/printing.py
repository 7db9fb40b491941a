"""Printing helpers for the molsim CLI."""

from __future__ import annotations

from typing import Iterable, Tuple


def print_banner(title: str, width: int = 60, char: str = "=") -> None:
    print(char * width)
    print(title)
    print(char * width)


def print_summary(title: str, items: Iterable[Tuple[str, object]], width: int = 60) -> None:
    """Print a banner followed by aligned `label: value` lines."""
    items = list(items)
    print_banner(title, width=width)
    pad = max((len(k) for k, _ in items), default=0)
    for k, v in items:
        print(f"{k:<{pad}} : {v}")
    print("-" * width)
