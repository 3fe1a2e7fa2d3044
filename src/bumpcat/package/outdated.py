"""Parsers for package manager "outdated" listings."""

import json
import re
from collections.abc import Callable

_PNPM_MARKER = re.compile(r"\s+\((dev|optional)\)$")


def parse_pnpm(output: str) -> list[str]:
    """Parse `pnpm outdated --no-table`.

    Each package takes three lines: its name (with a "(dev)" marker for
    dev dependencies), the version change, and a blank line or link.
    """
    return [
        _PNPM_MARKER.sub("", line.strip())
        for i, line in enumerate(output.split("\n"))
        if line.strip() and i % 3 == 0
    ]


def parse_lines(output: str) -> list[str]:
    """One package per line; only the first token counts."""
    names = []
    for line in output.splitlines():
        line = line.strip()
        if line and not line.startswith("#"):
            names.append(line.split()[0])
    return names


def parse_pip_json(output: str) -> list[str]:
    """Parse `pip list --outdated --format=json`."""
    if not output.strip():
        return []
    return [entry["name"] for entry in json.loads(output)]


PARSERS: dict[str, Callable[[str], list[str]]] = {
    "pnpm": parse_pnpm,
    "lines": parse_lines,
    "pip-json": parse_pip_json,
}


def parse_outdated(output: str, fmt: str) -> tuple[str, ...]:
    """Parse a listing in format `fmt`, dropping duplicates.

    Raises:
        ValueError: If fmt is not a known format
    """
    try:
        parser = PARSERS[fmt]
    except KeyError:
        raise ValueError(
            f"Unknown outdated format '{fmt}', "
            f"expected one of: {', '.join(PARSERS)}"
        ) from None
    return tuple(dict.fromkeys(parser(output)))
