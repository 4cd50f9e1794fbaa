"""Curve reader for loading JSON curve files.

This module provides the CurveReader class for loading curve files and
converting their entries into domain models.
"""

import json
from collections.abc import Iterator
from pathlib import Path
from typing import Any

from curvebuffer.domain import PolyCurve
from curvebuffer.exceptions import CurveLoadError
from curvebuffer.io.converter import entry_to_curve


class CurveReader:
    """Loads JSON curve files.

    Entries are parsed when the file is loaded but converted to curves only
    on demand, so that one malformed curve does not prevent reading the
    others.

    Example:
        reader = CurveReader(Path("curves.json"))
        reader.load()
        for name, entry in reader.iter_entries():
            curve = reader.read_curve(entry)
    """

    def __init__(self, path: Path) -> None:
        """Initialize the curve reader.

        Args:
            path: Path to the JSON curve file
        """
        self._path = path
        self._entries: list[dict[str, Any]] | None = None

    def load(self) -> None:
        """Load the curve file.

        Raises:
            CurveLoadError: If the file is missing, is not valid JSON, or has
                no list of curves
        """
        if not self._path.exists():
            raise CurveLoadError(str(self._path), "file not found")

        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise CurveLoadError(str(self._path), f"invalid JSON: {e}") from e
        except OSError as e:
            raise CurveLoadError(str(self._path), str(e)) from e

        if not isinstance(data, dict) or not isinstance(data.get("curves"), list):
            raise CurveLoadError(str(self._path), "expected an object with a 'curves' list")

        for index, entry in enumerate(data["curves"]):
            if not isinstance(entry, dict):
                raise CurveLoadError(str(self._path), f"curve #{index} is not an object")
        self._entries = data["curves"]

    @property
    def curve_count(self) -> int:
        """Return the number of curve entries.

        Raises:
            RuntimeError: If the file has not been loaded yet
        """
        return len(self._require_entries())

    def iter_entries(self) -> Iterator[tuple[str, dict[str, Any]]]:
        """Iterate over (name, entry) pairs.

        Entries without a name are called curve_<index>.
        """
        for index, entry in enumerate(self._require_entries()):
            yield str(entry.get("name", f"curve_{index}")), entry

    def read_curve(self, entry: dict[str, Any]) -> PolyCurve:
        """Convert one entry into a curve.

        Raises:
            CurveLoadError: If the entry is malformed
            ColinearPointsError: If an arc3 element has colinear points
        """
        try:
            return entry_to_curve(entry)
        except (KeyError, ValueError, TypeError) as e:
            raise CurveLoadError(str(self._path), f"malformed curve: {e}") from e

    def read_curves(self) -> list[tuple[str, PolyCurve]]:
        """Convert every entry, failing on the first malformed one."""
        return [(name, self.read_curve(entry)) for name, entry in self.iter_entries()]

    def _require_entries(self) -> list[dict[str, Any]]:
        if self._entries is None:
            raise RuntimeError("Curve file not loaded. Call load() first.")
        return self._entries
