"""
export/csv_writer.py
--------------------
CSV writer for time-travel sweeps.

Each row contains: t, date, depth_32nds, score, risk, weather_mode,
skip_rotations, aggressive_driving, total_months.
"""

from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import Iterable, Optional, TextIO

from treadsight.core.models import TimeTravelState

logger = logging.getLogger(__name__)

_FIELDNAMES = [
    "t",
    "date",
    "depth_32nds",
    "score",
    "risk",
    "weather_mode",
    "skip_rotations",
    "aggressive_driving",
    "total_months",
]


class TimelineCsvWriter:
    """Writes :class:`TimeTravelState` rows to a CSV file."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._file: Optional[TextIO] = open(self._path, "w", newline="", encoding="utf-8")
        self._writer = csv.DictWriter(self._file, fieldnames=_FIELDNAMES)
        self._writer.writeheader()
        self._row_count = 0
        logger.info("CSV writer opened: %s", self._path)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def write(self, state: TimeTravelState) -> None:
        """Append one state row."""
        if self._file is None:
            raise ValueError(f"CSV writer for {self._path} is closed")
        self._writer.writerow({
            "t": f"{state.t:.4f}",
            "date": state.current_date.isoformat(),
            "depth_32nds": f"{state.current_depth:.2f}",
            "score": state.current_score,
            "risk": state.current_risk.value,
            "weather_mode": state.weather_mode.value,
            "skip_rotations": int(state.skip_rotations),
            "aggressive_driving": int(state.aggressive_driving),
            "total_months": state.total_months,
        })
        self._row_count += 1

    def write_all(self, states: Iterable[TimeTravelState]) -> None:
        for state in states:
            self.write(state)

    def close(self) -> None:
        if self._file:
            self._file.close()
            self._file = None
            logger.debug("CSV file closed: %s (%d rows)", self._path, self._row_count)

    @property
    def path(self) -> Path:
        return self._path

    @property
    def row_count(self) -> int:
        return self._row_count

    def __enter__(self) -> "TimelineCsvWriter":
        return self

    def __exit__(self, *_: object) -> None:
        self.close()
