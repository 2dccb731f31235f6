"""Per-iteration CSV log of a swarm run.

Every row carries the run metadata (topology, swarm size, problem, seed...)
followed by the iteration metrics the swarm reports: the iteration best,
the mean personal-best fitness and the elapsed time.
"""

from __future__ import annotations

import csv
import datetime as dt
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

ITERATION_FIELDS = ("iteration", "best_fitness", "mean_personal_best", "runtime_ms")


def _utc_stamp(fmt: str) -> str:
    return dt.datetime.now(dt.timezone.utc).strftime(fmt)


@dataclass
class RunLogger:
    """Buffer swarm iteration metrics and write them as one CSV file per run."""

    base_dir: Path
    filename: Optional[str] = None
    metadata: Dict[str, object] = field(default_factory=dict)

    _rows: List[Dict[str, object]] = field(default_factory=list, init=False)
    _path: Optional[Path] = field(default=None, init=False)

    def __post_init__(self) -> None:
        self.base_dir = Path(self.base_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)
        self.metadata = dict(self.metadata)
        clash = set(self.metadata) & set(ITERATION_FIELDS)
        if clash:
            raise ValueError(f"Metadata keys collide with iteration fields: {sorted(clash)}")

    @property
    def rows(self) -> List[Dict[str, object]]:
        return list(self._rows)

    @property
    def path(self) -> Path:
        if self._path is None:
            name = self.filename or f"run_{_utc_stamp('%Y%m%dT%H%M%S')}.csv"
            self._path = self.base_dir / name
        return self._path

    def update_metadata(self, **extra: object) -> None:
        """Merge run-level values shared by all rows logged from now on."""
        clash = set(extra) & set(ITERATION_FIELDS)
        if clash:
            raise ValueError(f"Metadata keys collide with iteration fields: {sorted(clash)}")
        self.metadata.update(extra)

    def log_iteration(self,
                      iteration: int,
                      best_fitness: float,
                      mean_personal_best: float,
                      runtime_ms: float) -> None:
        """Buffer one iteration of the swarm loop."""
        row: Dict[str, object] = {"timestamp": _utc_stamp('%Y-%m-%dT%H:%M:%S.%f')[:-3] + 'Z'}
        row.update(self.metadata)
        row.update(
            iteration=int(iteration),
            best_fitness=float(best_fitness),
            mean_personal_best=float(mean_personal_best),
            runtime_ms=float(runtime_ms),
        )
        self._rows.append(row)

    def columns(self) -> List[str]:
        """timestamp, then metadata keys in first-seen order, then the iteration fields."""
        meta: List[str] = []
        for row in self._rows:
            for key in row:
                if key != "timestamp" and key not in ITERATION_FIELDS and key not in meta:
                    meta.append(key)
        return ["timestamp", *meta, *ITERATION_FIELDS]

    def flush(self) -> Path:
        """Write the buffered iterations and return the CSV path."""
        if not self._rows:
            raise RuntimeError("No iterations to write; did the swarm run?")

        with self.path.open('w', newline='') as handle:
            writer = csv.DictWriter(handle, fieldnames=self.columns())
            writer.writeheader()
            writer.writerows(self._rows)
        return self.path
