"""CSV logger for per-evaluation swarm metrics."""

from __future__ import annotations

import csv
import datetime as dt
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, MutableMapping, Optional

import pandas as pd


def _timestamp() -> str:
    return dt.datetime.now(dt.timezone.utc).isoformat(timespec='milliseconds')


@dataclass
class RunLogger:
    """
    Buffer one row per reported fitness, with shared run metadata.

    Rows are written by `flush()`, which rewrites the whole file so it can be
    called after every evaluation. With `flush_every=N` the logger flushes
    itself every N rows.
    """

    base_dir: Path
    filename: Optional[str] = None
    metadata: Optional[Dict[str, object]] = None
    field_order: Optional[Iterable[str]] = None
    flush_every: int = 0

    _records: List[MutableMapping[str, object]] = field(default_factory=list, init=False)
    _resolved_path: Optional[Path] = field(default=None, init=False)

    def __post_init__(self) -> None:
        self.base_dir = Path(self.base_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)
        self.metadata = dict(self.metadata or {})

    def __len__(self) -> int:
        return len(self._records)

    @property
    def path(self) -> Path:
        return self._resolve_path()

    def log_evaluation(self, **metrics: object) -> None:
        """Buffer metrics for one evaluation."""
        record: MutableMapping[str, object] = {'timestamp': _timestamp()}
        record.update(self.metadata)
        record.update(metrics)
        self._records.append(record)
        if self.flush_every > 0 and len(self._records) % self.flush_every == 0:
            self.flush()

    def update_metadata(self, **extra: object) -> None:
        """Merge additional metadata that all future rows will share."""
        self.metadata.update(extra)

    def flush(self) -> Path:
        """Write buffered records to disk and return the file path."""
        if not self._records:
            raise RuntimeError("No records to write; did you call log_evaluation()?")

        path = self._resolve_path()
        with path.open('w', newline='') as handle:
            writer = csv.DictWriter(handle, fieldnames=self._determine_fieldnames(), extrasaction='ignore')
            writer.writeheader()
            for record in self._records:
                writer.writerow(record)
        return path

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(self._records, columns=self._determine_fieldnames() or None)

    def _resolve_path(self) -> Path:
        if self._resolved_path is None:
            stamp = dt.datetime.now(dt.timezone.utc).strftime('%Y%m%dT%H%M%S')
            self._resolved_path = self.base_dir / (self.filename or f"evaluations_{stamp}.csv")
        return self._resolved_path

    def _determine_fieldnames(self) -> List[str]:
        if self.field_order:
            return list(self.field_order)

        keys: List[str] = []
        for record in self._records:
            for key in record.keys():
                if key not in keys:
                    keys.append(key)
        return keys


def read_history(path) -> pd.DataFrame:
    """Load an evaluation CSV written by RunLogger."""
    return pd.read_csv(path)
