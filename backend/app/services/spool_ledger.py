"""Per-spool filament consumption ledger.

Jobs are attributed to spools by exact match on the slicer's filament name.
A name that is not in the roster becomes a new spool starting at zero, so a
typo or a case change in the slicer profile shows up as its own row.
"""

import logging
from collections.abc import Iterable, Iterator, Mapping

from backend.app.schemas.history import HistoryJob
from backend.app.services.filament import millimeters_to_grams

logger = logging.getLogger(__name__)


class SpoolLedger:
    """Cumulative grams used per spool name for one report."""

    def __init__(self, seed: Mapping[str, float]):
        self._grams: dict[str, float] = dict(seed)

    def record_usage(self, spool_name: str, grams: float) -> float:
        """Add grams to a spool, creating it at zero if unseen. Returns the new total."""
        if spool_name not in self._grams:
            logger.debug("New spool from history: %r", spool_name)
            self._grams[spool_name] = 0.0
        self._grams[spool_name] += grams
        return self._grams[spool_name]

    def apply_job(self, job: HistoryJob) -> float:
        return self.record_usage(job.metadata.filament_name, millimeters_to_grams(job.filament_used))

    def apply_jobs(self, jobs: Iterable[HistoryJob]) -> None:
        for job in jobs:
            self.apply_job(job)

    def as_dict(self) -> dict[str, float]:
        return dict(self._grams)

    def items(self):
        return self._grams.items()

    def __getitem__(self, spool_name: str) -> float:
        return self._grams[spool_name]

    def __contains__(self, spool_name: object) -> bool:
        return spool_name in self._grams

    def __iter__(self) -> Iterator[str]:
        return iter(self._grams)

    def __len__(self) -> int:
        return len(self._grams)


def aggregate_usage(seed: Mapping[str, float], jobs: Iterable[HistoryJob]) -> dict[str, float]:
    """Fold history jobs into a fresh ledger seeded from the roster."""
    ledger = SpoolLedger(seed)
    ledger.apply_jobs(jobs)
    return ledger.as_dict()
