"""Diagnostic logger for per-call selection events.

Uses the standard ``logging`` module with the ``"scorepick"`` logger.
No ``print()`` statements. Supports three verbosity levels and an
in-memory diagnostic mode for post-hoc analysis.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from scorepick.config import ScorePickConfig
    from scorepick.logging.types import SelectionRecord

logger = logging.getLogger("scorepick")


class SelectionLogger:
    """Per-call diagnostic logger.

    Log levels:
        ``"none"``: No logging output. Records are still stored if
        ``diagnostic_mode=True``.

        ``"summary"``: One line per call with the key metrics.

        ``"full"``: Full JSON dump of all record fields.

    Diagnostic mode stores all records in memory for post-hoc statistical
    analysis via ``get_diagnostic_data()`` and ``get_summary_stats()``.
    """

    def __init__(self, config: ScorePickConfig) -> None:
        self._log_level = config.log_level
        self._diagnostic_mode = config.diagnostic_mode
        self._records: list[SelectionRecord] = []

    def log_selection(self, record: SelectionRecord) -> None:
        """Log a single selection event.

        Args:
            record: Immutable record of the pipeline execution.
        """
        if self._diagnostic_mode:
            self._records.append(record)

        if self._log_level == "none":
            return

        if self._log_level == "summary":
            logger.info(
                "token=%d prob=%.4f candidates=%d mode=%s draw=%s temp=%.3f "
                "entropy=%.3f history=%d source=%s total=%.2fms",
                record.token_id,
                record.token_prob,
                record.num_candidates,
                "greedy" if record.greedy else "stochastic",
                "-" if record.draw is None else f"{record.draw:.6f}",
                record.temperature,
                record.shannon_entropy,
                record.history_length,
                record.random_source,
                record.total_sampling_ms,
            )
        elif self._log_level == "full":
            logger.info("selection_record: %s", json.dumps(asdict(record), default=str))

    def get_diagnostic_data(self) -> list[SelectionRecord]:
        """Return all stored records (empty unless ``diagnostic_mode=True``)."""
        return list(self._records)

    def clear(self) -> None:
        """Drop all stored records."""
        self._records.clear()

    def get_summary_stats(self) -> dict[str, Any]:
        """Compute summary statistics over all stored records.

        Returns:
            Dictionary with aggregate stats, or empty dict if no records.
        """
        if not self._records:
            return {}

        n = len(self._records)
        draws = [r.draw for r in self._records if r.draw is not None]
        probs = [r.token_prob for r in self._records]
        candidates = [r.num_candidates for r in self._records]
        total_times = [r.total_sampling_ms for r in self._records]
        greedy_count = sum(1 for r in self._records if r.greedy)

        stats: dict[str, Any] = {
            "total_selections": n,
            "greedy_count": greedy_count,
            "greedy_rate": greedy_count / n,
            "mean_prob": sum(probs) / n,
            "mean_candidates": sum(candidates) / n,
            "mean_total_ms": sum(total_times) / n,
            "max_total_ms": max(total_times),
            "distinct_tokens": len({r.token_id for r in self._records}),
        }
        if draws:
            stats["mean_draw"] = sum(draws) / len(draws)
            stats["min_draw"] = min(draws)
            stats["max_draw"] = max(draws)
        return stats
