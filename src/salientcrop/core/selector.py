"""Best-candidate selection.

Candidates are scored in enumeration order and the first one with the
strictly highest total wins. With ``max_workers > 1`` scoring runs on a
thread pool, but results are still reduced in enumeration order, so the
winner is identical to a sequential run.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from concurrent.futures import ThreadPoolExecutor
from typing import Any

from salientcrop.core.candidates import CropCandidate, Score
from salientcrop.core.exceptions import NoCandidatesError
from salientcrop.core.scorer import Scorer
from salientcrop.utils.logging import get_logger


class Selector:
    """Picks the top-scoring candidate."""

    __slots__ = ("_logger", "_max_workers")

    def __init__(self, max_workers: int = 1, logger: Any | None = None) -> None:
        """Initialize the selector.

        Args:
            max_workers: Threads used for scoring; 1 scores inline.
            logger: structlog-style logger; defaults to this module's logger.

        Raises:
            ValueError: If max_workers is less than 1.
        """
        if max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {max_workers}")
        self._max_workers = max_workers
        self._logger = logger or get_logger(__name__)

    def _scores(
        self,
        scorer: Scorer,
        candidates: Iterable[CropCandidate],
    ) -> Iterator[tuple[CropCandidate, Score]]:
        if self._max_workers == 1:
            for candidate in candidates:
                yield candidate, scorer.score(candidate)
            return

        pending = list(candidates)
        with ThreadPoolExecutor(max_workers=self._max_workers) as pool:
            yield from zip(pending, pool.map(scorer.score, pending), strict=True)

    def select(
        self,
        scorer: Scorer,
        candidates: Iterable[CropCandidate],
    ) -> CropCandidate:
        """Score every candidate and return the winner with its Score.

        Raises:
            NoCandidatesError: If ``candidates`` is empty.
        """
        best: CropCandidate | None = None
        best_total = 0.0
        evaluated = 0

        for candidate, score in self._scores(scorer, candidates):
            evaluated += 1
            if best is None or score.total > best_total:
                best = candidate.with_score(score)
                best_total = score.total

        if best is None:
            raise NoCandidatesError("Candidate search produced no crop rectangles")

        self._logger.debug(
            "Selected crop",
            candidates=evaluated,
            x=best.x,
            y=best.y,
            width=best.width,
            height=best.height,
            total=best_total,
        )
        return best
