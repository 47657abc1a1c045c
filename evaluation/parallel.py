"""Thread-pool fitness evaluation for batches of phenotypes."""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Iterable

from core.errors import InvalidArgumentError
from core.phenotype import Phenotype

LOGGER = logging.getLogger(__name__)


class ParallelFitnessEvaluator:
    """Evaluates independent phenotypes concurrently.

    Phenotypes memoize their own fitness, so submitting the same instance
    more than once (or racing with other callers) still runs its fitness
    function at most once. No timeout or cancellation is applied.
    """

    def __init__(self, max_workers: int = 4) -> None:
        if max_workers <= 0:
            raise InvalidArgumentError(f"max_workers must be > 0, got {max_workers}.")
        self.max_workers = max_workers
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="fitness")

    def __enter__(self) -> "ParallelFitnessEvaluator":
        return self

    def __exit__(self, *_exc: object) -> None:
        self.close()

    def submit(self, phenotype: Phenotype) -> Future:
        return self._executor.submit(phenotype.evaluate)

    def evaluate_all(self, phenotypes: Iterable[Phenotype]) -> list[Phenotype]:
        """Evaluate every phenotype and return them in input order.

        Waits for all tasks to settle. If any fitness evaluation raised, the
        first failure (in input order) is re-raised unchanged; the failed
        phenotypes stay unevaluated and can be retried.
        """
        batch = list(phenotypes)
        pending = [self.submit(phenotype) for phenotype in batch]
        LOGGER.info("Evaluating %d phenotype(s) with %d worker(s)", len(batch), self.max_workers)
        wait(pending)

        failures = [(phenotype, future.exception()) for phenotype, future in zip(batch, pending)]
        failures = [(phenotype, exc) for phenotype, exc in failures if exc is not None]
        for phenotype, exc in failures:
            LOGGER.error("Fitness evaluation failed for %r: %s", phenotype, exc)
        if failures:
            raise failures[0][1]

        LOGGER.info("Evaluated %d phenotype(s)", len(batch))
        return batch

    def close(self) -> None:
        self._executor.shutdown(wait=True)
