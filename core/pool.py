"""Bounded free-list of recyclable phenotype instances."""

from __future__ import annotations

import logging
import threading
from collections import deque

from core.errors import InvalidArgumentError
from core.fitness import FitnessFunction, FitnessScaler
from core.phenotype import FitnessCell, Phenotype, validate_arguments
from genetics.genotype import Genotype

LOGGER = logging.getLogger(__name__)


class PhenotypePool:
    """Recycles phenotype instances to cut allocation churn.

    A released instance is fully reset under the pool lock before it can be
    handed out again, and an instance can sit in the free list only once.
    Callers must drop every reference to a phenotype they release.
    """

    def __init__(self, max_size: int = 1024) -> None:
        if max_size <= 0:
            raise InvalidArgumentError(f"Pool max_size must be > 0, got {max_size}.")
        self.max_size = max_size
        self._free: deque[Phenotype] = deque()
        self._free_ids: set[int] = set()
        self._lock = threading.Lock()
        self.created = 0
        self.recycled = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._free)

    def acquire(
        self,
        genotype: Genotype,
        fitness_function: FitnessFunction,
        scaler: FitnessScaler,
        generation: int,
    ) -> Phenotype:
        """Return an unevaluated phenotype, reusing a free slot when one exists.

        Validation matches ``Phenotype.create``; a failing call takes nothing
        out of the free list.
        """
        evaluator = validate_arguments(genotype, fitness_function, scaler, generation)
        with self._lock:
            if self._free:
                phenotype = self._free.popleft()
                self._free_ids.discard(id(phenotype))
                self.recycled += 1
                phenotype._bind(genotype, evaluator, generation, phenotype._cell)
                return phenotype
            self.created += 1
        phenotype = object.__new__(Phenotype)
        phenotype._bind(genotype, evaluator, generation, FitnessCell())
        return phenotype

    def release(self, phenotype: Phenotype) -> None:
        """Reset ``phenotype`` and return it to the free list.

        Raises:
            InvalidArgumentError: if ``phenotype`` is already free.
        """
        with self._lock:
            if id(phenotype) in self._free_ids:
                raise InvalidArgumentError("Phenotype has already been released to this pool.")
            if len(self._free) >= self.max_size:
                LOGGER.debug("Phenotype pool full (%d); dropping released instance", self.max_size)
                return
            phenotype._cell.reset()
            phenotype._bind(None, None, 0, phenotype._cell)
            self._free.append(phenotype)
            self._free_ids.add(id(phenotype))
