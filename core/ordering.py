"""Fitness-direction aware ordering and generation bookkeeping for phenotypes."""

from __future__ import annotations

import enum
from collections import Counter
from typing import Iterable, Sequence

from core.phenotype import Phenotype


class Optimize(str, enum.Enum):
    """Direction of the search: which end of the fitness order is better."""

    MINIMUM = "minimum"
    MAXIMUM = "maximum"

    def compare(self, a: Phenotype, b: Phenotype) -> int:
        """Return > 0 if ``a`` is better than ``b``, < 0 if worse, 0 if tied."""
        order = a.compare(b)
        return order if self is Optimize.MAXIMUM else -order

    def best(self, a: Phenotype, b: Phenotype) -> Phenotype:
        return b if self.compare(b, a) > 0 else a

    def worst(self, a: Phenotype, b: Phenotype) -> Phenotype:
        return b if self.compare(b, a) < 0 else a

    def sort(self, phenotypes: Iterable[Phenotype]) -> list[Phenotype]:
        """Return phenotypes ordered best first; ties keep their input order."""
        return sorted(phenotypes, key=lambda p: p.fitness, reverse=self is Optimize.MAXIMUM)


def best_of(population: Sequence[Phenotype], optimize: Optimize = Optimize.MAXIMUM) -> Phenotype | None:
    if not population:
        return None
    best = population[0]
    for phenotype in population[1:]:
        best = optimize.best(best, phenotype)
    return best


def count_by_generation(population: Iterable[Phenotype]) -> dict[int, int]:
    """Return ``{generation: count}`` sorted by generation."""
    counts = Counter(p.generation for p in population)
    return dict(sorted(counts.items()))


def older_than(population: Iterable[Phenotype], max_age: int, current_generation: int) -> list[Phenotype]:
    """Return the phenotypes whose age at ``current_generation`` exceeds ``max_age``."""
    return [p for p in population if p.age(current_generation) > max_age]
