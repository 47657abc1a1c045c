"""Single-argument accessors over phenotypes, for sorting keys and map/filter."""

from __future__ import annotations

from typing import Any, Callable

from core.phenotype import Phenotype
from genetics.genotype import Genotype


def age_of(current_generation: int) -> Callable[[Phenotype], int]:
    """Return a function giving a phenotype's age at ``current_generation``."""

    def _age(phenotype: Phenotype) -> int:
        return phenotype.age(current_generation)

    return _age


def generation_of() -> Callable[[Phenotype], int]:
    def _generation(phenotype: Phenotype) -> int:
        return phenotype.generation

    return _generation


def fitness_of() -> Callable[[Phenotype], Any]:
    def _fitness(phenotype: Phenotype) -> Any:
        return phenotype.fitness

    return _fitness


def raw_fitness_of() -> Callable[[Phenotype], Any]:
    def _raw_fitness(phenotype: Phenotype) -> Any:
        return phenotype.raw_fitness

    return _raw_fitness


def genotype_of() -> Callable[[Phenotype], Genotype]:
    def _genotype(phenotype: Phenotype) -> Genotype:
        return phenotype.genotype

    return _genotype
