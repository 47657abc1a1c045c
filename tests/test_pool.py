"""Tests for phenotype instance recycling."""

from __future__ import annotations

import pytest

from core.errors import InvalidArgumentError
from core.fitness import identity_scaler
from core.pool import PhenotypePool
from genetics.gene import DoubleGene
from genetics.genotype import GeneSequenceGenotype


def _genotype(value: float) -> GeneSequenceGenotype:
    return GeneSequenceGenotype.from_genes([DoubleGene(value, 0.0, 10.0)])


def _fitness(genotype: GeneSequenceGenotype) -> float:
    return genotype.genes[0].allele


def test_released_instance_is_reset_before_reuse() -> None:
    pool = PhenotypePool(max_size=4)
    first = pool.acquire(_genotype(1.0), _fitness, identity_scaler, 0)
    assert first.fitness == 1.0

    pool.release(first)
    assert len(pool) == 1

    second = pool.acquire(_genotype(2.0), _fitness, lambda x: x * 3, 5)

    assert second is first
    assert not second.is_evaluated
    assert second.generation == 5
    assert second.fitness == 6.0
    assert pool.recycled == 1
    assert len(pool) == 0


def test_double_release_is_rejected() -> None:
    pool = PhenotypePool()
    phenotype = pool.acquire(_genotype(1.0), _fitness, identity_scaler, 0)
    pool.release(phenotype)

    with pytest.raises(InvalidArgumentError, match="already been released"):
        pool.release(phenotype)


def test_acquire_validates_like_create() -> None:
    pool = PhenotypePool()
    pool.release(pool.acquire(_genotype(1.0), _fitness, identity_scaler, 0))

    with pytest.raises(InvalidArgumentError):
        pool.acquire(_genotype(1.0), _fitness, identity_scaler, -1)
    with pytest.raises(InvalidArgumentError):
        pool.acquire(None, _fitness, identity_scaler, 0)

    assert len(pool) == 1


def test_free_list_is_bounded() -> None:
    pool = PhenotypePool(max_size=2)
    phenotypes = [pool.acquire(_genotype(float(i)), _fitness, identity_scaler, 0) for i in range(3)]
    for phenotype in phenotypes:
        pool.release(phenotype)

    assert len(pool) == 2
    assert pool.created == 3


def test_pool_size_must_be_positive() -> None:
    with pytest.raises(InvalidArgumentError):
        PhenotypePool(max_size=0)


def test_dropped_instance_keeps_its_fitness() -> None:
    pool = PhenotypePool(max_size=1)
    kept, dropped = (pool.acquire(_genotype(float(i)), _fitness, identity_scaler, 0) for i in range(2))
    assert dropped.fitness == 1.0

    pool.release(kept)
    pool.release(dropped)

    assert len(pool) == 1
    assert dropped.is_evaluated
    assert dropped.fitness == 1.0
