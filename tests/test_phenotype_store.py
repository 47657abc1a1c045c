"""Tests for phenotype persistence."""

from __future__ import annotations

import json

import pytest

from core.fitness import identity_scaler
from core.phenotype import Phenotype
from data.phenotype_store import (
    PhenotypeFormatError,
    PhenotypeStore,
    phenotype_from_dict,
    phenotype_to_dict,
)
from genetics.gene import DoubleGene, IntegerGene
from genetics.genotype import GeneSequenceGenotype


def _phenotype(value: float, generation: int) -> Phenotype:
    genotype = GeneSequenceGenotype.from_genes([DoubleGene(value, 0.0, 10.0), IntegerGene(2, 0, 5)])
    return Phenotype.create(genotype, lambda g: g.genes[0].allele, lambda x: x * 2, generation)


def test_save_load_restores_memoized_fitness_without_evaluation(tmp_path) -> None:
    path = tmp_path / "population" / "gen_3.json"
    originals = [_phenotype(4.2, 3), _phenotype(1.5, 2)]
    store = PhenotypeStore()
    store.save(originals, path)

    calls = []

    def fitness(genotype: GeneSequenceGenotype) -> float:
        calls.append(genotype)
        return 0.0

    loaded = store.load(path, fitness_function=fitness)

    assert loaded == originals
    assert [p.fitness for p in loaded] == [8.4, 3.0]
    assert [p.raw_fitness for p in loaded] == [4.2, 1.5]
    assert [p.generation for p in loaded] == [3, 2]
    assert all(p.is_evaluated for p in loaded)
    assert calls == []
    assert not path.with_suffix(".json.tmp").exists()


def test_document_layout(tmp_path) -> None:
    path = tmp_path / "doc.json"
    PhenotypeStore().save([_phenotype(4.2, 0)], path)

    payload = json.loads(path.read_text(encoding="utf-8"))

    assert payload["schema_version"] == "v1"
    entry = payload["phenotypes"][0]
    assert entry["generation"] == 0
    assert entry["fitness"] == 8.4
    assert entry["raw_fitness"] == 4.2
    assert entry["genotype"]["type"] == "gene-sequence"
    assert len(entry["genotype"]["genes"]) == 2


def test_missing_genotype_subtree_is_rejected() -> None:
    entry = phenotype_to_dict(_phenotype(1.0, 0))
    del entry["genotype"]

    with pytest.raises(PhenotypeFormatError, match="missing its genotype"):
        phenotype_from_dict(entry)


@pytest.mark.parametrize(
    "change, message",
    [
        ({"generation": -2}, "Generation must not be < 0"),
        ({"genotype": {"type": "unknown", "genes": []}}, "Invalid genotype subtree"),
    ],
)
def test_malformed_entries_are_rejected(change, message) -> None:
    entry = phenotype_to_dict(_phenotype(1.0, 0))
    entry.update(change)

    with pytest.raises(PhenotypeFormatError, match=message):
        phenotype_from_dict(entry)


def test_schema_mismatch_is_rejected(tmp_path) -> None:
    path = tmp_path / "old.json"
    path.write_text(json.dumps({"schema_version": "v0", "phenotypes": []}), encoding="utf-8")

    with pytest.raises(PhenotypeFormatError, match="schema mismatch"):
        PhenotypeStore().load(path)


def test_fitness_hooks_handle_non_json_fitness(tmp_path) -> None:
    genotype = GeneSequenceGenotype.from_genes([DoubleGene(1.0, 0.0, 10.0)])
    phenotype = Phenotype.create(genotype, lambda g: (g.genes[0].allele, 2), identity_scaler, 1)
    store = PhenotypeStore(encode_fitness=list, decode_fitness=tuple)
    path = tmp_path / "tuples.json"

    store.save([phenotype], path)
    loaded = store.load(path)[0]

    assert loaded.fitness == (1.0, 2)
    assert loaded == phenotype


def test_restored_phenotype_can_spawn_new_instances(tmp_path) -> None:
    path = tmp_path / "spawn.json"
    PhenotypeStore().save([_phenotype(3.0, 1)], path)

    restored = PhenotypeStore().load(path, fitness_function=lambda g: g.genes[0].allele, scaler=identity_scaler)[0]
    child = restored.new_instance(restored.genotype, 2)

    assert child.fitness == 3.0


@pytest.mark.parametrize("field", ["generation", "fitness", "raw_fitness"])
def test_entry_without_required_field_is_rejected(field) -> None:
    entry = phenotype_to_dict(_phenotype(1.0, 3))
    del entry[field]

    with pytest.raises(PhenotypeFormatError, match=field):
        phenotype_from_dict(entry)
