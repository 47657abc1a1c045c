"""Persistent phenotype storage with atomic writes."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Callable, Iterable, Mapping

from core.errors import InvalidArgumentError
from core.fitness import FitnessFunction, FitnessScaler
from core.phenotype import Phenotype
from genetics.registry import genotype_from_dict

LOGGER = logging.getLogger(__name__)


PHENOTYPE_SCHEMA_VERSION = "v1"


class PhenotypeFormatError(ValueError):
    """Raised for malformed phenotype documents or unknown schema versions."""


def _identity(value: Any) -> Any:
    return value


def phenotype_to_dict(
    phenotype: Phenotype,
    encode_fitness: Callable[[Any], Any] = _identity,
) -> dict[str, Any]:
    """Return the persisted form of ``phenotype``; evaluates it if needed."""
    return {
        "generation": phenotype.generation,
        "genotype": phenotype.genotype.to_dict(),
        "fitness": encode_fitness(phenotype.fitness),
        "raw_fitness": encode_fitness(phenotype.raw_fitness),
    }


def phenotype_from_dict(
    payload: Mapping[str, Any],
    fitness_function: FitnessFunction | None = None,
    scaler: FitnessScaler | None = None,
    decode_fitness: Callable[[Any], Any] = _identity,
) -> Phenotype:
    """Rebuild a phenotype whose fitness counts as already evaluated.

    Raises:
        PhenotypeFormatError: if the genotype subtree or a fitness value is
            missing, or the generation is absent or not a non-negative integer.
    """
    if not isinstance(payload, Mapping):
        raise PhenotypeFormatError("Phenotype entry must be a mapping.")
    genotype_payload = payload.get("genotype")
    if not isinstance(genotype_payload, Mapping):
        raise PhenotypeFormatError("Phenotype entry is missing its genotype.")
    missing = [key for key in ("generation", "fitness", "raw_fitness") if key not in payload]
    if missing:
        raise PhenotypeFormatError(f"Phenotype entry missing field(s): {missing}.")

    try:
        genotype = genotype_from_dict(genotype_payload)
        return Phenotype.restore(
            genotype=genotype,
            generation=payload["generation"],
            raw_fitness=decode_fitness(payload["raw_fitness"]),
            fitness=decode_fitness(payload["fitness"]),
            fitness_function=fitness_function,
            scaler=scaler,
        )
    except InvalidArgumentError as exc:
        raise PhenotypeFormatError(str(exc)) from exc
    except (KeyError, TypeError, ValueError) as exc:
        raise PhenotypeFormatError(f"Invalid genotype subtree: {exc}") from exc


class PhenotypeStore:
    """Save/load phenotype documents as JSON.

    ``encode_fitness``/``decode_fitness`` convert fitness values that are not
    JSON-compatible; both default to the identity.
    """

    def __init__(
        self,
        encode_fitness: Callable[[Any], Any] = _identity,
        decode_fitness: Callable[[Any], Any] = _identity,
    ) -> None:
        self.encode_fitness = encode_fitness
        self.decode_fitness = decode_fitness

    def save(self, phenotypes: Iterable[Phenotype], path: Path) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_suffix(path.suffix + ".tmp")
        entries = [phenotype_to_dict(phenotype, self.encode_fitness) for phenotype in phenotypes]
        payload = {"schema_version": PHENOTYPE_SCHEMA_VERSION, "phenotypes": entries}
        tmp_path.write_text(json.dumps(payload, sort_keys=True), encoding="utf-8")
        tmp_path.replace(path)
        LOGGER.info("Saved %d phenotype(s) to %s", len(entries), path)

    def load(
        self,
        path: Path,
        fitness_function: FitnessFunction | None = None,
        scaler: FitnessScaler | None = None,
    ) -> list[Phenotype]:
        path = Path(path)
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise PhenotypeFormatError(f"Phenotype document '{path}' is not valid JSON: {exc}") from exc
        if not isinstance(payload, Mapping):
            raise PhenotypeFormatError("Phenotype document must be a mapping.")
        version = payload.get("schema_version")
        if version != PHENOTYPE_SCHEMA_VERSION:
            raise PhenotypeFormatError(
                f"Phenotype schema mismatch: expected {PHENOTYPE_SCHEMA_VERSION}, got {version}."
            )
        entries = payload.get("phenotypes")
        if not isinstance(entries, list):
            raise PhenotypeFormatError("Phenotype document must contain a 'phenotypes' list.")

        phenotypes = [
            phenotype_from_dict(entry, fitness_function, scaler, self.decode_fitness) for entry in entries
        ]
        LOGGER.info("Loaded %d phenotype(s) from %s", len(phenotypes), path)
        return phenotypes
