"""Name-based registries that turn serialized payloads back into genes and genotypes."""

from __future__ import annotations

from typing import Any, Callable, Mapping

from genetics.gene import DoubleGene, Gene, IntegerGene
from genetics.genotype import GeneSequenceGenotype, Genotype


GeneParser = Callable[[Mapping[str, Any]], Gene]


_GENE_TYPES: dict[str, GeneParser] = {}
_GENOTYPE_TYPES: dict[str, type[Genotype]] = {}


def register_gene_type(name: str, parser: GeneParser) -> None:
    _GENE_TYPES[str(name)] = parser


def register_genotype_type(name: str, genotype_cls: type[Genotype]) -> None:
    _GENOTYPE_TYPES[str(name)] = genotype_cls


def available_gene_types() -> list[str]:
    return sorted(_GENE_TYPES)


def available_genotype_types() -> list[str]:
    return sorted(_GENOTYPE_TYPES)


def gene_from_dict(payload: Mapping[str, Any]) -> Gene:
    name = str(payload.get("type"))
    parser = _GENE_TYPES.get(name)
    if parser is None:
        available = ", ".join(available_gene_types()) or "<none>"
        raise ValueError(f"Unknown gene type '{name}'. Available: {available}")
    return parser(payload)


def genotype_from_dict(payload: Mapping[str, Any]) -> Genotype:
    """Rebuild a genotype from the subtree produced by ``Genotype.to_dict``."""
    name = str(payload.get("type"))
    genotype_cls = _GENOTYPE_TYPES.get(name)
    if genotype_cls is None:
        available = ", ".join(available_genotype_types()) or "<none>"
        raise ValueError(f"Unknown genotype type '{name}'. Available: {available}")
    genes = payload.get("genes")
    if not isinstance(genes, list):
        raise ValueError(f"Genotype payload of type '{name}' must contain a 'genes' list.")
    return genotype_cls.from_genes(gene_from_dict(gene) for gene in genes)


def _register_defaults() -> None:
    if _GENE_TYPES:
        return
    register_gene_type(DoubleGene.type_name, DoubleGene.from_dict)
    register_gene_type(IntegerGene.type_name, IntegerGene.from_dict)

    register_genotype_type(GeneSequenceGenotype.type_name, GeneSequenceGenotype)


_register_defaults()
