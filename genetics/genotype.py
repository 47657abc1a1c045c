"""Genotype contracts consumed by phenotypes and codecs."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Iterable, Sequence

from genetics.gene import Gene


class Genotype(ABC):
    """Encoded, immutable representation of a candidate solution.

    Phenotypes hold genotypes by reference and never copy them, so an
    implementation must not expose any operation that mutates an instance
    in place.
    """

    @property
    @abstractmethod
    def genes(self) -> tuple[Gene, ...]:
        """Return the ordered genes of this genotype."""

    @classmethod
    @abstractmethod
    def from_genes(cls, genes: Iterable[Gene]) -> "Genotype":
        """Build a genotype of this type from an ordered gene sequence."""

    @abstractmethod
    def is_valid(self) -> bool:
        """Return whether this genotype lies inside its encoding space.

        Invariants:
            - Must never raise because the genotype is invalid; invalidity is
              a normal outcome that selection strategies check explicitly.
        """

    @abstractmethod
    def to_dict(self) -> dict[str, Any]:
        """Return the genotype's own serialized subtree (JSON-compatible)."""

    def __len__(self) -> int:
        return len(self.genes)

    def to_text(self) -> str:
        return "[" + ",".join(gene.to_text() for gene in self.genes) + "]"

    def slice(self, start: int, stop: int) -> "Genotype":
        """Return the genes ``[start, stop)`` as a new genotype of the same type."""
        return type(self).from_genes(self.genes[start:stop])

    @classmethod
    def concat(cls, genotypes: Sequence["Genotype"]) -> "Genotype":
        """Concatenate ``genotypes`` gene-for-gene into one genotype of ``cls``."""
        genes: list[Gene] = []
        for genotype in genotypes:
            genes.extend(genotype.genes)
        return cls.from_genes(genes)


@dataclass(frozen=True)
class GeneSequenceGenotype(Genotype):
    """Genotype made of an ordered, immutable tuple of genes.

    Valid iff it holds at least one gene and every gene is valid.
    """

    gene_tuple: tuple[Gene, ...]

    type_name = "gene-sequence"

    def __post_init__(self) -> None:
        # accept any iterable but store an immutable tuple
        object.__setattr__(self, "gene_tuple", tuple(self.gene_tuple))

    @property
    def genes(self) -> tuple[Gene, ...]:
        return self.gene_tuple

    @classmethod
    def from_genes(cls, genes: Iterable[Gene]) -> "GeneSequenceGenotype":
        return cls(gene_tuple=tuple(genes))

    @property
    def alleles(self) -> tuple[Any, ...]:
        return tuple(gene.allele for gene in self.gene_tuple)

    def is_valid(self) -> bool:
        return bool(self.gene_tuple) and all(gene.is_valid() for gene in self.gene_tuple)

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type_name, "genes": [gene.to_dict() for gene in self.gene_tuple]}
