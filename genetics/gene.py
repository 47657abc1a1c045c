"""Gene contracts and the bounded numeric genes used by the built-in codecs."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

import numpy as np


class Gene(ABC):
    """Smallest unit of an encoded candidate solution.

    Genes are immutable values. Every transformation returns a new gene and
    leaves the receiver untouched.
    """

    @property
    @abstractmethod
    def allele(self) -> Any:
        """Return the value carried by this gene."""

    @abstractmethod
    def is_valid(self) -> bool:
        """Return whether the allele lies inside the gene's domain.

        Invariants:
            - Must not raise for out-of-range alleles; invalidity is reported,
              not signalled.
        """

    @abstractmethod
    def with_allele(self, allele: Any) -> "Gene":
        """Return a gene of the same domain carrying ``allele``."""

    @abstractmethod
    def random(self, rng: np.random.Generator) -> "Gene":
        """Return a fresh gene drawn uniformly from this gene's domain.

        Args:
            rng (np.random.Generator): Source of randomness owned by the caller.

        Returns:
            Gene: A new, valid gene independent of ``self``.
        """

    @abstractmethod
    def clamp(self) -> "Gene":
        """Return a valid gene whose allele is the nearest in-domain value."""

    @abstractmethod
    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-compatible payload including a ``type`` tag."""

    def to_text(self) -> str:
        return f"[{self.allele}]"


@dataclass(frozen=True)
class DoubleGene(Gene):
    """Floating point gene over the half-open range ``[minimum, maximum)``."""

    value: float
    minimum: float
    maximum: float

    type_name = "double"

    @classmethod
    def of(cls, minimum: float, maximum: float, rng: np.random.Generator) -> "DoubleGene":
        # uniform() may round up to the excluded upper bound
        gene = cls(value=float(rng.uniform(minimum, maximum)), minimum=float(minimum), maximum=float(maximum))
        return gene.clamp()

    @property
    def allele(self) -> float:
        return self.value

    def is_valid(self) -> bool:
        return self.minimum <= self.value < self.maximum

    def with_allele(self, allele: Any) -> "DoubleGene":
        return DoubleGene(value=float(allele), minimum=self.minimum, maximum=self.maximum)

    def random(self, rng: np.random.Generator) -> "DoubleGene":
        return DoubleGene.of(self.minimum, self.maximum, rng)

    def clamp(self) -> "DoubleGene":
        if self.value < self.minimum:
            return self.with_allele(self.minimum)
        if self.value >= self.maximum:
            # largest representable value below the exclusive upper bound
            return self.with_allele(float(np.nextafter(self.maximum, self.minimum)))
        return self

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type_name, "value": self.value, "min": self.minimum, "max": self.maximum}

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "DoubleGene":
        return cls(value=float(payload["value"]), minimum=float(payload["min"]), maximum=float(payload["max"]))


@dataclass(frozen=True)
class IntegerGene(Gene):
    """Integer gene over the closed range ``[minimum, maximum]``."""

    value: int
    minimum: int
    maximum: int

    type_name = "integer"

    @classmethod
    def of(cls, minimum: int, maximum: int, rng: np.random.Generator) -> "IntegerGene":
        return cls(value=int(rng.integers(minimum, maximum, endpoint=True)), minimum=int(minimum), maximum=int(maximum))

    @property
    def allele(self) -> int:
        return self.value

    def is_valid(self) -> bool:
        return self.minimum <= self.value <= self.maximum

    def with_allele(self, allele: Any) -> "IntegerGene":
        return IntegerGene(value=int(allele), minimum=self.minimum, maximum=self.maximum)

    def random(self, rng: np.random.Generator) -> "IntegerGene":
        return IntegerGene.of(self.minimum, self.maximum, rng)

    def clamp(self) -> "IntegerGene":
        return self.with_allele(min(max(self.value, self.minimum), self.maximum))

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type_name, "value": self.value, "min": self.minimum, "max": self.maximum}

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "IntegerGene":
        return cls(value=int(payload["value"]), minimum=int(payload["min"]), maximum=int(payload["max"]))
