"""Codec mapping bounded numeric genes to named parameter sets."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Iterator, Mapping, Sequence

import numpy as np

from codec.base import Codec, DecodePolicy, Decoder, GenotypeFactory
from core.errors import DecodeError, InvalidArgumentError
from genetics.gene import DoubleGene, Gene, IntegerGene
from genetics.genotype import GeneSequenceGenotype, Genotype

LOGGER = logging.getLogger(__name__)


_KINDS = {"float": DoubleGene, "int": IntegerGene}


@dataclass(frozen=True)
class ParameterSpec:
    """One named parameter and its search range.

    ``float`` parameters range over ``[minimum, maximum)``, ``int``
    parameters over ``[minimum, maximum]``.
    """

    name: str
    minimum: float
    maximum: float
    kind: str = "float"

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name:
            raise InvalidArgumentError("Parameter name must be a non-empty string.")
        if self.kind not in _KINDS:
            raise InvalidArgumentError(
                f"Parameter '{self.name}' has unknown kind '{self.kind}'. Available: {', '.join(sorted(_KINDS))}"
            )
        if not all(np.isfinite(float(bound)) for bound in (self.minimum, self.maximum)):
            raise InvalidArgumentError(f"Parameter '{self.name}' bounds must be finite numbers.")
        if self.kind == "int":
            if int(self.minimum) != self.minimum or int(self.maximum) != self.maximum:
                raise InvalidArgumentError(f"Parameter '{self.name}' int bounds must be whole numbers.")
            if self.minimum > self.maximum:
                raise InvalidArgumentError(f"Parameter '{self.name}' requires minimum <= maximum.")
        elif not self.minimum < self.maximum:
            raise InvalidArgumentError(f"Parameter '{self.name}' requires minimum < maximum.")
        elif not np.isfinite(float(self.maximum) - float(self.minimum)):
            raise InvalidArgumentError(f"Parameter '{self.name}' requires a finite range.")

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> "ParameterSpec":
        missing = [key for key in ("name", "minimum", "maximum") if key not in payload]
        if missing:
            raise InvalidArgumentError(f"Parameter spec missing required field(s): {missing}.")
        return cls(
            name=payload["name"],
            minimum=payload["minimum"],
            maximum=payload["maximum"],
            kind=str(payload.get("kind", "float")),
        )

    def new_gene(self, rng: np.random.Generator) -> Gene:
        if self.kind == "int":
            return IntegerGene.of(int(self.minimum), int(self.maximum), rng)
        return DoubleGene.of(float(self.minimum), float(self.maximum), rng)

    def conforms(self, gene: Gene) -> bool:
        """Return whether ``gene`` has this parameter's gene type and bounds."""
        return (
            isinstance(gene, _KINDS[self.kind])
            and gene.minimum == self.minimum
            and gene.maximum == self.maximum
        )

    def coerce(self, gene: Gene) -> Gene:
        """Return ``gene``'s allele re-expressed as a valid gene of this parameter."""
        try:
            if self.kind == "int":
                coerced: Gene = IntegerGene(round(gene.allele), int(self.minimum), int(self.maximum))
            else:
                coerced = DoubleGene(float(gene.allele), float(self.minimum), float(self.maximum))
        except (TypeError, ValueError, OverflowError) as exc:
            raise DecodeError(f"Allele {gene.allele!r} cannot represent parameter '{self.name}'.") from exc
        return coerced.clamp()


class Parameters(Mapping[str, Any]):
    """Immutable, ordered mapping of parameter names to decoded values."""

    __slots__ = ("_values",)

    def __init__(self, values: Mapping[str, Any] | Sequence[tuple[str, Any]]) -> None:
        object.__setattr__(self, "_values", dict(values))

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("Parameters are immutable.")

    def __getitem__(self, key: str) -> Any:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __hash__(self) -> int:
        return hash(tuple(self._values.items()))

    def __repr__(self) -> str:
        inner = ", ".join(f"{key}={value!r}" for key, value in self._values.items())
        return f"Parameters({inner})"

    def to_dict(self) -> dict[str, Any]:
        return dict(self._values)


class ParametersCodec(Codec):
    """Encodes one gene per parameter spec and decodes to ``Parameters``.

    Under BEST_EFFORT, genes whose type, bounds or allele do not match their
    spec are coerced into the spec's domain instead of raising.
    """

    def __init__(
        self,
        specs: Sequence[ParameterSpec],
        rng: np.random.Generator | None = None,
        decode_policy: DecodePolicy = DecodePolicy.STRICT,
    ) -> None:
        specs = tuple(specs)
        if not specs:
            raise InvalidArgumentError("ParametersCodec requires at least one parameter spec.")
        names = [spec.name for spec in specs]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise InvalidArgumentError(f"Duplicate parameter name(s): {duplicates}.")
        self.specs = specs
        self.decode_policy = DecodePolicy(decode_policy)
        self._rng = rng if rng is not None else np.random.default_rng()
        # numpy generators are not thread-safe
        self._rng_lock = threading.Lock()

    @property
    def length(self) -> int:
        return len(self.specs)

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(spec.name for spec in self.specs)

    def encoding(self) -> GenotypeFactory:
        def _encode() -> Genotype:
            with self._rng_lock:
                genes = [spec.new_gene(self._rng) for spec in self.specs]
            return GeneSequenceGenotype.from_genes(genes)

        return _encode

    def decoder(self) -> Decoder:
        def _decode(genotype: Genotype) -> Parameters:
            admitted = self.admit(genotype)
            values: list[tuple[str, Any]] = []
            for spec, gene in zip(self.specs, admitted.genes):
                if not (spec.conforms(gene) and gene.is_valid()):
                    if self.decode_policy is DecodePolicy.STRICT:
                        raise DecodeError(
                            f"Gene {gene.to_text()} does not belong to parameter '{spec.name}'."
                        )
                    LOGGER.warning("Coercing gene %s into parameter '%s'", gene.to_text(), spec.name)
                    gene = spec.coerce(gene)
                values.append((spec.name, gene.allele))
            return Parameters(values)

        return _decode
