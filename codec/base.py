"""Codec contracts: encoding factories paired with decoders."""

from __future__ import annotations

import enum
import logging
from abc import ABC, abstractmethod
from typing import Any, Callable

from core.errors import DecodeError, InvalidArgumentError
from genetics.genotype import Genotype

LOGGER = logging.getLogger(__name__)


GenotypeFactory = Callable[[], Genotype]
Decoder = Callable[[Genotype], Any]


class DecodePolicy(str, enum.Enum):
    """How a decoder treats genotypes outside its own encoding space.

    STRICT raises ``DecodeError``. BEST_EFFORT clamps out-of-range alleles
    into their domain and ignores surplus trailing genes; a genotype with
    too few genes is still a ``DecodeError`` under both policies.
    """

    STRICT = "strict"
    BEST_EFFORT = "best_effort"


class Codec(ABC):
    """Bidirectional adapter between genotypes and a problem's parameters.

    ``encoding()`` produces fresh genotypes; ``decoder()`` maps genotypes of
    that encoding back to domain values. Decoding is only defined for
    genotypes obtained from the same (or a structurally compatible) codec.
    """

    decode_policy: DecodePolicy = DecodePolicy.STRICT

    @property
    @abstractmethod
    def length(self) -> int:
        """Number of genes in every genotype produced by ``encoding()``."""

    @abstractmethod
    def encoding(self) -> GenotypeFactory:
        """Return a repeatable genotype factory.

        Invariants:
            - Each call of the factory returns an independent, valid genotype.
            - Successive products share no mutable state.
        """

    @abstractmethod
    def decoder(self) -> Decoder:
        """Return a deterministic function from genotypes to parameters.

        Invariants:
            - Must not fail for any genotype produced by ``encoding()``.
            - Foreign genotypes follow ``decode_policy``.
        """

    def encode(self) -> Genotype:
        """Draw one fresh genotype from the encoding."""
        return self.encoding()()

    def decode(self, genotype: Genotype) -> Any:
        return self.decoder()(genotype)

    def admit(self, genotype: Any) -> Genotype:
        """Check type and length of ``genotype`` against this codec.

        Returns the genotype to decode, truncated to ``length`` when the
        policy is BEST_EFFORT and surplus genes are present.
        """
        if not isinstance(genotype, Genotype):
            raise DecodeError(f"Expected a Genotype, got {type(genotype).__name__}.")
        actual = len(genotype)
        if actual == self.length:
            return genotype
        if actual > self.length and self.decode_policy is DecodePolicy.BEST_EFFORT:
            LOGGER.warning("Ignoring %d surplus gene(s) while decoding", actual - self.length)
            return genotype.slice(0, self.length)
        raise DecodeError(f"Genotype has {actual} gene(s); codec expects {self.length}.")

    @staticmethod
    def of(*codecs: "Codec", combiner: Callable[..., Any]) -> "Codec":
        """Combine component codecs into one codec over concatenated genotypes."""
        from codec.composite import CompositeCodec

        return CompositeCodec(codecs, combiner)


class FunctionCodec(Codec):
    """Codec assembled from a plain genotype factory and a decoding function."""

    def __init__(
        self,
        encoding: GenotypeFactory,
        decoder: Decoder,
        length: int,
        decode_policy: DecodePolicy = DecodePolicy.STRICT,
    ) -> None:
        if not callable(encoding) or not callable(decoder):
            raise InvalidArgumentError("FunctionCodec requires callable encoding and decoder.")
        if length <= 0:
            raise InvalidArgumentError(f"Codec length must be > 0, got {length}.")
        self._encoding = encoding
        self._decoder = decoder
        self._length = int(length)
        self.decode_policy = DecodePolicy(decode_policy)

    @property
    def length(self) -> int:
        return self._length

    def encoding(self) -> GenotypeFactory:
        def _encode() -> Genotype:
            genotype = self._encoding()
            if len(genotype) != self._length:
                raise InvalidArgumentError(
                    f"Encoding produced {len(genotype)} gene(s); codec declares {self._length}."
                )
            return genotype

        return _encode

    def decoder(self) -> Decoder:
        def _decode(genotype: Genotype) -> Any:
            admitted = self.admit(genotype)
            if not admitted.is_valid():
                if self.decode_policy is DecodePolicy.STRICT:
                    raise DecodeError(f"Genotype {admitted.to_text()} is outside the encoding space.")
                LOGGER.warning("Clamping invalid genotype %s before decoding", admitted.to_text())
                admitted = type(admitted).from_genes(gene.clamp() for gene in admitted.genes)
            return self._decoder(admitted)

        return _decode
