"""Codec composed of component codecs over one concatenated genotype."""

from __future__ import annotations

from typing import Any, Callable, Sequence

from codec.base import Codec, DecodePolicy, Decoder, GenotypeFactory
from core.errors import InvalidArgumentError
from genetics.genotype import GeneSequenceGenotype, Genotype


class CompositeCodec(Codec):
    """Concatenates component genotypes gene-for-gene and splits them back.

    Component ``i`` owns the genes ``[offset_i, offset_i + length_i)`` of the
    composite genotype, where ``offset_i`` is the sum of the preceding
    component lengths. Splitting at these offsets is the exact inverse of
    the concatenation performed by ``encoding()``. Each slice is decoded by
    its component's own decoder, so component policies still apply.
    """

    def __init__(
        self,
        codecs: Sequence[Codec],
        combiner: Callable[..., Any],
        genotype_type: type[Genotype] = GeneSequenceGenotype,
        decode_policy: DecodePolicy = DecodePolicy.STRICT,
    ) -> None:
        codecs = tuple(codecs)
        if not codecs:
            raise InvalidArgumentError("CompositeCodec requires at least one component codec.")
        if not callable(combiner):
            raise InvalidArgumentError("CompositeCodec combiner must be callable.")
        self.codecs = codecs
        self.combiner = combiner
        self.genotype_type = genotype_type
        self.decode_policy = DecodePolicy(decode_policy)

        self.offsets: tuple[int, ...] = tuple(
            sum(codec.length for codec in codecs[:index]) for index in range(len(codecs))
        )
        self._length = sum(codec.length for codec in codecs)

    @property
    def length(self) -> int:
        return self._length

    def encoding(self) -> GenotypeFactory:
        factories = [codec.encoding() for codec in self.codecs]

        def _encode() -> Genotype:
            return self.genotype_type.concat([factory() for factory in factories])

        return _encode

    def split(self, genotype: Genotype) -> list[Genotype]:
        """Return the component genotypes of a composite genotype."""
        admitted = self.admit(genotype)
        return [
            admitted.slice(offset, offset + codec.length)
            for codec, offset in zip(self.codecs, self.offsets)
        ]

    def decoder(self) -> Decoder:
        decoders = [codec.decoder() for codec in self.codecs]

        def _decode(genotype: Genotype) -> Any:
            parts = self.split(genotype)
            values = [decode(part) for decode, part in zip(decoders, parts)]
            return self.combiner(*values)

        return _decode
