"""Tests for function and composite codecs."""

from __future__ import annotations

import numpy as np
import pytest

from codec.base import Codec, DecodePolicy, FunctionCodec
from codec.composite import CompositeCodec
from codec.parameters import ParameterSpec, ParametersCodec
from core.errors import DecodeError, InvalidArgumentError
from genetics.gene import DoubleGene, IntegerGene
from genetics.genotype import GeneSequenceGenotype


def _scalar_codec(rng: np.random.Generator, policy: DecodePolicy = DecodePolicy.STRICT) -> FunctionCodec:
    return FunctionCodec(
        encoding=lambda: GeneSequenceGenotype.from_genes([DoubleGene.of(0.0, 10.0, rng)]),
        decoder=lambda genotype: genotype.genes[0].allele,
        length=1,
        decode_policy=policy,
    )


def test_function_codec_encodes_independent_genotypes() -> None:
    codec = _scalar_codec(np.random.default_rng(1))
    factory = codec.encoding()

    first, second = factory(), factory()

    assert first is not second
    assert first.is_valid() and second.is_valid()
    assert codec.decode(first) == first.genes[0].allele


def test_function_codec_strict_policy_rejects_foreign_genotypes() -> None:
    codec = _scalar_codec(np.random.default_rng(1))

    with pytest.raises(DecodeError, match="outside the encoding space"):
        codec.decode(GeneSequenceGenotype.from_genes([DoubleGene(42.0, 0.0, 10.0)]))
    with pytest.raises(DecodeError, match="codec expects 1"):
        codec.decode(GeneSequenceGenotype.from_genes([]))
    with pytest.raises(DecodeError, match="Expected a Genotype"):
        codec.decode([1.0])  # type: ignore[arg-type]


def test_function_codec_best_effort_clamps_and_truncates() -> None:
    codec = _scalar_codec(np.random.default_rng(1), DecodePolicy.BEST_EFFORT)
    foreign = GeneSequenceGenotype.from_genes([DoubleGene(-4.0, 0.0, 10.0), DoubleGene(1.0, 0.0, 10.0)])

    assert codec.decode(foreign) == 0.0


def test_function_codec_checks_encoding_length() -> None:
    codec = FunctionCodec(
        encoding=lambda: GeneSequenceGenotype.from_genes([IntegerGene(1, 0, 2)] * 2),
        decoder=lambda genotype: genotype,
        length=3,
    )

    with pytest.raises(InvalidArgumentError, match="declares 3"):
        codec.encode()


def test_composite_decode_of_encode_never_fails() -> None:
    rng = np.random.default_rng(7)
    components = [
        ParametersCodec([ParameterSpec("a", 0.0, 1.0)], rng=rng),
        ParametersCodec([ParameterSpec("b", 0, 3, kind="int"), ParameterSpec("c", -1.0, 1.0)], rng=rng),
        ParametersCodec([ParameterSpec(f"d{i}", 0.0, 5.0) for i in range(4)], rng=rng),
    ]
    codec = CompositeCodec(components, combiner=lambda *parts: parts)
    factory, decode = codec.encoding(), codec.decoder()

    assert codec.length == 7
    assert codec.offsets == (0, 1, 3)
    for _ in range(50):
        genotype = factory()
        parts = decode(genotype)
        assert [len(part) for part in parts] == [1, 2, 4]
        assert list(parts[2]) == ["d0", "d1", "d2", "d3"]


def test_composite_split_is_left_inverse_of_concatenation() -> None:
    rng = np.random.default_rng(11)
    components = [_scalar_codec(rng), ParametersCodec([ParameterSpec("x", 0, 9, kind="int")], rng=rng)]
    codec = Codec.of(*components, combiner=lambda scalar, params: (scalar, params["x"]))

    pieces = [component.encode() for component in components]
    joined = GeneSequenceGenotype.concat(pieces)

    assert codec.split(joined) == pieces
    assert codec.decode(joined) == (pieces[0].genes[0].allele, pieces[1].genes[0].allele)


def test_composite_rejects_wrong_length_and_empty_components() -> None:
    codec = CompositeCodec([_scalar_codec(np.random.default_rng(0))] * 2, combiner=lambda a, b: a + b)

    with pytest.raises(DecodeError):
        codec.decode(GeneSequenceGenotype.from_genes([DoubleGene(1.0, 0.0, 10.0)]))
    with pytest.raises(InvalidArgumentError):
        CompositeCodec([], combiner=lambda: None)
