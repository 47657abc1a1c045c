"""Factories/registries for building codecs from search-space configs."""

from __future__ import annotations

from typing import Callable

from codec.base import Codec
from codec.parameters import ParametersCodec
from configs.loader import SearchSpaceConfig
from core.deterministic_rng import DeterministicRNG


CodecFactory = Callable[[SearchSpaceConfig, DeterministicRNG], Codec]


_CODEC_FACTORIES: dict[str, CodecFactory] = {}


def register_codec_factory(name: str, factory: CodecFactory) -> None:
    _CODEC_FACTORIES[str(name)] = factory


def available_codec_factories() -> list[str]:
    return sorted(_CODEC_FACTORIES)


def create_codec(name: str, config: SearchSpaceConfig, rng: DeterministicRNG | None = None) -> Codec:
    factory = _CODEC_FACTORIES.get(str(name))
    if factory is None:
        available = ", ".join(available_codec_factories()) or "<none>"
        raise ValueError(f"Unknown codec factory '{name}'. Available: {available}")
    return factory(config, rng if rng is not None else DeterministicRNG(config.seed))


def codec_from_config(config: SearchSpaceConfig, rng: DeterministicRNG | None = None) -> Codec:
    """Build the codec named by ``config.codec``."""
    return create_codec(config.codec, config, rng)


def _parameters_codec_factory(config: SearchSpaceConfig, rng: DeterministicRNG) -> Codec:
    return ParametersCodec(
        specs=config.parameters,
        rng=rng.generator("codec:parameters"),
        decode_policy=config.decode_policy,
    )


def _register_defaults() -> None:
    if _CODEC_FACTORIES:
        return
    register_codec_factory("parameters", _parameters_codec_factory)


_register_defaults()
