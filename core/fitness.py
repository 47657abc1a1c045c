"""Fitness evaluator pairing and the stock fitness scalers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from core.errors import InvalidArgumentError


FitnessFunction = Callable[[Any], Any]
FitnessScaler = Callable[[Any], Any]


def identity_scaler(value: Any) -> Any:
    """Return the raw fitness unchanged."""
    return value


def linear_scaler(factor: float, offset: float = 0.0) -> FitnessScaler:
    """Return a scaler computing ``factor * raw + offset``."""

    def _scale(value: Any) -> Any:
        return factor * value + offset

    return _scale


def error_scaler() -> FitnessScaler:
    """Return a scaler turning a lower-is-better error into higher-is-better fitness.

    ``raw = 0`` maps to ``1.0`` and the scaled value tends to ``0`` as the
    error grows. Negative errors are rejected because the mapping would no
    longer be monotone.
    """

    def _scale(value: Any) -> float:
        if value < 0:
            raise ValueError(f"Error metric must be >= 0, got {value}.")
        return 1.0 / (1.0 + value)

    return _scale


def require_callable(value: Any, name: str) -> None:
    if value is None:
        raise InvalidArgumentError(f"{name} must not be None.")
    if not callable(value):
        raise InvalidArgumentError(f"{name} must be callable, got {type(value).__name__}.")


@dataclass(frozen=True)
class FitnessEvaluator:
    """Pure fitness function plus pure scaler.

    Both callables must return the same output for the same input for as
    long as any phenotype refers to them; memoized fitness relies on it.
    """

    fitness_function: FitnessFunction
    scaler: FitnessScaler = identity_scaler

    def __post_init__(self) -> None:
        require_callable(self.fitness_function, "Fitness function")
        require_callable(self.scaler, "Fitness scaler")

    def evaluate(self, genotype: Any) -> tuple[Any, Any]:
        """Return ``(raw, scaled)`` for ``genotype``; evaluator errors propagate."""
        raw = self.fitness_function(genotype)
        return raw, self.scaler(raw)
