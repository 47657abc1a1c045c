"""Phenotype entity: a genotype bound to its fitness evaluation context."""

from __future__ import annotations

import logging
import numbers
import threading
from typing import Any, Callable

from core.errors import InvalidArgumentError
from core.fitness import FitnessEvaluator, FitnessFunction, FitnessScaler, identity_scaler
from genetics.genotype import Genotype

LOGGER = logging.getLogger(__name__)


class FitnessCell:
    """One-shot holder for the memoized ``(raw, scaled)`` fitness pair.

    The pair is published as a single tuple, so readers either see nothing
    or the complete result. The first successful computation wins; a
    computation that raises leaves the cell empty.
    """

    __slots__ = ("_lock", "_value")

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._value: tuple[Any, Any] | None = None

    @property
    def is_set(self) -> bool:
        return self._value is not None

    def get(self) -> tuple[Any, Any] | None:
        return self._value

    def get_or_compute(self, compute: Callable[[], tuple[Any, Any]]) -> tuple[Any, Any]:
        """Return the stored pair, running ``compute`` at most once across threads.

        Invariants:
            - ``compute`` runs under the cell lock; concurrent callers block
              until it finishes and then observe its result.
            - Exceptions from ``compute`` propagate unchanged and nothing is
              stored, so the next call retries.
        """
        value = self._value
        if value is not None:
            return value
        with self._lock:
            value = self._value
            if value is None:
                value = compute()
                self._value = value
        return value

    def preset(self, raw: Any, scaled: Any) -> None:
        with self._lock:
            if self._value is not None:
                raise InvalidArgumentError("Fitness cell has already been set.")
            self._value = (raw, scaled)

    def reset(self) -> None:
        with self._lock:
            self._value = None


def validate_arguments(
    genotype: Genotype | None,
    fitness_function: FitnessFunction | None,
    scaler: FitnessScaler | None,
    generation: Any,
) -> FitnessEvaluator:
    """Check construction arguments and return the evaluator they form."""
    if genotype is None:
        raise InvalidArgumentError("Genotype must not be None.")
    evaluator = FitnessEvaluator(fitness_function=fitness_function, scaler=scaler)
    _check_generation(generation)
    return evaluator


def _check_generation(generation: Any) -> None:
    if isinstance(generation, bool) or not isinstance(generation, numbers.Integral):
        raise InvalidArgumentError(f"Generation must be an int, got {type(generation).__name__}.")
    if generation < 0:
        raise InvalidArgumentError(f"Generation must not be < 0: {generation}")


class Phenotype:
    """A genotype plus the fitness function that represents its environment.

    Phenotypes are immutable. The only state that changes after construction
    is the memoized fitness pair, which goes from absent to present once and
    then never changes. The natural order of phenotypes is the order of their
    scaled fitness values.

    Equality and hashing are structural over (scaled fitness, raw fitness,
    genotype, generation) and therefore evaluate the phenotype if needed.
    """

    __slots__ = ("_genotype", "_evaluator", "_generation", "_cell")

    def __init__(
        self,
        genotype: Genotype,
        fitness_function: FitnessFunction,
        scaler: FitnessScaler,
        generation: int,
    ) -> None:
        evaluator = validate_arguments(genotype, fitness_function, scaler, generation)
        self._bind(genotype, evaluator, generation, FitnessCell())

    @classmethod
    def create(
        cls,
        genotype: Genotype,
        fitness_function: FitnessFunction,
        scaler: FitnessScaler,
        generation: int,
    ) -> "Phenotype":
        """Create an unevaluated phenotype.

        Raises:
            InvalidArgumentError: if ``genotype``, ``fitness_function`` or
                ``scaler`` is ``None`` or not usable, or ``generation < 0``.
        """
        return cls(genotype, fitness_function, scaler, generation)

    @classmethod
    def of(cls, genotype: Genotype, fitness_function: FitnessFunction, generation: int) -> "Phenotype":
        """Create a phenotype whose scaled fitness equals its raw fitness."""
        return cls(genotype, fitness_function, identity_scaler, generation)

    @classmethod
    def restore(
        cls,
        genotype: Genotype,
        generation: int,
        raw_fitness: Any,
        fitness: Any,
        fitness_function: FitnessFunction | None = None,
        scaler: FitnessScaler | None = None,
    ) -> "Phenotype":
        """Rebuild an already evaluated phenotype from persisted values.

        The evaluator is optional because the memoized values are never
        recomputed. When a fitness function is given it is kept so that
        ``new_instance`` works on the restored phenotype.
        """
        if genotype is None:
            raise InvalidArgumentError("Genotype must not be None.")
        _check_generation(generation)
        evaluator = None
        if fitness_function is not None:
            evaluator = FitnessEvaluator(fitness_function=fitness_function, scaler=scaler or identity_scaler)
        cell = FitnessCell()
        cell.preset(raw_fitness, fitness)
        phenotype = object.__new__(cls)
        phenotype._bind(genotype, evaluator, generation, cell)
        return phenotype

    def _bind(
        self,
        genotype: Genotype,
        evaluator: FitnessEvaluator | None,
        generation: int,
        cell: FitnessCell,
    ) -> None:
        object.__setattr__(self, "_genotype", genotype)
        object.__setattr__(self, "_evaluator", evaluator)
        object.__setattr__(self, "_generation", int(generation))
        object.__setattr__(self, "_cell", cell)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable; cannot set '{name}'.")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable; cannot delete '{name}'.")

    @property
    def genotype(self) -> Genotype:
        return self._genotype

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def fitness_function(self) -> FitnessFunction | None:
        return self._evaluator.fitness_function if self._evaluator is not None else None

    @property
    def scaler(self) -> FitnessScaler | None:
        return self._evaluator.scaler if self._evaluator is not None else None

    @property
    def is_evaluated(self) -> bool:
        return self._cell.is_set

    @property
    def fitness(self) -> Any:
        """Scaled fitness; evaluates the phenotype on first access."""
        return self.evaluate()[1]

    @property
    def raw_fitness(self) -> Any:
        """Fitness before scaling; evaluates the phenotype on first access."""
        return self.evaluate()[0]

    def age(self, current_generation: int) -> int:
        """Return ``current_generation - generation``; negative ages are allowed."""
        return current_generation - self._generation

    def is_valid(self) -> bool:
        return self._genotype.is_valid()

    def evaluate(self) -> tuple[Any, Any]:
        """Compute and cache ``(raw, scaled)`` fitness; later calls are no-ops.

        Safe to call from many threads on the same instance: the fitness
        function runs at most once per successful evaluation. Failures of the
        fitness function or scaler propagate and leave the phenotype
        retryable.
        """
        return self._cell.get_or_compute(self._compute)

    def run(self) -> None:
        """Evaluate the phenotype; lets an instance be submitted as an executor task."""
        self.evaluate()

    def _compute(self) -> tuple[Any, Any]:
        if self._evaluator is None:
            raise InvalidArgumentError("Phenotype has no fitness function to evaluate with.")
        LOGGER.debug("Evaluating phenotype of generation %d", self._generation)
        return self._evaluator.evaluate(self._genotype)

    def with_evaluator(
        self,
        fitness_function: FitnessFunction,
        scaler: FitnessScaler,
        generation: int,
    ) -> "Phenotype":
        """Return a new, unevaluated phenotype sharing this genotype.

        Used to re-tag a surviving genotype into a later generation without
        carrying over fitness computed by a different evaluator.
        """
        return type(self)(self._genotype, fitness_function, scaler, generation)

    def new_instance(self, genotype: Genotype, generation: int) -> "Phenotype":
        """Return a new phenotype for ``genotype`` with this phenotype's evaluator."""
        if self._evaluator is None:
            raise InvalidArgumentError("Phenotype has no fitness function to share.")
        return type(self)(genotype, self._evaluator.fitness_function, self._evaluator.scaler, generation)

    def compare(self, other: "Phenotype") -> int:
        """Return -1, 0 or 1 comparing scaled fitness values.

        Only ``<`` of the fitness type is used; it must be a total order.
        """
        mine = self.fitness
        theirs = other.fitness
        if mine < theirs:
            return -1
        if theirs < mine:
            return 1
        return 0

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Phenotype):
            return NotImplemented
        return self.compare(other) < 0

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Phenotype):
            return NotImplemented
        return self.compare(other) <= 0

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Phenotype):
            return NotImplemented
        return self.compare(other) > 0

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Phenotype):
            return NotImplemented
        return self.compare(other) >= 0

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, Phenotype):
            return NotImplemented
        return (
            self.fitness == other.fitness
            and self.raw_fitness == other.raw_fitness
            and self._genotype == other._genotype
            and self._generation == other._generation
        )

    def __hash__(self) -> int:
        return hash((Phenotype, self._generation, self.fitness, self.raw_fitness, self._genotype))

    def to_text(self) -> str:
        return self._genotype.to_text()

    def __str__(self) -> str:
        return f"{self.to_text()} --> {self.fitness}"

    def __repr__(self) -> str:
        state = "evaluated" if self.is_evaluated else "pending"
        return f"Phenotype(generation={self._generation}, genes={len(self._genotype)}, fitness={state})"
