"""Ordered chains of named heuristics, evaluated first-success-wins"""

from dataclasses import dataclass
from typing import Callable, Generic, Optional, Sequence, Tuple, TypeVar

T = TypeVar("T")
R = TypeVar("R")


@dataclass(frozen=True)
class Strategy(Generic[T, R]):
    """A named pure rule; returns None when it does not apply"""

    name: str
    apply: Callable[[T], Optional[R]]


class StrategyChain(Generic[T, R]):
    """
    Run strategies in fixed priority order and stop at the first result.

    Each rule stays a standalone function so it can be tested on its own;
    the chain only owns the ordering.
    """

    def __init__(self, strategies: Sequence[Strategy[T, R]]):
        if not strategies:
            raise ValueError("StrategyChain needs at least one strategy")
        self.strategies: Tuple[Strategy[T, R], ...] = tuple(strategies)

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(s.name for s in self.strategies)

    def resolve_named(self, value: T) -> Tuple[Optional[str], Optional[R]]:
        """Return (strategy name, result) of the first strategy that applies"""
        for strategy in self.strategies:
            result = strategy.apply(value)
            if result is not None:
                return strategy.name, result
        return None, None

    def resolve(self, value: T) -> Optional[R]:
        return self.resolve_named(value)[1]
