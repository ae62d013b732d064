"""Iteration ceiling shared by the pagination loops."""

from __future__ import annotations

from dataclasses import dataclass

from .constants import ITERATION_FACTOR


@dataclass(slots=True)
class StepBudget:
    """Hard ceiling on loop iterations.

    Example:
        >>> budget = StepBudget.for_items(1)
        >>> for _ in range(6):
        ...     budget.spend()
        >>> budget.exhausted
        True
    """

    limit: int
    spent: int = 0

    @classmethod
    def for_items(cls, count: int, factor: int = ITERATION_FACTOR) -> "StepBudget":
        return cls(limit=count * factor)

    @property
    def exhausted(self) -> bool:
        return self.spent >= self.limit

    def spend(self) -> None:
        self.spent += 1
