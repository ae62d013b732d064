"""Rendering surfaces that pages draw onto and measure.

A surface only has to append a rendered unit, drop the last one, and report
the extent it currently occupies. ``FlowableSurface`` measures real ReportLab
flowables; ``MeasuredSurface`` takes any sizing function and is what the unit
tests paginate against.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, List, Protocol

from reportlab.platypus import Flowable, KeepTogether


class Surface(Protocol):
    """Append/remove/measure capability backing a page."""

    def append(self, unit: Any) -> None:
        """Draw ``unit`` below the current content."""

    def remove_last(self) -> Any | None:
        """Drop and return the last unit, or None when empty."""

    def extent(self) -> float:
        """Return the occupied extent."""


@dataclass(slots=True)
class FlowableSurface:
    """Stack of ReportLab flowables wrapped at a fixed width.

    Args:
        width: Frame width in points.

    Example:
        >>> from reportlab.platypus import Spacer
        >>> surface = FlowableSurface(width=200)
        >>> surface.append(Spacer(1, 30))
        >>> surface.extent()
        30.0
    """

    width: float
    flowables: List[Flowable] = field(default_factory=list)
    _heights: List[float] = field(default_factory=list)

    def append(self, unit: Flowable) -> None:
        before = unit.getSpaceBefore() if self.flowables else 0.0
        height = wrapped_height(unit, self.width)
        self.flowables.append(unit)
        self._heights.append(float(before + height + unit.getSpaceAfter()))

    def remove_last(self) -> Flowable | None:
        if not self.flowables:
            return None
        self._heights.pop()
        return self.flowables.pop()

    def extent(self) -> float:
        return float(sum(self._heights))


@dataclass(slots=True)
class MeasuredSurface:
    """Surface that sizes each unit with a caller-supplied function.

    Example:
        >>> surface = MeasuredSurface(measure=len)
        >>> surface.append("abc")
        >>> surface.append("de")
        >>> surface.extent()
        5.0
    """

    measure: Callable[[Any], float]
    units: List[Any] = field(default_factory=list)

    def append(self, unit: Any) -> None:
        self.units.append(unit)

    def remove_last(self) -> Any | None:
        if not self.units:
            return None
        return self.units.pop()

    def extent(self) -> float:
        return float(sum(self.measure(unit) for unit in self.units))


def wrapped_height(flowable: Flowable, width: float) -> float:
    """Return the height ``flowable`` takes when wrapped at ``width``.

    ``KeepTogether`` groups are measured child by child, including the space
    between children.
    """

    if isinstance(flowable, KeepTogether):
        children = getattr(flowable, "_content", [])
        total = 0.0
        for idx, child in enumerate(children):
            if idx:
                total += child.getSpaceBefore()
            total += wrapped_height(child, width)
            if idx + 1 < len(children):
                total += child.getSpaceAfter()
        return total
    _, height = flowable.wrap(width, 10_000)
    return float(height)
