"""Conversion of values by depth-first search through a unit graph.

The search starts at the source unit with the given value and follows outgoing
relations in order, applying each relation to the accumulated value, until it
reaches the target unit. The first path found determines the result. Units are
never revisited within a single search; the record of visited units belongs to
the search, not to the graph, so a graph supports any number of independent
conversions.
"""

import logging
import numbers
import typing

import numpy

from unitgraph.core import iterables


logger = logging.getLogger(__name__)


class UnreachableUnitError(Exception):
    """No sequence of relations connects two units."""

    def __init__(self, u0: str, u1: str) -> None:
        self._from = u0
        self._to = u1

    def __str__(self) -> str:
        return f"Cannot convert {self._from} to {self._to}"


class ZeroValueError(ZeroDivisionError):
    """An inverse relation would divide by a zero value."""

    def __init__(self, u0: str, u1: str) -> None:
        self._from = u0
        self._to = u1

    def __str__(self) -> str:
        return (
            "Cannot convert zero value"
            f" (inverse relation from {self._from} to {self._to})"
        )


Value = typing.Union[numbers.Real, numpy.ndarray]


def _standardize(value) -> Value:
    """Convert `value` to a float or an array of floats."""
    if numpy.ndim(value) == 0:
        return float(value)
    return numpy.array(value, dtype=float)


def _has_zero(value: Value) -> bool:
    """True if `value` is, or contains, exactly zero."""
    return bool(numpy.any(numpy.asarray(value) == 0.0))


class Path(iterables.ReprStrMixin):
    """The result of a successful search."""

    def __init__(
        self,
        value: Value,
        units: typing.Sequence[str],
        relations: typing.Sequence=None,
    ) -> None:
        self.value = value
        """The converted value."""
        self.units = tuple(units)
        """The symbols of the units along this path, source first."""
        self.relations = tuple(relations or ())
        """The relations applied along this path."""

    @property
    def start(self) -> str:
        """The source unit."""
        return self.units[0]

    @property
    def end(self) -> str:
        """The target unit."""
        return self.units[-1]

    def __len__(self) -> int:
        """The number of steps in this path."""
        return len(self.relations)

    def __float__(self) -> float:
        return float(self.value)

    def __str__(self) -> str:
        return ' -> '.join(self.units)


class _Frame(typing.NamedTuple):
    """A unit on the current search path."""

    symbol: str
    value: Value
    pending: typing.Iterator


def search(graph, value, start: str, end: str) -> Path:
    """Find the first path from `start` to `end` and convert `value` along it.

    Parameters
    ----------
    graph : `~graph.Graph`
        The populated unit graph.

    value : real number or array-like
        The value to convert, in units of `start`.

    start, end : string
        The symbols of the source and target units.

    Returns
    -------
    `~conversion.Path`
        The units and relations on the path, and the converted value.

    Raises
    ------
    `~graph.UnitNotFoundError`
        Either unit is not in the graph.
    `~conversion.ZeroValueError`
        The search reached an inverse relation with a zero value.
    `~conversion.UnreachableUnitError`
        The search visited every unit reachable from `start` without reaching
        `end`.

    Notes
    -----
    This function walks the graph with an explicit stack but visits units in
    the same order as the recursive algorithm: at each unit, it tries each
    relation in the unit's order and descends into the first target not yet
    visited. If the graph contains multiple paths with inconsistent factors, the
    result depends on that order.
    """
    source, target = graph[start], graph[end]
    value = _standardize(value)
    logger.debug("visiting %s with %r", source.symbol, value)
    if source.symbol == target.symbol:
        return Path(value, [source.symbol])
    visited = {source.symbol}
    stack = [_Frame(source.symbol, value, iter(source.relations))]
    applied = []
    while stack:
        frame = stack[-1]
        relation = next(
            (r for r in frame.pending if r.target not in visited),
            None,
        )
        if relation is None:
            stack.pop()
            if applied:
                applied.pop()
            continue
        if relation.inverse and _has_zero(frame.value):
            raise ZeroValueError(frame.symbol, relation.target)
        current = relation.apply(frame.value)
        visited.add(relation.target)
        applied.append(relation)
        logger.debug("visiting %s with %r", relation.target, current)
        if relation.target == target.symbol:
            units = [f.symbol for f in stack] + [relation.target]
            return Path(current, units, applied)
        unit = graph[relation.target]
        stack.append(_Frame(unit.symbol, current, iter(unit.relations)))
    raise UnreachableUnitError(start, end)


def convert(graph, value, start: str, end: str) -> Value:
    """Convert `value` from `start` to `end`.

    This is a convenience function that returns only the converted value of
    `~conversion.search`. A scalar input produces a ``float``; an array-like
    input produces a ``numpy.ndarray``.

    Examples
    --------
    Given a graph in which ``meV`` relates to ``eV`` by a factor of 0.001 and
    ``eV`` relates to ``K`` by a factor of 11604.52::

        >>> convert(g, 25, 'meV', 'K')
        290.113...
    """
    return search(graph, value, start, end).value
