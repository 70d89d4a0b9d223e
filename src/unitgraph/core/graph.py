"""The graph of declared units and the conversions between them.

Each `~graph.Unit` owns a list of outgoing `~graph.Relation` objects. Declaring
an edge between two units creates a relation in each direction, so the graph is
undirected in the sense that every conversion is available in reverse.
"""

import logging
import numbers
import typing

import numpy

from unitgraph.core import conversion
from unitgraph.core import definitions
from unitgraph.core import iotools
from unitgraph.core import iterables


logger = logging.getLogger(__name__)


class UnitNotFoundError(KeyError):
    """The graph does not contain the requested unit."""

    def __init__(self, symbol: str, context: str=None) -> None:
        self.symbol = symbol
        self.context = context

    def __str__(self) -> str:
        prefix = f"{self.context}: " if self.context else ''
        return f"{prefix}unit {self.symbol!r} not found"


class Relation(typing.NamedTuple):
    """A directed conversion from one unit to another."""

    target: str
    factor: float
    inverse: bool=False

    def apply(self, value):
        """Convert `value` along this relation.

        A normal relation multiplies `value` by the factor. An inverse relation
        divides the factor by `value`.
        """
        if self.inverse:
            return self.factor / value
        return self.factor * value

    def reverse(self, source: str):
        """The relation that leads from `target` back to `source`."""
        if self.inverse:
            return type(self)(source, self.factor, True)
        return type(self)(source, 1.0 / self.factor, False)


class Unit(iterables.ReprStrMixin):
    """A named unit and its outgoing relations."""

    def __init__(self, symbol: str, name: str) -> None:
        self._symbol = symbol
        self._name = name
        self.relations: typing.List[Relation] = []
        """The conversions from this unit, most recently declared first."""

    @property
    def symbol(self) -> str:
        """The short identifier of this unit."""
        return self._symbol

    @property
    def name(self) -> str:
        """The descriptive name of this unit."""
        return self._name

    def relate(self, relation: Relation) -> None:
        """Add a relation in front of existing relations."""
        self.relations.insert(0, relation)

    def __eq__(self, other) -> bool:
        if isinstance(other, Unit):
            return self.symbol == other.symbol
        if isinstance(other, str):
            return self.symbol == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.symbol)

    def __str__(self) -> str:
        return f"{self.symbol!r} ({self.name})"


class Graph(iterables.MappingBase):
    """A collection of units connected by conversion factors.

    Instances behave as read-only mappings from unit symbol to `~graph.Unit`.
    Use `declare_node` and `declare_edge` (or `load`) to populate an instance.

    Examples
    --------
    >>> g = Graph()
    >>> _ = g.declare_node('meV', 'milli-electron-volt')
    >>> _ = g.declare_node('eV', 'electron-volt')
    >>> _ = g.declare_node('K', 'Kelvin')
    >>> g.declare_edge('meV', 0.001, 'eV', False)
    >>> g.declare_edge('eV', 11604.52, 'K', False)
    >>> round(g.convert(25, 'meV', 'K'), 6)
    290.113
    """

    def __init__(
        self,
        statements: typing.Iterable[definitions.Statement]=None,
    ) -> None:
        self._units: typing.Dict[str, Unit] = {}
        super().__init__(self._units)
        if statements is not None:
            self.load(statements)

    @classmethod
    def from_file(cls, path: iotools.PathLike):
        """Create a graph from the definitions in `path`."""
        source = definitions.DefinitionFile(path)
        instance = cls()
        for lineno, statement in source.numbered():
            instance.declare(statement, lineno=lineno, source=source.path)
        return instance

    def __getitem__(self, key: str) -> Unit:
        """Look up a unit by symbol."""
        if key in self._units:
            return self._units[key]
        raise UnitNotFoundError(key)

    def find(self, symbol: str) -> typing.Optional[Unit]:
        """Get the unit with this exact symbol, if it exists."""
        return self._units.get(symbol)

    def all_units(self) -> typing.List[Unit]:
        """All units, in the order of declaration."""
        return list(self._units.values())

    def declare_node(self, symbol: str, name: str) -> Unit:
        """Add a unit to this graph.

        A repeated declaration logs a warning and leaves the graph unchanged.

        Returns
        -------
        `~graph.Unit`
            The unit registered under `symbol`.
        """
        if symbol in self._units:
            logger.warning("unit %s is already defined", symbol)
            return self._units[symbol]
        unit = Unit(symbol, name)
        self._units[symbol] = unit
        logger.debug("defining node %s %s", symbol, name)
        return unit

    def declare_edge(
        self,
        start: str,
        factor: numbers.Real,
        end: str,
        inverse: bool=False,
    ) -> None:
        """Add a pair of relations between two declared units.

        Parameters
        ----------
        start, end : string
            The symbols of the units to connect. Both must already exist.

        factor : real number
            The non-zero, finite conversion factor from `start` to `end`.

        inverse : bool, default=False
            If true, converting from `start` to `end` (or back) divides the
            factor by the value; otherwise, it multiplies the value by the
            factor (or by its reciprocal in reverse).

        Raises
        ------
        `~definitions.DefinitionError`
            The factor is zero or not finite, or a unit is undeclared.
        """
        if factor == 0.0:
            raise definitions.DefinitionError(
                f"conversion factor from {start} to {end} is zero"
            )
        if not numpy.isfinite(factor):
            raise definitions.DefinitionError(
                f"conversion factor from {start} to {end} is not finite"
            )
        for symbol in (start, end):
            if symbol not in self._units:
                raise definitions.DefinitionError(
                    f"unit {symbol} not found in edge {start} -> {end}"
                )
        forward = Relation(end, float(factor), bool(inverse))
        self._units[start].relate(forward)
        self._units[end].relate(forward.reverse(start))
        logger.debug(
            "defining conversion from %s to %s factor: %s inv: %s",
            start, end, factor, inverse,
        )

    def load(
        self,
        statements: typing.Iterable[definitions.Statement],
        source: iotools.PathLike=None,
    ) -> None:
        """Declare the nodes and edges in `statements`, in order."""
        for statement in statements:
            self.declare(statement, source=source)

    def declare(
        self,
        statement: definitions.Statement,
        lineno: int=None,
        source: iotools.PathLike=None,
    ) -> None:
        """Declare the node or edge in a single statement.

        Parameters
        ----------
        statement : `~definitions.NodeStatement` or `~definitions.EdgeStatement`
            The declaration to apply to this graph.

        lineno : int, optional
            The line of the definition file that produced `statement`.

        source : path-like, optional
            The definition file that produced `statement`.

        Raises
        ------
        `~definitions.DefinitionError`
            The statement declares an invalid edge. The error carries `lineno`
            and `source`, when given.

        TypeError
            The statement is neither a node nor an edge.
        """
        if isinstance(statement, definitions.NodeStatement):
            self.declare_node(statement.symbol, statement.name)
        elif isinstance(statement, definitions.EdgeStatement):
            try:
                self.declare_edge(*statement)
            except definitions.DefinitionError as err:
                if lineno is None and source is None:
                    raise
                raise definitions.DefinitionError(
                    err.message,
                    lineno=lineno,
                    source=source,
                ) from err
        else:
            raise TypeError(f"Can't load {statement!r} into a unit graph")

    def search(self, value, start: str, end: str):
        """Find a conversion path. See `~conversion.search`."""
        return conversion.search(self, value, start, end)

    def convert(self, value, start: str, end: str):
        """Convert `value` from `start` to `end`. See `~conversion.convert`."""
        return conversion.convert(self, value, start, end)

    def show(self, width: int=12) -> str:
        """A listing of all units, one per line."""
        return '\n'.join(
            f" {unit.symbol:<{width}}{unit.name}"
            for unit in self.all_units()
        )

    def __str__(self) -> str:
        return ', '.join(self._units)
