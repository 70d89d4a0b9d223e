import typing

import pytest

from unitgraph.core import graph


@pytest.fixture
def energy() -> graph.Graph:
    """A small graph of energy units."""
    g = graph.Graph()
    g.declare_node('meV', 'milli-electron-volt')
    g.declare_node('eV', 'electron-volt')
    g.declare_node('K', 'Kelvin')
    g.declare_edge('meV', 0.001, 'eV', False)
    g.declare_edge('eV', 11604.52, 'K', False)
    return g


@pytest.fixture
def chain() -> typing.Callable[..., graph.Graph]:
    """A function that builds a graph from edges between new units."""
    def build(*edges: typing.Tuple[str, float, str, bool]) -> graph.Graph:
        g = graph.Graph()
        for start, _, end, _ in edges:
            for symbol in (start, end):
                if symbol not in g:
                    g.declare_node(symbol, symbol.lower())
        for edge in edges:
            g.declare_edge(*edge)
        return g
    return build
