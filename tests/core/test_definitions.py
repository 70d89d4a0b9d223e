import pytest

from unitgraph.core import definitions
from unitgraph.core import iotools


def test_parse_line():
    """Test parsing of individual definition lines."""
    cases = {
        'node Ha Hartree': definitions.NodeStatement('Ha', 'Hartree'),
        'node Ha Hartree\n': definitions.NodeStatement('Ha', 'Hartree'),
        '  node  Ha   Hartree  ': definitions.NodeStatement('Ha', 'Hartree'),
        'node nm wavelength in nm': definitions.NodeStatement(
            'nm', 'wavelength in nm'
        ),
        'edge meV 0.001 eV NOINVERT': definitions.EdgeStatement(
            'meV', 0.001, 'eV', False
        ),
        'edge nm 1239.842 eV INVERT': definitions.EdgeStatement(
            'nm', 1239.842, 'eV', True
        ),
        'edge a 1e-3 b NOINVERT # milli': definitions.EdgeStatement(
            'a', 1e-3, 'b', False
        ),
    }
    for line, expected in cases.items():
        assert definitions.parse_line(line) == expected


def test_parse_ignored_lines():
    """Comments and blank lines do not produce statements."""
    for line in ['# node Ha Hartree', '#', '', '\n', '   ', '  # indented']:
        assert definitions.parse_line(line) is None


def test_parse_errors():
    """Test the errors raised for malformed lines."""
    lines = [
        'unit Ha Hartree', # unknown keyword
        'NODE Ha Hartree', # keywords are case-sensitive
        'node Ha', # missing long name
        'edge a 2.0 b', # missing flag
        'edge a 2.0 b TRUE', # invalid flag
        'edge a 2.0 b invert', # flags are case-sensitive
        'edge a two b NOINVERT', # invalid factor
        'edge a 2.0 b NOINVERT extra', # too many fields
    ]
    for line in lines:
        with pytest.raises(definitions.DefinitionError):
            definitions.parse_line(line)


def test_invalid_keyword_message():
    """The error for an unknown keyword names the keyword."""
    with pytest.raises(definitions.DefinitionError) as exc:
        definitions.parse_line('unit Ha Hartree')
    assert "invalid type in definition file: unit" in str(exc.value)


def test_parse_lines(definitions_text: str):
    """Test parsing of multiple lines."""
    statements = list(definitions.parse_lines(definitions_text.splitlines()))
    assert len(statements) == 7
    nodes = [s for s in statements if isinstance(s, definitions.NodeStatement)]
    edges = [s for s in statements if isinstance(s, definitions.EdgeStatement)]
    assert [n.symbol for n in nodes] == ['meV', 'eV', 'K', 'nm']
    assert nodes[-1].name == 'wavelength in nanometers'
    assert edges[1] == definitions.EdgeStatement('eV', 11604.52, 'K', False)
    assert edges[2].inverse


def test_parse_lines_location():
    """Errors from multiple lines report the line number and source."""
    lines = ['# header', 'node a A', 'edge a 1.0 b MAYBE']
    with pytest.raises(definitions.DefinitionError) as exc:
        list(definitions.parse_lines(lines, source='units.def'))
    err = exc.value
    assert err.lineno == 3
    assert err.source == 'units.def'
    assert str(err).startswith('units.def, line 3: ')


def test_definition_file(write_definitions, definitions_text: str):
    """Test the object that represents a definition file."""
    path = write_definitions(definitions_text)
    source = definitions.DefinitionFile(path)
    assert source.path == path.resolve()
    assert len(source) == 7
    assert list(source) == list(
        definitions.parse_lines(definitions_text.splitlines())
    )
    assert str(source) == str(path.resolve())


def test_definition_file_missing(tmp_path):
    """A missing definition file raises an error."""
    with pytest.raises(iotools.NonExistentPathError):
        definitions.DefinitionFile(tmp_path / 'missing.def')


def test_definition_file_error(write_definitions):
    """A malformed file reports the file and line."""
    path = write_definitions('node a A\nnode b B\nlink a 2.0 b NOINVERT\n')
    source = definitions.DefinitionFile(path)
    with pytest.raises(definitions.DefinitionError) as exc:
        list(source)
    assert exc.value.lineno == 3
    assert str(path.resolve()) in str(exc.value)


def test_number_lines(definitions_text: str):
    """Statements come with the line that declared them."""
    numbered = list(definitions.number_lines(definitions_text.splitlines()))
    assert [lineno for lineno, _ in numbered] == [2, 3, 4, 6, 7, 8, 9]
    edge = definitions.EdgeStatement('meV', 0.001, 'eV', False)
    assert numbered[4] == (7, edge)


def test_definition_file_numbered(write_definitions):
    """Reading numbered statements stops at the first bad line."""
    path = write_definitions('node a A\nnode b B\nlink a 2.0 b NOINVERT\n')
    source = definitions.DefinitionFile(path)
    numbered = source.numbered()
    assert next(numbered) == (1, definitions.NodeStatement('a', 'A'))
    assert next(numbered) == (2, definitions.NodeStatement('b', 'B'))
    with pytest.raises(definitions.DefinitionError) as exc:
        next(numbered)
    assert exc.value.lineno == 3
