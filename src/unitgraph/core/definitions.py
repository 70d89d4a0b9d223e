"""Parsing of unit-definition files.

A definition file is line-oriented text. Each line is one of the following::

    # a comment line
    node <symbol> <name>
    edge <symbol> <factor> <symbol> <INVERT|NOINVERT>

A node line declares a unit with a short symbol and a descriptive name. An edge
line declares the conversion factor between two previously declared units. If
the flag is ``NOINVERT``, converting a value from the first unit to the second
multiplies it by the factor; if the flag is ``INVERT``, the conversion produces
the factor divided by the value (e.g., wavelength to energy).

This module includes the following objects::
* `~definitions.NodeStatement` and `~definitions.EdgeStatement` are the parsed
  records of single lines.
* `~definitions.parse_line` and `~definitions.parse_lines` turn text into
  statements.
* `~definitions.DefinitionFile` represents the statements in a named file.
"""

import logging
import re
import typing

from unitgraph.core import iotools
from unitgraph.core import iterables


logger = logging.getLogger(__name__)


COMMENTS = ['#']
"""Characters that begin a comment."""


INVERSION = {'INVERT': True, 'NOINVERT': False}
"""Valid inversion flags and their boolean meanings."""


class DefinitionError(Exception):
    """A malformed or invalid unit definition."""

    def __init__(
        self,
        message: str,
        lineno: int=None,
        source: iotools.PathLike=None,
    ) -> None:
        self.message = message
        self.lineno = lineno
        self.source = source

    def __str__(self) -> str:
        location = []
        if self.source is not None:
            location.append(str(self.source))
        if self.lineno is not None:
            location.append(f"line {self.lineno}")
        if location:
            return f"{', '.join(location)}: {self.message}"
        return self.message


class NodeStatement(typing.NamedTuple):
    """The declaration of a single unit."""

    symbol: str
    name: str


class EdgeStatement(typing.NamedTuple):
    """The declaration of a conversion between two units."""

    start: str
    factor: float
    end: str
    inverse: bool


Statement = typing.Union[NodeStatement, EdgeStatement]


class _Pattern:
    """Base class for line patterns."""

    keyword: str=None

    def match(self, line: str):
        """Match `line` against this pattern."""
        if match := self.pattern.match(line):
            return match.groupdict()


class NodeDef(_Pattern):
    """Pattern parser for node declarations."""

    keyword = 'node'

    @property
    def pattern(self):
        return re.compile(r"""
            # the `node` keyword
            \A node
            # at least one whitespace character
            \s+
            # the unit symbol
            (?P<symbol>\S+)
            # at least one whitespace character
            \s+
            # the long name, which may contain spaces
            (?P<name>\S.*?)
            # trailing whitespace
            \s*\Z
        """, re.VERBOSE)

    def parse(self, parsable: typing.Dict[str, str]):
        """Create a node statement from matched fields."""
        return NodeStatement(parsable['symbol'], parsable['name'])


class EdgeDef(_Pattern):
    """Pattern parser for edge declarations."""

    keyword = 'edge'

    @property
    def pattern(self):
        return re.compile(r"""
            # the `edge` keyword
            \A edge
            # the first unit symbol
            \s+ (?P<start>\S+)
            # the conversion factor
            \s+ (?P<factor>\S+)
            # the second unit symbol
            \s+ (?P<end>\S+)
            # the inversion flag
            \s+ (?P<flag>\S+)
            # trailing whitespace
            \s*\Z
        """, re.VERBOSE)

    def parse(self, parsable: typing.Dict[str, str]):
        """Create an edge statement from matched fields."""
        try:
            factor = float(parsable['factor'])
        except ValueError as err:
            raise DefinitionError(
                f"invalid conversion factor {parsable['factor']!r}"
            ) from err
        flag = parsable['flag']
        if flag not in INVERSION:
            raise DefinitionError(
                "inversion flag must be INVERT or NOINVERT"
                f" (got {flag!r})"
            ) from None
        return EdgeStatement(
            parsable['start'],
            factor,
            parsable['end'],
            INVERSION[flag],
        )


_PATTERNS = {p.keyword: p for p in (NodeDef(), EdgeDef())}


def parse_line(line: str) -> typing.Optional[Statement]:
    """Parse a single line of a definition file.

    Returns ``None`` for blank lines and comments. Raises `DefinitionError`
    without location information if the line is malformed.
    """
    text = iotools.strip_inline_comments(line, COMMENTS)
    if not text:
        return
    keyword = text.split()[0]
    if keyword not in _PATTERNS:
        raise DefinitionError(f"invalid type in definition file: {keyword}")
    pattern = _PATTERNS[keyword]
    if parsable := pattern.match(text):
        return pattern.parse(parsable)
    raise DefinitionError(f"malformed {keyword} declaration: {text!r}")


def number_lines(
    lines: typing.Iterable[str],
    source: iotools.PathLike=None,
) -> typing.Iterator[typing.Tuple[int, Statement]]:
    """Parse lines of text into statements paired with their line numbers.

    Parameters
    ----------
    lines : iterable of strings
        The text to parse, one definition per line.

    source : path-like, optional
        The origin of `lines`, used in error messages.

    Notes
    -----
    This is a generator: it parses each line only when the caller asks for the
    next statement, so a caller that acts on each statement sees errors in the
    order of the lines that cause them.

    Raises
    ------
    `~definitions.DefinitionError`
        The first malformed line, annotated with its line number and source.
    """
    for lineno, line in enumerate(lines, start=1):
        try:
            statement = parse_line(line)
        except DefinitionError as err:
            raise DefinitionError(err.message, lineno, source) from err
        if statement is not None:
            logger.debug("line %d: %s", lineno, statement)
            yield lineno, statement


def parse_lines(
    lines: typing.Iterable[str],
    source: iotools.PathLike=None,
) -> typing.Iterator[Statement]:
    """Parse lines of text into statements. See `number_lines`."""
    for _, statement in number_lines(lines, source=source):
        yield statement


class DefinitionFile(iterables.ReprStrMixin, typing.Iterable[Statement]):
    """The unit definitions in a text file.

    Parameters
    ----------
    path : string or path
        The path to the definition file. This class will convert it into a
        fully-qualified read-only path, and will raise
        `~iotools.NonExistentPathError` if the file does not exist.
    """

    def __init__(self, path: iotools.PathLike) -> None:
        self.path = iotools.ReadOnlyPath(path)
        self._statements = None

    def numbered(self) -> typing.Iterator[typing.Tuple[int, Statement]]:
        """Read statements and their line numbers one at a time."""
        with self.path.open('r') as fp:
            yield from number_lines(fp, source=self.path)

    @property
    def statements(self) -> typing.List[Statement]:
        """The parsed statements in this file."""
        if self._statements is None:
            self._statements = [s for _, s in self.numbered()]
        return self._statements

    def __iter__(self) -> typing.Iterator[Statement]:
        return iter(self.statements)

    def __len__(self) -> int:
        return len(self.statements)

    def __str__(self) -> str:
        """A simplified representation of this object."""
        return str(self.path)
