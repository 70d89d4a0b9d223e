"""cv: unit conversions.

Convert a value from one unit to another by searching the graph of units and
conversion factors declared in a definition file. Without a value and two
units, print the allowed units.

The definition file is the first `convert.def` found in the current directory,
in ~/bin, in the directory named by $UNITGRAPH_PATH, or in this package.
"""

import argparse
import logging
import sys
import typing

import unitgraph
from unitgraph.core import conversion
from unitgraph.core import definitions
from unitgraph.core import graph
from unitgraph.core import iotools


logger = logging.getLogger(__name__)


ERRORS = (
    unitgraph.ConfigurationError,
    iotools.NonExistentPathError,
    OSError,
    definitions.DefinitionError,
    graph.UnitNotFoundError,
    conversion.UnreachableUnitError,
    conversion.ZeroValueError,
)
"""Errors that end a conversion with a message instead of a traceback."""


def show(
    units: graph.Graph,
    source: iotools.PathLike,
    width: int=12,
    stream: typing.TextIO=None,
) -> None:
    """Print usage, the definition file, and all allowed units."""
    stream = stream or sys.stderr
    print(" cv: unit conversions: ", file=stream)
    print(f" Current definition file is {source}", file=stream)
    print(" use: cv value from_unit to_unit ", file=stream)
    print(" allowed units are: ", file=stream)
    if listing := units.show(width=width):
        print(listing, file=stream)


def run(
    value: float,
    start: str,
    end: str,
    units: graph.Graph,
    precision: int=8,
    path: bool=False,
) -> None:
    """Convert `value` and print the result."""
    found = units.search(value, start, end)
    print(
        f" {value:.{precision}g} {start} ="
        f" {float(found):.{precision}g} {end}"
    )
    if path:
        print(f" path: {found}")


def is_number(arg: str) -> bool:
    """True if `arg` reads as a floating-point number."""
    try:
        float(arg)
    except ValueError:
        return False
    return True


def separate(
    argv: typing.Sequence[str],
    valued: typing.Collection[str]=('-f', '--file'),
) -> typing.List[str]:
    """Move positional arguments behind ``--``.

    Arguments that read as numbers stay positional even when they start with a
    minus sign (e.g., ``-1e-3``), which `argparse` would otherwise take for an
    unknown option. Options in `valued` keep the argument that follows them.
    """
    options, positionals = [], []
    tokens = iter(argv)
    for token in tokens:
        if token == '--':
            positionals.extend(tokens)
        elif token in valued:
            options.append(token)
            following = next(tokens, None)
            if following is not None:
                options.append(following)
        elif token.startswith('-') and not is_number(token):
            options.append(token)
        else:
            positionals.append(token)
    return [*options, '--', *positionals]


def main(argv: typing.Sequence[str]=None) -> int:
    """Run the command-line interface. Returns the exit status."""
    doclines = __doc__.split('\n')
    parser = argparse.ArgumentParser(
        prog='cv',
        description='\n'.join(doclines[2:]),
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument(
        'value',
        help="the value to convert",
        nargs='?',
    )
    parser.add_argument(
        'from_unit',
        help="the unit of the given value",
        nargs='?',
    )
    parser.add_argument(
        'to_unit',
        help="the unit of the converted value",
        nargs='?',
    )
    parser.add_argument(
        '-f',
        '--file',
        help="use this definition file instead of searching for one",
    )
    parser.add_argument(
        '-p',
        '--path',
        help="also print the units along the conversion path",
        action='store_true',
    )
    parser.add_argument(
        '--debug',
        help="print parsing and search details",
        action='store_true',
    )
    parser.add_argument(
        '--version',
        action='version',
        version=f"%(prog)s {unitgraph.__version__}",
    )
    if argv is None:
        argv = sys.argv[1:]
    args = parser.parse_args(separate(argv))
    logging.basicConfig(
        format=" %(levelname)s: %(message)s",
        level=logging.DEBUG if args.debug else logging.WARNING,
        stream=sys.stderr,
    )
    if args.to_unit is not None and not is_number(args.value):
        parser.error(f"invalid value: {args.value!r}")
    try:
        env = unitgraph.Environment()
        if args.file:
            source = iotools.ReadOnlyPath(args.file)
        else:
            source = env.locate()
        logger.debug("reading definitions from %s", source)
        units = graph.Graph.from_file(source)
        if args.to_unit is None:
            show(units, source, width=env.width)
            return 0
        run(
            float(args.value),
            args.from_unit,
            args.to_unit,
            units,
            precision=env.precision,
            path=args.path,
        )
    except ERRORS as err:
        print(f" {err}", file=sys.stderr)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
