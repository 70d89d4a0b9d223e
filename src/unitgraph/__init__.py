import collections.abc
import configparser
import json
import os
import pathlib
import typing

from unitgraph.core import iotools
from unitgraph.core.conversion import (
    Path,
    UnreachableUnitError,
    ZeroValueError,
    convert,
    search,
)
from unitgraph.core.definitions import DefinitionError, DefinitionFile
from unitgraph.core.graph import Graph, Relation, Unit, UnitNotFoundError


# read version from installed package
from importlib.metadata import version
__version__ = version("unitgraph")


DIRECTORY = pathlib.Path(__file__).expanduser().resolve().parent
"""The full directory containing this package."""


_DEFAULTS = {
    'filename': 'convert.def',
    'fallback': '~/bin',
    'precision': '8',
    'width': '12',
}


class ConfigurationError(Exception):
    """The configuration file is unreadable or holds an invalid value."""

    def __init__(self, message: str, path: iotools.PathLike=None) -> None:
        self.message = message
        self.path = path

    def __str__(self) -> str:
        prefix = f"{self.path}: " if self.path else ''
        return f"{prefix}{self.message}"


class Environment(collections.abc.Mapping):
    """A collection of environmental settings."""

    def __init__(self, name: str='convert') -> None:
        self.name = name
        """The name of the configuration section to select."""
        home = pathlib.Path('~').expanduser()
        paths = [
            pathlib.Path.cwd(), # The current working directory
            home, # The user's home directory
            home / '.config', # Linux standard (local)
            os.environ.get('UNITGRAPH_INI'), # A known environment variable
        ]
        config = configparser.ConfigParser()
        path = iotools.search(paths, 'unitgraph.ini')
        try:
            if path is not None:
                config.read(iotools.ReadOnlyPath(path))
            self._config = {
                **_DEFAULTS,
                **(config[self.name] if config.has_section(self.name) else {}),
            }
        except configparser.Error as err:
            raise ConfigurationError(str(err), path=path) from err
        self.path = path
        """The configuration file, if any."""
        for key in ('precision', 'width'):
            self._validate(key)

    def _validate(self, key: str) -> None:
        """Make sure the value of `key` is a positive integer."""
        value = self._config[key]
        try:
            number = int(value)
        except ValueError:
            number = None
        if number is None or number <= 0:
            raise ConfigurationError(
                f"{key} must be a positive integer (got {value!r})",
                path=self.path,
            )

    def __len__(self) -> int:
        """The number of available parameter values."""
        return len(self._config)

    def __iter__(self):
        """Iterate over available parameter values."""
        yield from self._config

    def __getitem__(self, key: str):
        """Access parameter values by mapping key."""
        if key in self._config:
            return self._config[key]
        raise KeyError(
            f"{self.name} has no value for {key!r}"
        ) from None

    @property
    def precision(self) -> int:
        """The number of significant digits in printed values."""
        return int(self['precision'])

    @property
    def width(self) -> int:
        """The width of the symbol column in unit listings."""
        return int(self['width'])

    @property
    def search_paths(self) -> typing.List[typing.Optional[pathlib.Path]]:
        """The directories to search for a definition file, in order."""
        return [
            pathlib.Path.cwd(),
            pathlib.Path(self['fallback']).expanduser(),
            os.environ.get('UNITGRAPH_PATH'),
            DIRECTORY,
        ]

    def locate(self) -> pathlib.Path:
        """Find the definition file.

        Raises
        ------
        `~iotools.NonExistentPathError`
            None of the search paths contains the definition file.
        """
        filename = self['filename']
        if path := iotools.search(self.search_paths, filename):
            return path
        raise iotools.NonExistentPathError(
            f"Definition file {filename!r}"
        ) from None

    def __str__(self) -> str:
        return json.dumps(
            dict(self._config),
            indent=4,
            sort_keys=True,
        )

    def __repr__(self) -> str:
        return f"{__package__}({self.path}):\n{self}"


def load(path: iotools.PathLike=None) -> Graph:
    """Build a unit graph from `path` or from the default definition file."""
    if path is None:
        path = Environment().locate()
    return Graph.from_file(path)
