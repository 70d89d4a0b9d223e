import logging
import pathlib
import sys
import typing


logger = logging.getLogger(__name__)


PathLike = typing.TypeVar('PathLike')
PathLike = typing.Union[str, pathlib.Path]


class NonExistentPathError(Exception):

    def __init__(self, path: str=None):
        self._path = path

    @property
    def path(self) -> str:
        if self._path is None:
            self._path = "The requested path"
        return self._path

    def __str__(self):
        return f"{self.path} does not exist."


class ReadOnlyPathError(Exception):

    def __init__(self, obj: object):
        self._obj = obj

    def __str__(self):
        return f"Objects of type {self._obj} are read-only."


_PathType = type(pathlib.Path())


class ReadOnlyPath(_PathType):
    """A wrapper for read-oriented paths.

    This class creates ``pathlib.Path`` objects intended for reading. The
    instance path is fully resolved with the user wildcard expanded, and raises
    an exception if the requested path does not exist.

    This class overloads the following methods to prevent the user from writing
    to path:
    ```
        pathlib.Path().write_bytes()
        pathlib.Path().write_text()
        pathlib.Path().open(mode='w')
    ```
    It does this in lieu of changing path permissions, which may be undesirable.
    """

    def __new__(cls, *args, **kwargs):
        """Create a new path object of the appropriate type."""
        path = pathlib.Path(*args).expanduser().resolve()
        if not path.exists():
            raise NonExistentPathError(path)
        return super().__new__(cls, path)

    def __init__(self, *args, **kwargs) -> None:
        if sys.version_info >= (3, 12):
            super().__init__(pathlib.Path(*args).expanduser().resolve())

    def open(self, mode='r', *args, **kwargs):
        if any(c in mode for c in 'wax+'):
            raise ReadOnlyPathError(self.__class__)
        return super().open(mode, *args, **kwargs)

    def write_bytes(self, *args, **kwargs):
        raise ReadOnlyPathError(self.__class__)

    def write_text(self, *args, **kwargs):
        raise ReadOnlyPathError(self.__class__)


def strip_inline_comments(string: str, comments: typing.List[str]) -> str:
    """Remove inline comments from a string."""
    for c in comments:
        parts = string.split(c)
        string = parts[0]
    return string.strip()


def search(
    paths: typing.Iterable[typing.Optional[PathLike]],
    file: PathLike,
) -> typing.Optional[pathlib.Path]:
    """Search `paths` for `file`.

    Parameters
    ----------
    paths : iterable of path-like
        The paths to search, in the order given. Each member must be an object
        that can represent a path on the current file system, or ``None``.
        This function will skip members that are ``None`` or that do not name
        an existing directory.

    file : path-like
        The file to locate.

    Returns
    -------
    path or `None`
        The full path to the file, if found.
    """
    for p in paths:
        if p is None:
            continue
        path = pathlib.Path(p).expanduser()
        if path.is_dir():
            test = path / str(file)
            if test.is_file():
                logger.debug("found %s in %s", file, path)
                return test.resolve()
        logger.debug("%s not found in %s", file, path)
