import pathlib

import pytest


@pytest.fixture
def definitions_text() -> str:
    """The text of a valid definition file."""
    return _DEFINITIONS


@pytest.fixture
def write_definitions(tmp_path: pathlib.Path):
    """A function that writes definition text to a temporary file."""
    def write(
        text: str,
        name: str='convert.def',
        directory: pathlib.Path=None,
    ) -> pathlib.Path:
        d = directory or tmp_path
        d.mkdir(parents=True, exist_ok=True)
        path = d / name
        path.write_text(text)
        return path
    return write


@pytest.fixture
def isolated(tmp_path: pathlib.Path, monkeypatch: pytest.MonkeyPatch):
    """Run in an empty working directory with an empty home directory.

    Returns a mapping with the paths to the working and home directories.
    """
    home = tmp_path / 'home'
    work = tmp_path / 'work'
    for d in (home, work):
        d.mkdir()
    monkeypatch.setenv('HOME', str(home))
    monkeypatch.delenv('UNITGRAPH_INI', raising=False)
    monkeypatch.delenv('UNITGRAPH_PATH', raising=False)
    monkeypatch.chdir(work)
    return {'home': home, 'work': work}


_DEFINITIONS = """\
# energy units
node meV milli-electron-volt
node eV electron-volt
node K Kelvin

node nm wavelength in nanometers
edge meV 0.001 eV NOINVERT
edge eV 11604.52 K NOINVERT # thermal energy
edge nm 1239.842 eV INVERT
"""
