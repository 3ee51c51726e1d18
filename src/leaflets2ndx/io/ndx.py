"""Reading and writing GROMACS index (ndx) files.

An index file is a sequence of named groups::

    [ Membrane ]
       1    2    3    4    5    6    7    8    9   10   11   12   13   14   15
      16   17   18

Atom numbers are 1-based. Groups are written with 15 numbers per line, each
right-aligned in a field of width 4 and followed by a space.
"""

from __future__ import annotations

import logging
import re
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import IO, TYPE_CHECKING, Iterator, Optional, Union

import numpy as np

from leaflets2ndx.errors import IndexFileError

if TYPE_CHECKING:
    from MDAnalysis.core.groups import AtomGroup
    from MDAnalysis.core.universe import Universe

    from leaflets2ndx.core.leaflets import LeafletGroups

LOGGER = logging.getLogger(__name__)

NUMBERS_PER_LINE = 15

_HEADER_PATTERN = re.compile(r"^\[\s*(.+?)\s*\]$")


def parse_ndx(stream: IO[str]) -> dict[str, list[int]]:
    """Parse index groups from a text stream.

    Parameters
    ----------
    stream : IO[str]
        Open index file.

    Returns
    -------
    dict[str, list[int]]
        Group name to 1-based atom numbers, in file order.

    Raises
    ------
    IndexFileError
        If atom numbers appear before the first group header or are not
        positive integers.
    """
    groups: dict[str, list[int]] = {}
    current: Optional[list[int]] = None

    for lineno, raw in enumerate(stream, start=1):
        line = raw.split(";", 1)[0].strip()
        if not line:
            continue

        header = _HEADER_PATTERN.match(line)
        if header:
            name = header.group(1)
            if name in groups:
                LOGGER.warning(f"Index group '{name}' defined more than once; using the last one")
            current = groups[name] = []
            continue

        if current is None:
            raise IndexFileError(f"Line {lineno}: atom numbers found before any group header")

        try:
            numbers = [int(token) for token in line.split()]
        except ValueError as e:
            raise IndexFileError(f"Line {lineno}: {e}") from e
        if any(n < 1 for n in numbers):
            raise IndexFileError(f"Line {lineno}: atom numbers must be positive")
        current.extend(numbers)

    return groups


def read_ndx(path: Union[str, Path], universe: "Universe") -> dict[str, "AtomGroup"]:
    """Read an index file into AtomGroups of ``universe``.

    A missing or unreadable file is not an error: a warning is logged and
    an empty mapping is returned, so that queries fall back to plain
    MDAnalysis selections.

    Parameters
    ----------
    path : str or Path
        Index file to read.
    universe : Universe
        Universe the atom numbers refer to.

    Returns
    -------
    dict[str, AtomGroup]
        Group name to atoms, preserving order and duplicates.

    Raises
    ------
    IndexFileError
        If the file is malformed or refers to atoms beyond the structure.
    """
    path = Path(path)
    try:
        with open(path, "r") as f:
            numbers = parse_ndx(f)
    except OSError as e:
        LOGGER.warning(f"Could not read index file {path} ({e.strerror}); ignoring it")
        return {}

    n_atoms = universe.atoms.n_atoms
    groups = {}
    for name, atom_numbers in numbers.items():
        indices = np.asarray(atom_numbers, dtype=np.intp) - 1
        if len(indices) and indices.max() >= n_atoms:
            raise IndexFileError(
                f"Index group '{name}' in {path} refers to atom {indices.max() + 1}, "
                f"but the structure only has {n_atoms} atoms"
            )
        groups[name] = universe.atoms[indices]

    LOGGER.info(f"Read {len(groups)} index groups from {path}")
    return groups


def write_ndx_group(stream: IO[str], name: str, atoms: "AtomGroup") -> None:
    """Write one index group.

    Parameters
    ----------
    stream : IO[str]
        Output stream.
    name : str
        Group name written in the header.
    atoms : AtomGroup
        Atoms of the group; written as 1-based numbers in group order.
    """
    stream.write(f"[ {name} ]\n")
    numbers = atoms.indices + 1
    for start in range(0, len(numbers), NUMBERS_PER_LINE):
        chunk = numbers[start : start + NUMBERS_PER_LINE]
        stream.write("".join(f"{n:4d} " for n in chunk) + "\n")


def write_leaflet_groups(
    stream: IO[str],
    groups: "LeafletGroups",
    include_empty: bool = False,
) -> int:
    """Write all leaflet groups in table order.

    Parameters
    ----------
    stream : IO[str]
        Output stream.
    groups : LeafletGroups
        Groups to write.
    include_empty : bool, optional
        Also write groups without atoms (header only). Default is False.

    Returns
    -------
    int
        Number of groups written.

    Raises
    ------
    InternalConsistencyError
        If a group index has no species name.
    """
    written = 0
    for index in range(len(groups)):
        atoms = groups.group(index)
        if not include_empty and len(atoms) == 0:
            continue

        name = groups.name(index)
        write_ndx_group(stream, name, atoms)
        LOGGER.debug(f"Wrote group {name} ({len(atoms)} atoms)")
        written += 1

    return written


@contextmanager
def open_output(path: Optional[Union[str, Path]] = None) -> Iterator[IO[str]]:
    """Open the output target for index groups.

    Yields stdout when ``path`` is None. An existing file is appended to,
    so new groups can be added to an existing index file; otherwise the
    file is created.
    """
    if path is None:
        yield sys.stdout
        return

    path = Path(path)
    mode = "a" if path.exists() else "w"
    if mode == "a":
        LOGGER.info(f"Appending groups to existing file {path}")

    with open(path, mode) as f:
        yield f
