"""Loading of single-frame structure files."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Union

import MDAnalysis as mda

from leaflets2ndx.errors import StructureIOError

if TYPE_CHECKING:
    from MDAnalysis.core.universe import Universe

LOGGER = logging.getLogger(__name__)


def load_structure(path: Union[str, Path]) -> "Universe":
    """Load a structure file (GRO, PDB, ...) into an MDAnalysis Universe.

    Only the first frame is used; positions are in Angstroms.

    Parameters
    ----------
    path : str or Path
        Structure file to read.

    Returns
    -------
    Universe
        Universe built from the structure.

    Raises
    ------
    StructureIOError
        If the file does not exist or cannot be parsed.
    """
    path = Path(path)
    if not path.is_file():
        raise StructureIOError(f"Structure file not found: {path}")

    try:
        universe = mda.Universe(str(path))
    except Exception as e:
        raise StructureIOError(f"Could not read structure file {path}: {e}") from e

    LOGGER.info(
        f"Loaded {path.name}: {universe.atoms.n_atoms} atoms, "
        f"{universe.residues.n_residues} residues"
    )
    if universe.dimensions is None:
        LOGGER.warning(f"{path.name} defines no simulation box; periodicity is ignored")

    return universe
