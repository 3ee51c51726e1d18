"""Splitting of atom selections into individual residues.

A residue here is one lipid molecule, identified by its residue number.
Splitting is a stable partition of the input AtomGroup: atoms keep their
relative order, and residues are ordered by the first appearance of their
residue number. Residue numbers do not need to be sorted or contiguous.

Examples
--------
>>> from leaflets2ndx.core.residues import split_by_residue, residue_names
>>> membrane = universe.select_atoms("resname POPC POPE")
>>> residues = split_by_residue(membrane)
>>> residue_names(membrane)
['POPC', 'POPE']
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np
from MDAnalysis.exceptions import NoDataError

from leaflets2ndx.errors import EmptyInputError

if TYPE_CHECKING:
    from MDAnalysis.core.groups import AtomGroup

LOGGER = logging.getLogger(__name__)


def _resids(atoms: "AtomGroup") -> np.ndarray:
    try:
        return np.asarray(atoms.resids)
    except NoDataError as e:
        raise EmptyInputError(
            "Could not split atoms based on residue number: atoms lack residue numbers."
        ) from e


def split_by_residue(atoms: "AtomGroup") -> list["AtomGroup"]:
    """Split an AtomGroup into one AtomGroup per residue number.

    Parameters
    ----------
    atoms : AtomGroup
        Atoms to split, e.g. all membrane lipid atoms.

    Returns
    -------
    list[AtomGroup]
        One group per distinct residue number, ordered by first appearance.
        Atoms within each group keep their order from ``atoms``.

    Raises
    ------
    EmptyInputError
        If ``atoms`` is empty or carries no residue numbers.
    """
    if len(atoms) == 0:
        raise EmptyInputError("Could not split atoms based on residue number: no atoms selected.")

    resids = _resids(atoms)

    # first-occurrence order of each residue number
    unique, first_index, inverse = np.unique(resids, return_index=True, return_inverse=True)
    order = np.argsort(first_index, kind="stable")

    residues = []
    for label in order:
        positions = np.flatnonzero(inverse == label)
        residues.append(atoms[positions])

    LOGGER.debug(f"Split {len(atoms)} atoms into {len(residues)} residues")
    return residues


def residue_names(atoms: "AtomGroup") -> list[str]:
    """Distinct residue names of ``atoms`` in order of first occurrence.

    Parameters
    ----------
    atoms : AtomGroup
        Atoms to inspect.

    Returns
    -------
    list[str]
        Residue names, each listed once.
    """
    return [str(name) for name in dict.fromkeys(atoms.resnames)]
