"""Assignment of membrane lipids to leaflets.

Every lipid residue is classified by the position of its single marker atom
(typically the head-group phosphate) relative to the geometric center of the
whole membrane, measured along one axis with the minimum image convention.
A positive displacement places the lipid in the upper leaflet; zero or
negative displacement places it in the lower leaflet.

Classified residues are collected into a fixed table of 2K groups, one
``lower`` and one ``upper`` group for each of the K lipid species, indexed
``2 * species_index + leaflet``.

Examples
--------
>>> from leaflets2ndx.core.leaflets import assign_leaflets
>>> membrane = universe.select_atoms("resname POPC POPE")
>>> markers = universe.select_atoms("name P")
>>> assignment = assign_leaflets(membrane, markers, universe.dimensions)
>>> for name, group in assignment.groups.named_groups():
...     print(name, len(group))
POPC_lower 6700
POPC_upper 6834
POPE_lower 1340
POPE_upper 1206
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import IntEnum
from typing import TYPE_CHECKING, Iterator

import numpy as np
from numpy.typing import NDArray

from leaflets2ndx.core.pbc import AXIS_INDEX, Axis, box_lengths, center_of_geometry, displacement_1d
from leaflets2ndx.core.residues import residue_names, split_by_residue
from leaflets2ndx.errors import (
    AmbiguousMarkerError,
    InternalConsistencyError,
    MissingMarkerError,
    UnknownSpeciesError,
)

if TYPE_CHECKING:
    from MDAnalysis.core.groups import AtomGroup
    from MDAnalysis.core.universe import Universe

LOGGER = logging.getLogger(__name__)


class Leaflet(IntEnum):
    """Membrane leaflet. The value is the leaflet bit of the group index."""

    LOWER = 0
    UPPER = 1

    @property
    def label(self) -> str:
        return self.name.lower()


@dataclass(frozen=True)
class ResidueAssignment:
    """Classification of a single lipid residue.

    Attributes
    ----------
    resid : int
        Residue number.
    resname : str
        Residue (species) name.
    marker : int
        1-based number of the marker atom.
    displacement : float
        Signed minimum-image displacement of the marker atom from the
        membrane center along the classification axis, in Angstroms.
    leaflet : Leaflet
        Assigned leaflet.
    """

    resid: int
    resname: str
    marker: int
    displacement: float
    leaflet: Leaflet


def classify_residue(
    residue: "AtomGroup",
    markers: "AtomGroup",
    center: NDArray[np.floating],
    box: NDArray[np.floating] | None = None,
    axis: Axis = "z",
) -> ResidueAssignment:
    """Assign one residue to a leaflet using its marker atom.

    Markers are counted as distinct atoms: an atom listed twice in an index
    group still counts once.

    Parameters
    ----------
    residue : AtomGroup
        Atoms of a single residue.
    markers : AtomGroup
        Marker atoms of the whole system; exactly one of them must belong
        to ``residue``.
    center : NDArray
        Membrane center [x, y, z] in Angstroms.
    box : NDArray, optional
        Box dimensions in MDAnalysis format.
    axis : {"x", "y", "z"}, optional
        Axis normal to the membrane plane. Default is "z".

    Returns
    -------
    ResidueAssignment
        The classification of the residue.

    Raises
    ------
    MissingMarkerError
        If the residue contains no marker atom.
    AmbiguousMarkerError
        If the residue contains more than one marker atom.
    """
    first = residue[0]
    resname, resid = str(first.resname), int(first.resid)

    marker = residue.intersection(markers)
    if len(marker) == 0:
        raise MissingMarkerError(resname, resid)
    if len(marker) > 1:
        raise AmbiguousMarkerError(resname, resid, len(marker))

    dim = AXIS_INDEX[axis]
    distance = displacement_1d(marker.positions[0, dim], center[dim], box_lengths(box)[dim])

    # 1 -> upper, 0 -> lower; a marker exactly at the center is lower
    leaflet = Leaflet.UPPER if distance > 0 else Leaflet.LOWER

    return ResidueAssignment(
        resid=resid,
        resname=resname,
        marker=int(marker[0].index) + 1,
        displacement=distance,
        leaflet=leaflet,
    )


class LeafletGroups:
    """Table of per-species, per-leaflet atom groups.

    The table always holds ``2 * len(species)`` groups. Group ``2 * i``
    collects lower-leaflet atoms of ``species[i]`` and group ``2 * i + 1``
    the upper-leaflet atoms.

    Parameters
    ----------
    universe : Universe
        Universe the grouped atoms belong to.
    species : list[str]
        Distinct residue names, in output order.
    """

    def __init__(self, universe: "Universe", species: list[str]) -> None:
        self.universe = universe
        self.species = list(species)
        self._species_index = {name: i for i, name in enumerate(self.species)}
        self._indices: list[list[int]] = [[] for _ in range(2 * len(self.species))]

    def __len__(self) -> int:
        return len(self._indices)

    def species_index(self, resname: str, resid: int | None = None) -> int:
        """Index of ``resname`` in the species list.

        Raises
        ------
        UnknownSpeciesError
            If ``resname`` is not a known species.
        """
        try:
            return self._species_index[resname]
        except KeyError:
            raise UnknownSpeciesError(resname, resid) from None

    def add(self, residue: "AtomGroup", leaflet: Leaflet) -> int:
        """Append all atoms of ``residue`` to its species/leaflet group.

        Returns
        -------
        int
            Index of the group the atoms were added to.
        """
        first = residue[0]
        index = 2 * self.species_index(str(first.resname), int(first.resid)) + int(leaflet)
        self._indices[index].extend(int(i) for i in residue.indices)
        return index

    def name(self, index: int) -> str:
        """Name of group ``index``, e.g. ``POPC_upper``.

        Raises
        ------
        InternalConsistencyError
            If ``index`` does not refer to a known species.
        """
        species_idx = index // 2
        if index < 0 or species_idx >= len(self.species):
            raise InternalConsistencyError(
                f"Reaching element of index {species_idx} in a list of "
                f"{len(self.species)} residue names."
            )
        return f"{self.species[species_idx]}_{Leaflet(index % 2).label}"

    def group(self, index: int) -> "AtomGroup":
        """Atoms of group ``index`` in insertion order."""
        return self.universe.atoms[np.asarray(self._indices[index], dtype=np.intp)]

    def named_groups(self) -> Iterator[tuple[str, "AtomGroup"]]:
        """Iterate over ``(name, atoms)`` for every group in table order."""
        for index in range(len(self)):
            yield self.name(index), self.group(index)


@dataclass
class LeafletAssignment:
    """Result of assigning a membrane to leaflets.

    Attributes
    ----------
    groups : LeafletGroups
        Per-species, per-leaflet atom groups.
    center : NDArray[np.float64]
        Membrane center [x, y, z] in Angstroms.
    axis : str
        Axis used for classification.
    residues : list[ResidueAssignment]
        Classification of every residue, in encounter order.
    """

    groups: LeafletGroups
    center: NDArray[np.float64]
    axis: str = "z"
    residues: list[ResidueAssignment] = field(default_factory=list)

    def count(self, leaflet: Leaflet) -> int:
        """Number of residues assigned to ``leaflet``."""
        return sum(1 for r in self.residues if r.leaflet == leaflet)


def assign_leaflets(
    membrane: "AtomGroup",
    markers: "AtomGroup",
    box: NDArray[np.floating] | None = None,
    axis: Axis = "z",
) -> LeafletAssignment:
    """Assign every lipid of a membrane to the upper or lower leaflet.

    Parameters
    ----------
    membrane : AtomGroup
        All atoms of the membrane lipids.
    markers : AtomGroup
        One marker atom per lipid (e.g. ``name PO4``).
    box : NDArray, optional
        Box dimensions in MDAnalysis format.
    axis : {"x", "y", "z"}, optional
        Axis normal to the membrane plane. Default is "z".

    Returns
    -------
    LeafletAssignment
        Groups, center and per-residue classification.

    Raises
    ------
    EmptyInputError
        If the membrane is empty or lacks residue numbers.
    MissingMarkerError, AmbiguousMarkerError
        If any residue does not hold exactly one marker atom. No partial
        result is returned.
    UnknownSpeciesError
        If a residue name is missing from the species list.
    """
    residues = split_by_residue(membrane)
    center = center_of_geometry(membrane.positions, box)
    LOGGER.info(
        f"Membrane center: [{center[0]:.3f}, {center[1]:.3f}, {center[2]:.3f}] "
        f"({len(residues)} residues)"
    )

    groups = LeafletGroups(membrane.universe, residue_names(membrane))
    assignment = LeafletAssignment(groups=groups, center=center, axis=axis)

    for residue in residues:
        record = classify_residue(residue, markers, center, box, axis)
        groups.add(residue, record.leaflet)
        assignment.residues.append(record)

    LOGGER.info(
        f"Assigned {assignment.count(Leaflet.UPPER)} lipids to the upper leaflet and "
        f"{assignment.count(Leaflet.LOWER)} to the lower leaflet"
    )
    return assignment
