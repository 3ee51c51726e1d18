"""Shared fixtures: small synthetic membranes built without any input files."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence

import MDAnalysis as mda
import numpy as np
import pytest

# (resname, resid, [(atom name, z), ...]); x and y are fixed at 5.0
Lipid = tuple[str, int, Sequence[tuple[str, float]]]

# Four lipids of two species in a 10 x 10 x 10 box; membrane center at z = 5.
# Head groups (PO4) at z = 2, 8, 1, 9 for A1, A2, B1, B2.
BILAYER: list[Lipid] = [
    ("A", 1, [("PO4", 2.0), ("C1", 3.0), ("C2", 4.0)]),
    ("A", 2, [("PO4", 8.0), ("C1", 7.0), ("C2", 6.0)]),
    ("B", 3, [("PO4", 1.0), ("C1", 3.0), ("C2", 4.0)]),
    ("B", 4, [("PO4", 9.0), ("C1", 7.0), ("C2", 6.0)]),
]

BOX = (10.0, 10.0, 10.0)


def make_universe(
    lipids: Sequence[Lipid],
    box: Optional[Sequence[float]] = BOX,
) -> mda.Universe:
    """Build a Universe with one residue per lipid, atoms in listed order."""
    names, resindex, zs = [], [], []
    for i, (_, _, atoms) in enumerate(lipids):
        for name, z in atoms:
            names.append(name)
            resindex.append(i)
            zs.append(z)

    u = mda.Universe.empty(
        len(names),
        n_residues=len(lipids),
        atom_resindex=resindex,
        trajectory=True,
    )
    u.add_TopologyAttr("name", names)
    u.add_TopologyAttr("resname", [lipid[0] for lipid in lipids])
    u.add_TopologyAttr("resid", [lipid[1] for lipid in lipids])

    positions = np.full((len(names), 3), 5.0)
    positions[:, 2] = zs
    u.atoms.positions = positions

    if box is not None:
        u.dimensions = [*box, 90.0, 90.0, 90.0]
    return u


def write_gro(path: Path, lipids: Sequence[Lipid], box: Sequence[float] = BOX) -> Path:
    """Write lipids to a GRO file. Coordinates are taken as nanometres."""
    lines = ["synthetic bilayer", f"{sum(len(atoms) for _, _, atoms in lipids):5d}"]
    number = 1
    for resname, resid, atoms in lipids:
        for name, z in atoms:
            lines.append(
                f"{resid:5d}{resname:<5s}{name:>5s}{number:5d}{0.5:8.3f}{0.5:8.3f}{z:8.3f}"
            )
            number += 1
    lines.append("".join(f"{length:10.5f}" for length in box))
    path.write_text("\n".join(lines) + "\n")
    return path


@pytest.fixture
def bilayer() -> mda.Universe:
    return make_universe(BILAYER)


@pytest.fixture
def bilayer_gro(tmp_path: Path) -> Path:
    return write_gro(tmp_path / "system.gro", BILAYER)
