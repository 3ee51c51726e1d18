"""Summary of a leaflet assignment run.

The summary is a small JSON-serializable record of what was assigned where,
useful for checking that both leaflets are populated as expected without
parsing the index file.
"""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Self

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from leaflets2ndx.core.leaflets import LeafletAssignment


class GroupSummary(BaseModel):
    """Atom and residue counts of one output group."""

    name: str
    n_atoms: int
    n_residues: int


class LeafletSummary(BaseModel):
    """Summary of one leaflet assignment.

    Attributes
    ----------
    center : list[float]
        Membrane center [x, y, z] in Angstroms.
    axis : str
        Axis used for classification.
    n_residues : int
        Number of classified lipids.
    n_upper, n_lower : int
        Number of lipids in each leaflet.
    groups : list[GroupSummary]
        Counts for every output group, in table order.
    """

    created_at: datetime = Field(default_factory=datetime.now)
    version: str = Field(default="unknown", description="leaflets2ndx version")
    structure: str = Field(default="", description="Structure file analysed")
    membrane_selection: str = ""
    marker_selection: str = ""

    center: list[float]
    axis: str
    n_residues: int
    n_upper: int
    n_lower: int
    groups: list[GroupSummary] = Field(default_factory=list)

    model_config = {"extra": "forbid"}

    @classmethod
    def from_assignment(cls, assignment: "LeafletAssignment", **metadata) -> "LeafletSummary":
        from leaflets2ndx import __version__
        from leaflets2ndx.core.leaflets import Leaflet

        groups = assignment.groups
        per_group_residues = [0] * len(groups)
        for record in assignment.residues:
            index = 2 * groups.species_index(record.resname, record.resid) + int(record.leaflet)
            per_group_residues[index] += 1

        return cls(
            version=__version__,
            center=[float(c) for c in assignment.center],
            axis=assignment.axis,
            n_residues=len(assignment.residues),
            n_upper=assignment.count(Leaflet.UPPER),
            n_lower=assignment.count(Leaflet.LOWER),
            groups=[
                GroupSummary(name=name, n_atoms=len(atoms), n_residues=per_group_residues[i])
                for i, (name, atoms) in enumerate(groups.named_groups())
            ],
            **metadata,
        )

    def summary(self) -> str:
        """Return a human-readable summary."""
        return (
            f"{self.n_residues} lipids: {self.n_upper} upper, {self.n_lower} lower "
            f"(center {self.axis} = {self.center['xyz'.index(self.axis)]:.3f} Å)"
        )

    def save(self, filepath: str | Path) -> Path:
        """Save summary to a JSON file, creating parent directories."""
        filepath = Path(filepath)
        filepath.parent.mkdir(parents=True, exist_ok=True)

        with open(filepath, "w") as f:
            json.dump(self.model_dump(mode="json"), f, indent=2, default=str)

        return filepath

    @classmethod
    def load(cls, filepath: str | Path) -> Self:
        """Load summary from a JSON file."""
        with open(filepath) as f:
            data = json.load(f)

        return cls.model_validate(data)
