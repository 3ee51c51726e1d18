"""Core leaflet assignment.

This module provides:
- Splitting of membrane atoms into residues
- Periodicity-aware membrane center and displacement
- Per-residue leaflet classification and group aggregation
- Selection queries with index-group support
"""

from leaflets2ndx.core.pbc import (
    AXIS_INDEX,
    Axis,
    box_lengths,
    center_of_geometry,
    displacement_1d,
    is_orthorhombic,
)
from leaflets2ndx.core.residues import (
    residue_names,
    split_by_residue,
)
from leaflets2ndx.core.leaflets import (
    Leaflet,
    LeafletAssignment,
    LeafletGroups,
    ResidueAssignment,
    assign_leaflets,
    classify_residue,
)
from leaflets2ndx.core.selections import (
    get_selection_diagnostics,
    smart_select,
)

__all__ = [
    # PBC utilities
    "AXIS_INDEX",
    "Axis",
    "box_lengths",
    "center_of_geometry",
    "displacement_1d",
    "is_orthorhombic",
    # Residues
    "residue_names",
    "split_by_residue",
    # Leaflets
    "Leaflet",
    "LeafletAssignment",
    "LeafletGroups",
    "ResidueAssignment",
    "assign_leaflets",
    "classify_residue",
    # Selections
    "get_selection_diagnostics",
    "smart_select",
]
