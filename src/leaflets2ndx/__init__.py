"""
leaflets2ndx: Assign membrane lipids to leaflets and write GROMACS index groups.

Every lipid of a membrane snapshot is classified into the upper or lower
leaflet using the position of a single head-group atom relative to the
periodicity-aware geometric center of the membrane. One index group per
lipid species and leaflet is produced (e.g. ``POPC_lower``, ``POPC_upper``).

Example usage:
    >>> from leaflets2ndx import load_structure, assign_leaflets
    >>> u = load_structure("system.gro")
    >>> membrane = u.select_atoms("resname POPC POPE")
    >>> markers = u.select_atoms("name PO4")
    >>> assignment = assign_leaflets(membrane, markers, u.dimensions)

Key modules:
    - core: Residue splitting, PBC geometry, leaflet classification
    - io: Structure loading and index file reading/writing
    - config: Run configuration with YAML support
    - cli: The ``leaflets2ndx`` command

Note:
    MDAnalysis is imported lazily, so ``leaflets2ndx.config`` and
    ``leaflets2ndx.errors`` can be used without loading it.
"""

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Configuration (lightweight, always available)
    "LeafletConfig",
    # Core (requires MDAnalysis - lazy loaded)
    "Leaflet",
    "assign_leaflets",
    "classify_residue",
    "split_by_residue",
    "center_of_geometry",
    # I/O
    "load_structure",
    "read_ndx",
    "write_leaflet_groups",
]


def __getattr__(name: str):
    """Lazy import modules only when accessed."""
    if name == "LeafletConfig":
        from leaflets2ndx.config import LeafletConfig

        return LeafletConfig

    if name in ("Leaflet", "assign_leaflets", "classify_residue"):
        from leaflets2ndx.core import leaflets

        return getattr(leaflets, name)

    if name == "split_by_residue":
        from leaflets2ndx.core.residues import split_by_residue

        return split_by_residue

    if name == "center_of_geometry":
        from leaflets2ndx.core.pbc import center_of_geometry

        return center_of_geometry

    if name == "load_structure":
        from leaflets2ndx.io.structure import load_structure

        return load_structure

    if name in ("read_ndx", "write_leaflet_groups"):
        from leaflets2ndx.io import ndx

        return getattr(ndx, name)

    raise AttributeError(f"module 'leaflets2ndx' has no attribute {name!r}")


def __dir__():
    """Return list of available attributes for tab completion."""
    return __all__
