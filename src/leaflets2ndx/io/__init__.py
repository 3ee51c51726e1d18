"""Structure loading and GROMACS index file I/O."""

from leaflets2ndx.io.ndx import (
    open_output,
    parse_ndx,
    read_ndx,
    write_leaflet_groups,
    write_ndx_group,
)
from leaflets2ndx.io.structure import load_structure

__all__ = [
    "load_structure",
    "open_output",
    "parse_ndx",
    "read_ndx",
    "write_leaflet_groups",
    "write_ndx_group",
]
