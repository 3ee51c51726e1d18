"""Atom selection queries with index-group support.

Queries are resolved in two steps:

1. A query that is exactly the name of a group from the index file returns
   that group (e.g. ``"Membrane"``).
2. Anything else is evaluated as an MDAnalysis selection string. Index
   groups can be referenced inside it with the ``group`` keyword:
   ``"group Membrane and name PO4"``.

An unparseable query raises :class:`~leaflets2ndx.errors.SelectionQueryError`;
a valid query that matches nothing returns an empty AtomGroup, leaving the
caller to decide whether that is fatal.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Mapping, Optional

from MDAnalysis.exceptions import SelectionError

from leaflets2ndx.errors import SelectionQueryError

if TYPE_CHECKING:
    from MDAnalysis import Universe
    from MDAnalysis.core.groups import AtomGroup

LOGGER = logging.getLogger(__name__)


def smart_select(
    universe: "Universe",
    query: str,
    groups: Optional[Mapping[str, "AtomGroup"]] = None,
) -> "AtomGroup":
    """Select atoms by index-group name or MDAnalysis selection string.

    Parameters
    ----------
    universe : Universe
        MDAnalysis Universe
    query : str
        Group name or selection string
    groups : Mapping[str, AtomGroup], optional
        Named groups read from an index file

    Returns
    -------
    AtomGroup
        Selected atoms (possibly empty)

    Raises
    ------
    SelectionQueryError
        If the query cannot be parsed
    """
    groups = dict(groups or {})
    query = query.strip()

    if query in groups:
        LOGGER.debug(f"Query '{query}' resolved to index group ({len(groups[query])} atoms)")
        return groups[query]

    try:
        atoms = universe.select_atoms(query, **groups)
    except (SelectionError, ValueError, KeyError) as e:
        raise SelectionQueryError(query, str(e)) from e

    LOGGER.debug(f"Query '{query}' selected {len(atoms)} atoms")
    return atoms


def get_selection_diagnostics(
    universe: "Universe",
    query: str,
    groups: Optional[Mapping[str, "AtomGroup"]] = None,
) -> str:
    """Generate diagnostic info for a selection that matched no atoms.

    Parameters
    ----------
    universe : Universe
        MDAnalysis Universe
    query : str
        The selection query that failed
    groups : Mapping[str, AtomGroup], optional
        Named groups read from an index file

    Returns
    -------
    str
        Formatted diagnostic message with suggestions

    Examples
    --------
    >>> print(get_selection_diagnostics(u, "name P8"))
    Diagnostic info:
      - Residue names in structure: POPC, POPE, W
      - Atom names in structure: C1A, D2A, GL1, GL2, NC3, PO4, W
    """
    lines = []

    resnames = list(dict.fromkeys(str(r) for r in universe.residues.resnames))
    lines.append(f"Residue names in structure: {', '.join(resnames[:20])}")
    if len(resnames) > 20:
        lines[-1] += f" (+{len(resnames) - 20} more)"

    names = sorted(set(str(n) for n in universe.atoms.names))
    if len(names) <= 30:
        lines.append(f"Atom names in structure: {', '.join(names)}")

    if groups:
        lines.append(f"Index groups: {', '.join(groups)}")
    else:
        lines.append("No index groups loaded; group names cannot be used as queries")

    return format_diagnostic_message(lines)


def format_diagnostic_message(lines: list[str], header: str = "Diagnostic info:") -> str:
    """Format diagnostic lines into a readable message.

    Parameters
    ----------
    lines : list[str]
        Individual diagnostic lines
    header : str
        Header text for the diagnostic block

    Returns
    -------
    str
        Formatted diagnostic message
    """
    if not lines:
        return ""
    return f"{header}\n  - " + "\n  - ".join(lines)
