"""Exception types raised by leaflets2ndx.

All errors abort the current run. Errors deriving from
:class:`InternalConsistencyError` indicate a bug in leaflets2ndx rather than
bad input data and are reported as such by the command-line interface.
"""

from __future__ import annotations


class LeafletError(Exception):
    """Base exception for all leaflets2ndx failures."""

    pass


class EmptyInputError(LeafletError):
    """Raised when there are no atoms to partition or center."""

    pass


class MarkerError(LeafletError):
    """Raised when a residue does not contain exactly one marker atom.

    Attributes
    ----------
    resname : str
        Residue name of the offending lipid.
    resid : int
        Residue number of the offending lipid.
    n_markers : int
        Number of marker atoms found in the residue.
    """

    def __init__(self, resname: str, resid: int, n_markers: int, message: str) -> None:
        super().__init__(message)
        self.resname = resname
        self.resid = resid
        self.n_markers = n_markers


class MissingMarkerError(MarkerError):
    """Raised when a residue contains no marker atom."""

    def __init__(self, resname: str, resid: int) -> None:
        super().__init__(
            resname,
            resid,
            0,
            f"No marker atom detected for lipid {resname} (resid {resid}).",
        )


class AmbiguousMarkerError(MarkerError):
    """Raised when a residue contains more than one marker atom."""

    def __init__(self, resname: str, resid: int, n_markers: int) -> None:
        super().__init__(
            resname,
            resid,
            n_markers,
            f"Multiple marker atoms ({n_markers}) detected for lipid {resname} (resid {resid}).",
        )


class InternalConsistencyError(LeafletError):
    """Raised when an internal invariant is violated. This should never happen."""

    pass


class UnknownSpeciesError(InternalConsistencyError):
    """Raised when a residue name is missing from the list of detected species."""

    def __init__(self, resname: str, resid: int | None = None) -> None:
        where = f" of resid {resid}" if resid is not None else ""
        super().__init__(
            f"Inconsistency in residue names. Residue name {resname}{where} "
            "was not found in the list of detected residue names."
        )
        self.resname = resname
        self.resid = resid


class InputFileError(LeafletError):
    """Raised when an input file or query cannot be used."""

    pass


class StructureIOError(InputFileError):
    """Raised when the structure file cannot be read."""

    pass


class IndexFileError(InputFileError):
    """Raised when an index file is malformed."""

    pass


class SelectionQueryError(InputFileError):
    """Raised when a selection query cannot be understood."""

    def __init__(self, query: str, reason: str | None = None) -> None:
        message = f"Could not understand the selection query '{query}'."
        if reason:
            message += f" {reason}"
        super().__init__(message)
        self.query = query
