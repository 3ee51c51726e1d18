"""Periodic boundary condition (PBC) utilities.

This module provides the periodicity-aware geometry used for leaflet
assignment: a geometric center that does not depend on which periodic image
of the system was stored, and a signed minimum-image displacement along a
single axis.

Supported Box Types
-------------------
- **Orthorhombic boxes** (cubic, rectangular): Fully supported
- **Triclinic boxes**: Only the three edge lengths are used; a warning is
  logged once per session.
- **No box** (e.g. PDB without CRYST1) or zero-length edges: the affected
  axes are treated as non-periodic.

Usage
-----
>>> from leaflets2ndx.core.pbc import center_of_geometry, displacement_1d
>>>
>>> box = np.array([100.0, 100.0, 100.0, 90.0, 90.0, 90.0])
>>> positions = np.array([[50.0, 50.0, 99.0], [50.0, 50.0, 1.0]])
>>> center_of_geometry(positions, box)  # straddles the boundary in z
array([50., 50., 0.])
>>> displacement_1d(99.0, 1.0, 100.0)
-2.0

References
----------
- Bai, L. & Breen, D. "Calculating Center of Mass in an Unbounded 2D
  Environment", Journal of Graphics Tools 13 (2008)
- Allen & Tildesley, "Computer Simulation of Liquids", Chapter 1.5
"""

from __future__ import annotations

import logging
import warnings
from typing import Literal

import numpy as np
from numpy.typing import NDArray

from leaflets2ndx.errors import EmptyInputError

LOGGER = logging.getLogger(__name__)

Axis = Literal["x", "y", "z"]

AXIS_INDEX: dict[str, int] = {"x": 0, "y": 1, "z": 2}

# Track whether we've warned about triclinic boxes (warn once)
_TRICLINIC_WARNING_ISSUED = False


def is_orthorhombic(box: NDArray[np.floating] | None) -> bool:
    """Check if box is orthorhombic (all angles approximately 90°).

    Parameters
    ----------
    box : NDArray
        Box dimensions in MDAnalysis format: [Lx, Ly, Lz, alpha, beta, gamma]
        or just lengths [Lx, Ly, Lz].

    Returns
    -------
    bool
        True if box is orthorhombic (angles within 0.01° of 90°).
    """
    if box is None:
        return False

    # If only lengths provided, assume orthorhombic
    if len(box) == 3:
        return True

    if len(box) >= 6:
        alpha, beta, gamma = box[3:6]
        return all(abs(angle - 90.0) < 0.01 for angle in [alpha, beta, gamma])

    return False


def box_lengths(box: NDArray[np.floating] | None) -> NDArray[np.float64]:
    """Return the three box edge lengths, zero for non-periodic axes.

    Parameters
    ----------
    box : NDArray or None
        Box dimensions in MDAnalysis format, or None if the structure
        carries no box.

    Returns
    -------
    NDArray[np.float64]
        Edge lengths [Lx, Ly, Lz] in Angstroms.
    """
    global _TRICLINIC_WARNING_ISSUED

    if box is None:
        return np.zeros(3, dtype=np.float64)

    box = np.asarray(box, dtype=np.float64)
    if not is_orthorhombic(box) and not _TRICLINIC_WARNING_ISSUED:
        warnings.warn(
            "Triclinic box detected. Only the box edge lengths are used for "
            "periodic wrapping. This warning is shown once per session.",
            UserWarning,
            stacklevel=2,
        )
        LOGGER.warning(
            "Triclinic box detected (angles: %.1f, %.1f, %.1f). Using edge lengths only.",
            box[3],
            box[4],
            box[5],
        )
        _TRICLINIC_WARNING_ISSUED = True

    lengths = np.nan_to_num(box[:3], nan=0.0)
    return np.where(lengths > 0.0, lengths, 0.0)


def center_of_geometry(
    positions: NDArray[np.floating],
    box: NDArray[np.floating] | None = None,
) -> NDArray[np.float64]:
    """Calculate the periodicity-aware geometric center of a set of positions.

    Along every periodic axis, coordinates are mapped onto a circle of
    circumference L and averaged as unit vectors (Bai & Breen). The mean angle
    is mapped back into [0, L). Along non-periodic axes, the arithmetic mean
    is used.

    Parameters
    ----------
    positions : NDArray
        Atom positions of shape (N, 3) in Angstroms.
    box : NDArray, optional
        Box dimensions in MDAnalysis format. If None, no PBC correction
        is applied.

    Returns
    -------
    NDArray[np.float64]
        Center [x, y, z] in Angstroms.

    Raises
    ------
    EmptyInputError
        If no positions are given.

    Notes
    -----
    The result is unchanged when any atom is shifted by a box vector and
    when the positions are reordered.
    """
    positions = np.asarray(positions, dtype=np.float64).reshape(-1, 3)
    if len(positions) == 0:
        raise EmptyInputError("Cannot calculate center of geometry of an empty selection.")

    lengths = box_lengths(box)
    center = positions.mean(axis=0)

    for dim in range(3):
        length = lengths[dim]
        if length == 0.0:
            continue

        theta = positions[:, dim] / length * 2.0 * np.pi
        xi = np.cos(theta).mean()
        zeta = np.sin(theta).mean()
        theta_mean = np.arctan2(-zeta, -xi) + np.pi
        center[dim] = np.mod(length * theta_mean / (2.0 * np.pi), length)

    return center


def displacement_1d(
    position: float,
    reference: float,
    length: float = 0.0,
) -> float:
    """Signed minimum-image displacement of ``position`` from ``reference``.

    Parameters
    ----------
    position, reference : float
        Coordinates along one axis in Angstroms.
    length : float, optional
        Box edge length along that axis. Zero disables wrapping.

    Returns
    -------
    float
        ``position - reference`` folded into [-L/2, L/2].

    Examples
    --------
    >>> displacement_1d(9.0, 1.0, 10.0)
    -2.0
    >>> displacement_1d(9.0, 1.0)
    8.0
    """
    diff = float(position) - float(reference)
    if length > 0.0:
        diff -= length * np.round(diff / length)
    return float(diff)


def reset_triclinic_warning() -> None:
    """Reset the triclinic warning flag.

    This is primarily useful for testing. In production, the warning
    should only be shown once per session.
    """
    global _TRICLINIC_WARNING_ISSUED
    _TRICLINIC_WARNING_ISSUED = False
