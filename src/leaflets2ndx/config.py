"""Run configuration for leaflet assignment.

Settings can come from command-line options, from a YAML file, or both
(command-line options override the file)::

    # leaflets.yaml
    structure: system.gro
    index: index.ndx
    output: leaflets.ndx
    membrane: "resname POPC POPE POPG"
    marker: "name PO4"
    axis: z
    include_empty: false

Relative paths in a YAML file are resolved against the directory that
contains it, and environment variables in paths are expanded.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Literal, Optional, Union

import yaml
from pydantic import BaseModel, Field, field_validator

PATH_KEYS = {"structure", "index", "output"}


class LeafletConfig(BaseModel):
    """Configuration for one leaflet assignment run.

    Attributes
    ----------
    structure : Path
        Structure file to read (GRO, PDB, ...)
    index : Path
        Index file with named groups; a missing file is ignored
    output : Path, optional
        Output index file; None writes to stdout
    membrane : str
        Index group name or MDAnalysis selection of membrane lipids
    marker : str
        Index group name or MDAnalysis selection of one head-group
        atom per lipid
    axis : {"x", "y", "z"}
        Axis normal to the membrane plane
    include_empty : bool
        Also write groups without atoms
    """

    structure: Path = Field(..., description="Structure file to read")
    index: Path = Field(Path("index.ndx"), description="Index file to read")
    output: Optional[Path] = Field(None, description="Output index file (stdout if unset)")
    membrane: str = Field("Membrane", description="Selection of membrane lipids")
    marker: str = Field("name PO4", description="Selection of lipid head identifiers")
    axis: Literal["x", "y", "z"] = Field("z", description="Membrane normal axis")
    include_empty: bool = Field(False, description="Also create empty index groups")

    model_config = {"extra": "forbid"}

    @field_validator("membrane", "marker")
    @classmethod
    def validate_query(cls, v: str) -> str:
        """Reject blank selection queries."""
        if not v.strip():
            raise ValueError("Selection query must not be empty")
        return v.strip()

    @field_validator("axis", mode="before")
    @classmethod
    def normalize_axis(cls, v: Any) -> Any:
        """Accept upper-case axis names."""
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @classmethod
    def from_yaml(cls, path: Union[str, Path], **overrides: Any) -> "LeafletConfig":
        """Load configuration from a YAML file.

        Parameters
        ----------
        path : str or Path
            YAML file to read.
        **overrides
            Values that replace those of the file. ``None`` values are
            ignored.

        Returns
        -------
        LeafletConfig
            Validated configuration.

        Raises
        ------
        FileNotFoundError
            If the file does not exist.
        yaml.YAMLError
            If the YAML is malformed.
        pydantic.ValidationError
            If the configuration is invalid.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ValueError(f"Expected a mapping at the top level of {path}")

        data = _expand_paths(data, path.parent.absolute())
        data.update({k: v for k, v in overrides.items() if v is not None})
        return cls.model_validate(data)


def _expand_paths(data: Dict[str, Any], base_path: Path) -> Dict[str, Any]:
    """Expand environment variables and resolve relative paths.

    Args:
        data: Configuration dictionary
        base_path: Directory containing the config file

    Returns:
        Configuration with expanded paths
    """
    expanded = dict(data)
    for key in PATH_KEYS:
        value = expanded.get(key)
        if isinstance(value, str):
            path = Path(os.path.expandvars(value))
            if not path.is_absolute():
                path = base_path / path
            expanded[key] = str(path)
    return expanded


def load_config(path: Union[str, Path]) -> LeafletConfig:
    """Load a LeafletConfig from a YAML file.

    Example:
        >>> config = load_config("leaflets.yaml")
        >>> print(config.marker)
        "name PO4"
    """
    return LeafletConfig.from_yaml(path)
