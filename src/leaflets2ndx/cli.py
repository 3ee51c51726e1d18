"""
leaflets2ndx Command Line Interface.

Assigns membrane lipids to leaflets and writes one GROMACS index group per
lipid species and leaflet.

Usage:
    leaflets2ndx --help
    leaflets2ndx -c system.gro
    leaflets2ndx -c system.gro -n index.ndx -s Membrane -p "name PO4" -o index.ndx
    leaflets2ndx --config leaflets.yaml --empty
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import NoReturn, Optional

import click

from leaflets2ndx import __version__

LOGGER = logging.getLogger("leaflets2ndx")


def _fail(message: str, internal: bool = False) -> NoReturn:
    """Print an error message to stderr and exit with status 1."""
    if internal:
        click.echo(click.style(f"Internal error: {message}", fg="red"), err=True)
        click.echo("This should never happen. Please report this as a bug.", err=True)
    else:
        click.echo(click.style(f"Error: {message}", fg="red"), err=True)
    sys.exit(1)


def _build_config(config_file: Optional[str], **options):
    """Merge the optional YAML file with command-line options."""
    import yaml
    from pydantic import ValidationError

    from leaflets2ndx.config import LeafletConfig

    try:
        if config_file is not None:
            return LeafletConfig.from_yaml(config_file, **options)

        if options.get("structure") is None:
            _fail("Structure file must always be supplied (-c/--structure).")
        return LeafletConfig(**{k: v for k, v in options.items() if v is not None})
    except ValidationError as e:
        _fail(f"Invalid configuration:\n{e}")
    except yaml.YAMLError as e:
        _fail(f"Invalid configuration file: {e}")
    except (OSError, ValueError) as e:
        _fail(str(e))


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="leaflets2ndx")
@click.option(
    "-c",
    "--structure",
    type=click.Path(dir_okay=False),
    default=None,
    help="Structure file to read (e.g. system.gro). Required unless given in --config.",
)
@click.option(
    "-n",
    "--index",
    type=click.Path(dir_okay=False),
    default=None,
    help="Index file to read (optional, default: index.ndx).",
)
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False),
    default=None,
    help="Output index file; appended to if it exists (default: stdout).",
)
@click.option(
    "-s",
    "--selection",
    "membrane",
    default=None,
    help="Selection of membrane lipids (default: Membrane).",
)
@click.option(
    "-p",
    "--marker",
    default=None,
    help="Selection of lipid head identifiers, one per lipid (default: 'name PO4').",
)
@click.option(
    "--axis",
    type=click.Choice(["x", "y", "z"], case_sensitive=False),
    default=None,
    help="Axis normal to the membrane (default: z).",
)
@click.option(
    "-e",
    "--empty",
    "include_empty",
    is_flag=True,
    help="Also create empty index groups.",
)
@click.option(
    "--config",
    "config_file",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="YAML file with default settings; command-line options take precedence.",
)
@click.option(
    "--summary",
    "summary_file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Write a JSON summary of the assignment to this file.",
)
@click.option("-v", "--verbose", is_flag=True, help="Show progress messages.")
@click.option("--debug", is_flag=True, help="Enable DEBUG logging for troubleshooting.")
def main(
    structure: Optional[str],
    index: Optional[str],
    output: Optional[str],
    membrane: Optional[str],
    marker: Optional[str],
    axis: Optional[str],
    include_empty: bool,
    config_file: Optional[str],
    summary_file: Optional[str],
    verbose: bool,
    debug: bool,
) -> None:
    """Create index groups of membrane lipids split by leaflet.

    Every lipid selected by --selection is assigned to the upper or lower
    leaflet based on the position of its head identifier (--marker)
    relative to the membrane center. For each lipid species, groups
    RESNAME_lower and RESNAME_upper are written.

    \b
    Example:
        leaflets2ndx -c system.gro -n index.ndx -o index.ndx
        leaflets2ndx -c system.gro -s "resname POPC POPE" -p "name P"
    """
    from leaflets2ndx.core.logging_utils import setup_logging
    from leaflets2ndx.errors import InternalConsistencyError, LeafletError

    setup_logging(verbose=verbose, debug=debug)

    config = _build_config(
        config_file,
        structure=structure,
        index=index,
        output=output,
        membrane=membrane,
        marker=marker,
        axis=axis.lower() if axis else None,
        include_empty=include_empty or None,
    )

    try:
        _run(config, summary_file)
    except InternalConsistencyError as e:
        _fail(str(e), internal=True)
    except LeafletError as e:
        _fail(str(e))


def _run(config, summary_file: Optional[str] = None) -> None:
    """Execute one leaflet assignment run for a validated configuration."""
    from leaflets2ndx.core.leaflets import assign_leaflets
    from leaflets2ndx.core.selections import get_selection_diagnostics, smart_select
    from leaflets2ndx.io.ndx import open_output, read_ndx, write_leaflet_groups
    from leaflets2ndx.io.structure import load_structure
    from leaflets2ndx.results import LeafletSummary

    universe = load_structure(config.structure)
    ndx_groups = read_ndx(config.index, universe)

    membrane = smart_select(universe, config.membrane, ndx_groups)
    if len(membrane) == 0:
        diag = get_selection_diagnostics(universe, config.membrane, ndx_groups)
        _fail(f"No membrane lipids ('{config.membrane}') found.\n\n{diag}")

    markers = smart_select(universe, config.marker, ndx_groups)
    if len(markers) == 0:
        diag = get_selection_diagnostics(universe, config.marker, ndx_groups)
        _fail(f"No lipid head identifiers ('{config.marker}') found.\n\n{diag}")

    LOGGER.info(f"Selected {len(membrane)} membrane atoms and {len(markers)} marker atoms")

    assignment = assign_leaflets(membrane, markers, universe.dimensions, config.axis)

    try:
        with open_output(config.output) as stream:
            n_written = write_leaflet_groups(stream, assignment.groups, config.include_empty)
    except OSError as e:
        _fail(f"The output index file could not be opened: {e}")

    target = config.output if config.output is not None else "stdout"
    LOGGER.info(f"Wrote {n_written} index groups to {target}")

    summary = LeafletSummary.from_assignment(
        assignment,
        structure=str(config.structure),
        membrane_selection=config.membrane,
        marker_selection=config.marker,
    )
    LOGGER.info(summary.summary())
    if summary_file is not None:
        try:
            path = summary.save(Path(summary_file))
        except OSError as e:
            _fail(f"The summary file could not be written: {e}")
        LOGGER.info(f"Summary saved to {path}")


if __name__ == "__main__":
    main()
