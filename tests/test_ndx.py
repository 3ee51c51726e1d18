"""Tests for GROMACS index file I/O (leaflets2ndx.io.ndx)."""

from __future__ import annotations

import io
from pathlib import Path

import MDAnalysis as mda
import pytest

from conftest import make_universe
from leaflets2ndx.core.leaflets import Leaflet, LeafletGroups, assign_leaflets
from leaflets2ndx.core.residues import split_by_residue
from leaflets2ndx.errors import IndexFileError
from leaflets2ndx.io.ndx import (
    open_output,
    parse_ndx,
    read_ndx,
    write_leaflet_groups,
    write_ndx_group,
)


@pytest.fixture
def chain20() -> mda.Universe:
    """Twenty single-atom residues."""
    return make_universe([("W", i + 1, [("W", float(i % 10))]) for i in range(20)])


# ---------------------------------------------------------------------------
# Writing
# ---------------------------------------------------------------------------


class TestWriteNdxGroup:
    def test_fifteen_numbers_per_line(self, chain20):
        stream = io.StringIO()
        write_ndx_group(stream, "Water", chain20.atoms[:16])
        lines = stream.getvalue().splitlines()
        assert lines[0] == "[ Water ]"
        assert lines[1] == "".join(f"{n:4d} " for n in range(1, 16))
        assert lines[2] == "  16 "
        assert len(lines) == 3

    def test_exactly_fifteen_atoms_single_line(self, chain20):
        stream = io.StringIO()
        write_ndx_group(stream, "Water", chain20.atoms[:15])
        assert stream.getvalue().count("\n") == 2

    def test_numbers_are_one_based_and_keep_group_order(self, chain20):
        stream = io.StringIO()
        write_ndx_group(stream, "Some", chain20.atoms[[4, 0, 12]])
        assert stream.getvalue() == "[ Some ]\n   5    1   13 \n"

    def test_empty_group_header_only(self, chain20):
        stream = io.StringIO()
        write_ndx_group(stream, "Nothing", chain20.select_atoms("name XYZ"))
        assert stream.getvalue() == "[ Nothing ]\n"


class TestWriteLeafletGroups:
    @pytest.fixture
    def groups(self, bilayer) -> LeafletGroups:
        """A only in the lower leaflet, B only in the upper leaflet."""
        groups = LeafletGroups(bilayer, ["A", "B"])
        residues = split_by_residue(bilayer.atoms)
        groups.add(residues[0], Leaflet.LOWER)
        groups.add(residues[3], Leaflet.UPPER)
        return groups

    def test_skips_empty_groups_by_default(self, groups):
        stream = io.StringIO()
        assert write_leaflet_groups(stream, groups) == 2
        assert stream.getvalue() == "[ A_lower ]\n   1    2    3 \n[ B_upper ]\n  10   11   12 \n"

    def test_include_empty_writes_every_group(self, groups):
        stream = io.StringIO()
        assert write_leaflet_groups(stream, groups, include_empty=True) == 4
        assert stream.getvalue() == (
            "[ A_lower ]\n   1    2    3 \n"
            "[ A_upper ]\n"
            "[ B_lower ]\n"
            "[ B_upper ]\n  10   11   12 \n"
        )

    def test_bilayer_output(self, bilayer):
        assignment = assign_leaflets(
            bilayer.atoms, bilayer.select_atoms("name PO4"), bilayer.dimensions
        )
        stream = io.StringIO()
        write_leaflet_groups(stream, assignment.groups)
        assert stream.getvalue() == (
            "[ A_lower ]\n   1    2    3 \n"
            "[ A_upper ]\n   4    5    6 \n"
            "[ B_lower ]\n   7    8    9 \n"
            "[ B_upper ]\n  10   11   12 \n"
        )


# ---------------------------------------------------------------------------
# Reading
# ---------------------------------------------------------------------------


class TestParseNdx:
    def test_groups_and_order(self):
        text = "[ System ]\n1 2 3\n4\n\n[Membrane]\n 3  1 ; comment\n"
        groups = parse_ndx(io.StringIO(text))
        assert list(groups) == ["System", "Membrane"]
        assert groups["System"] == [1, 2, 3, 4]
        assert groups["Membrane"] == [3, 1]

    def test_group_names_with_spaces(self):
        groups = parse_ndx(io.StringIO("[ Lipid heads ]\n1\n"))
        assert groups == {"Lipid heads": [1]}

    def test_empty_group(self):
        assert parse_ndx(io.StringIO("[ Empty ]\n[ Next ]\n2\n")) == {"Empty": [], "Next": [2]}

    def test_numbers_before_header(self):
        with pytest.raises(IndexFileError, match="before any group header"):
            parse_ndx(io.StringIO("1 2 3\n[ System ]\n"))

    def test_non_numeric_entry(self):
        with pytest.raises(IndexFileError, match="Line 2"):
            parse_ndx(io.StringIO("[ System ]\n1 two 3\n"))

    def test_zero_is_rejected(self):
        with pytest.raises(IndexFileError):
            parse_ndx(io.StringIO("[ System ]\n0 1\n"))


class TestReadNdx:
    def test_groups_as_atomgroups(self, bilayer, tmp_path: Path):
        path = tmp_path / "index.ndx"
        path.write_text("[ Heads ]\n10 1 4 7\n")
        groups = read_ndx(path, bilayer)
        assert list(groups["Heads"].indices) == [9, 0, 3, 6]

    def test_missing_file_is_not_an_error(self, bilayer, tmp_path: Path):
        assert read_ndx(tmp_path / "missing.ndx", bilayer) == {}

    def test_atom_beyond_structure(self, bilayer, tmp_path: Path):
        path = tmp_path / "index.ndx"
        path.write_text("[ Too_far ]\n1 13\n")
        with pytest.raises(IndexFileError, match="atom 13"):
            read_ndx(path, bilayer)

    def test_round_trip_through_writer(self, bilayer, tmp_path: Path):
        path = tmp_path / "index.ndx"
        with open(path, "w") as f:
            write_ndx_group(f, "Membrane", bilayer.atoms)
        groups = read_ndx(path, bilayer)
        assert list(groups["Membrane"].indices) == list(range(12))


# ---------------------------------------------------------------------------
# Output target
# ---------------------------------------------------------------------------


class TestOpenOutput:
    def test_creates_new_file(self, tmp_path: Path):
        path = tmp_path / "out.ndx"
        with open_output(path) as f:
            f.write("[ A ]\n")
        assert path.read_text() == "[ A ]\n"

    def test_appends_to_existing_file(self, tmp_path: Path):
        path = tmp_path / "index.ndx"
        path.write_text("[ System ]\n   1 \n")
        with open_output(path) as f:
            f.write("[ A ]\n")
        assert path.read_text() == "[ System ]\n   1 \n[ A ]\n"

    def test_stdout_when_no_path(self, capsys):
        with open_output(None) as f:
            f.write("[ A ]\n")
        assert capsys.readouterr().out == "[ A ]\n"
