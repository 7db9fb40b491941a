"""
Tests for molsim.reporting.report (rendering + writing the best-match report).

Run with: pytest tests/test_report.py -v
"""

from __future__ import annotations

import pandas as pd
import pytest

rdkit = pytest.importorskip("rdkit")

from rdkit import Chem

from molsim.core.io import Collection, MoleculeFormat
from molsim.errors import OutputWriteError
from molsim.reporting import report as report_mod
from molsim.reporting.report import Report, ReportRow, render_report, write_report
from molsim.similarity.search import BestMatch


def _collection(smiles, label):
    mols = []
    for i, s in enumerate(smiles):
        mol = Chem.MolFromSmiles(s)
        mol.SetProp("_Name", f"{label.split('.')[0]}_{i}")
        mols.append(mol)
    return Collection(label=label, path=label, fmt=MoleculeFormat.SMILES, molecules=tuple(mols))


@pytest.fixture
def collections():
    query = _collection(["OCC", "C(C)C", "c1ccccc1"], "queries.smi")
    database = _collection(["CCO", "CCN"], "db.sdf")
    return query, database


class TestRender:
    def test_header_uses_collection_labels(self, collections):
        query, database = collections
        report = render_report([], query, database)

        assert report.header_line() == "queries.smi, db.sdf, similarity"
        assert report.lines() == ["queries.smi, db.sdf, similarity"]

    def test_explicit_labels(self, collections):
        query, database = collections
        report = render_report([], query, database, "q", "d")
        assert report.header_line() == "q, d, similarity"

    def test_rows_use_canonical_smiles(self, collections):
        query, database = collections
        report = render_report([BestMatch(0, 0, 1.0), BestMatch(1, 1, 0.25)], query, database)

        assert report.lines()[1:] == [
            "CCO, CCO, 1.0000",
            "CCC, CCN, 0.2500",
        ]

    def test_rows_follow_query_order_not_score(self, collections):
        query, database = collections
        matches = [BestMatch(2, 1, 0.9), BestMatch(0, 0, 0.1), BestMatch(1, 0, 0.5)]
        report = render_report(matches, query, database)

        assert [r.query_index for r in report.rows] == [0, 1, 2]
        assert [r.score for r in report.rows] == [0.1, 0.5, 0.9]

    def test_float_format(self, collections):
        query, database = collections
        report = render_report([BestMatch(0, 0, 1 / 3)], query, database, float_format="{:.2f}")
        assert report.lines()[1] == "CCO, CCO, 0.33"

    def test_to_dataframe(self, collections):
        query, database = collections
        df = render_report([BestMatch(0, 0, 1.0), BestMatch(2, 1, 0.0)], query, database).to_dataframe()

        assert isinstance(df, pd.DataFrame)
        assert list(df["Query_ID"]) == ["queries_0", "queries_2"]
        assert list(df["Database_ID"]) == ["db_0", "db_1"]
        assert list(df["Similarity"]) == [1.0, 0.0]

    def test_empty_report_dataframe_has_columns(self, collections):
        query, database = collections
        df = render_report([], query, database).to_dataframe()
        assert len(df) == 0
        assert "Query_SMILES" in df.columns


class TestWrite:
    def test_write_report(self, tmp_path):
        report = Report(
            query_label="a.smi",
            database_label="b.smi",
            rows=(ReportRow(0, "q0", "CCO", 1, "d1", "CCN", 0.5),),
        )
        out = write_report(report, tmp_path / "nested" / "best_matches.csv")

        assert out.read_text() == "a.smi, b.smi, similarity\nCCO, CCN, 0.5000\n"

    def test_header_only(self, tmp_path):
        out = write_report(Report("a.smi", "b.smi"), tmp_path / "best_matches.csv")
        assert out.read_text().splitlines() == ["a.smi, b.smi, similarity"]

    def test_unwritable_destination(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")

        with pytest.raises(OutputWriteError, match="Could not write report"):
            write_report(Report("a.smi", "b.smi"), blocker / "best_matches.csv")

    def test_failed_replace_keeps_previous_report(self, tmp_path, monkeypatch):
        out = tmp_path / "best_matches.csv"
        out.write_text("previous\n")

        def fail_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr(report_mod.os, "replace", fail_replace)

        with pytest.raises(OutputWriteError, match="disk full"):
            write_report(Report("a.smi", "b.smi"), out)
        assert out.read_text() == "previous\n"
        assert not (tmp_path / "best_matches.csv.tmp").exists()
