"""Shared fixtures: small SMILES / SDF molecule files written to tmp_path."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Tuple

import pytest


def write_smi(path: Path, records: Iterable[Tuple[str, str]]) -> Path:
    """Write a tab-delimited SMILES file (SMILES, name), no header."""
    path.write_text("".join(f"{smi}\t{name}\n" for smi, name in records))
    return path


def write_sdf(path: Path, records: Iterable[Tuple[str, str]]) -> Path:
    from rdkit import Chem

    writer = Chem.SDWriter(str(path))
    for smi, name in records:
        mol = Chem.MolFromSmiles(smi)
        mol.SetProp("_Name", name)
        writer.write(mol)
    writer.close()
    return path


@pytest.fixture
def query_smi(tmp_path: Path) -> Path:
    return write_smi(tmp_path / "queries.smi", [("CCO", "ethanol"), ("CCC", "propane")])


@pytest.fixture
def database_smi(tmp_path: Path) -> Path:
    return write_smi(tmp_path / "database.smi", [("CCO", "db_ethanol"), ("CCN", "db_ethylamine")])
