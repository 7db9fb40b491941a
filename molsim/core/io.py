"""Molecule collection IO (SDF / SMILES).

molsim compares two collections of molecules read from disk. This module owns:
- format detection, driven by the caller-declared format or the file extension,
- loading a file into an ordered, immutable `Collection`,
- canonical SMILES serialization used for report rows.

Parsing is delegated to RDKit suppliers. A record the supplier cannot parse is
dropped (parse-or-skip); the rest of the file still loads, in file order.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Iterator, Optional, Tuple, Union

from rdkit import Chem

from molsim.errors import FileAccessError, UnsupportedFormatError

LOGGER = logging.getLogger(__name__)


class MoleculeFormat(str, Enum):
    SDF = "sdf"
    SMILES = "smi"


_EXTENSIONS = {
    ".sdf": MoleculeFormat.SDF,
    ".smi": MoleculeFormat.SMILES,
}

_FORMAT_ALIASES = {
    "sdf": MoleculeFormat.SDF,
    "smi": MoleculeFormat.SMILES,
    "smiles": MoleculeFormat.SMILES,
}


@dataclass(frozen=True)
class Collection:
    """Ordered molecules loaded from a single file.

    Indices into `molecules` are the row/column indices used by the similarity
    matrix, so the tuple is never mutated after load.
    """

    label: str
    path: str
    fmt: MoleculeFormat
    molecules: Tuple[Chem.Mol, ...] = field(default_factory=tuple)
    n_skipped: int = 0

    def __len__(self) -> int:
        return len(self.molecules)

    def __iter__(self) -> Iterator[Chem.Mol]:
        return iter(self.molecules)

    def __getitem__(self, index: int) -> Chem.Mol:
        return self.molecules[index]

    @property
    def names(self) -> Tuple[str, ...]:
        """Record identifiers (`_Name`), falling back to `<label>:<index>`."""
        out = []
        for i, mol in enumerate(self.molecules):
            name = mol.GetProp("_Name").strip() if mol.HasProp("_Name") else ""
            out.append(name or f"{self.label}:{i}")
        return tuple(out)


def detect_molecule_format(
    path: Union[str, Path], fmt: Optional[Union[str, MoleculeFormat]] = None
) -> MoleculeFormat:
    """Detect the molecule file format.

    If fmt is provided it takes precedence; otherwise the extension decides.
    Content is never inspected.
    """

    if isinstance(fmt, MoleculeFormat):
        return fmt
    if fmt:
        f = _FORMAT_ALIASES.get(str(fmt).lower().lstrip("."))
        if f is None:
            raise UnsupportedFormatError(str(path), str(fmt))
        return f

    ext = Path(path).suffix.lower()
    if ext not in _EXTENSIONS:
        raise UnsupportedFormatError(str(path), ext or None)
    return _EXTENSIONS[ext]


def _check_readable(path: Path) -> None:
    if not path.exists():
        raise FileAccessError(f"File not found: {path}")
    if not path.is_file():
        raise FileAccessError(f"Not a regular file: {path}")
    if not os.access(path, os.R_OK):
        raise FileAccessError(f"File is not readable: {path}")


def _open_supplier(path: Path, fmt: MoleculeFormat) -> Any:
    if fmt is MoleculeFormat.SDF:
        return Chem.SDMolSupplier(str(path), sanitize=True, removeHs=False, strictParsing=False)
    # Tab-delimited, no header: SMILES in column 0, identifier in column 1.
    return Chem.SmilesMolSupplier(
        str(path),
        delimiter="\t",
        smilesColumn=0,
        nameColumn=1,
        titleLine=False,
        sanitize=True,
    )


def load_collection(
    path: Union[str, Path],
    fmt: Optional[Union[str, MoleculeFormat]] = None,
    *,
    logger: Optional[logging.Logger] = None,
) -> Collection:
    """Load a molecule file into a `Collection`.

    Parameters
    ----------
    path : str or Path
        SDF (`.sdf`) or tab-delimited SMILES (`.smi`) file
    fmt : str or MoleculeFormat, optional
        Declared format; overrides the extension when given
    logger : logging.Logger, optional
        Destination for load diagnostics (defaults to this module's logger)

    Returns
    -------
    Collection
        Successfully parsed records in file order

    Raises
    ------
    UnsupportedFormatError
        The declared format / extension is not SDF or SMILES
    FileAccessError
        The path is missing or unreadable
    """
    log = logger or LOGGER

    p = Path(path)
    f = detect_molecule_format(p, fmt)
    _check_readable(p)

    if p.stat().st_size == 0:
        log.warning("Empty molecule file: %s", p)
        return Collection(label=p.name, path=str(p), fmt=f)

    try:
        supplier = _open_supplier(p, f)
    except OSError as e:
        raise FileAccessError(f"Could not open {p}: {e}") from e

    molecules = []
    n_skipped = 0
    for record_index, mol in enumerate(supplier):
        if mol is None:
            n_skipped += 1
            log.debug("Skipping unparsable record %d in %s", record_index, p.name)
            continue
        molecules.append(mol)

    if n_skipped:
        log.warning("Skipped %d unparsable record(s) in %s", n_skipped, p)
    log.info("Loaded %d molecule(s) from %s", len(molecules), p)

    return Collection(
        label=p.name,
        path=str(p),
        fmt=f,
        molecules=tuple(molecules),
        n_skipped=n_skipped,
    )


def to_canonical_smiles(mol: Chem.Mol) -> str:
    """Canonical isomeric SMILES for a record."""
    return Chem.MolToSmiles(mol, canonical=True, isomericSmiles=True)
