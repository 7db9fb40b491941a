"""Run metadata helpers.

Every run that writes a best-match report also writes a small, machine-readable
metadata JSON artifact capturing provenance (input hashes, parameters, versions).

Convention:
- for a report path like `best_matches.csv`, the sidecar is written next to it
  as `best_matches.metadata.json`.
"""

from __future__ import annotations

import hashlib
import json
import os
import sys
from datetime import datetime
from importlib import metadata as importlib_metadata
from pathlib import Path
from typing import Any, Dict, Optional

from molsim.errors import OutputWriteError


def get_molsim_version() -> str:
    """Return installed package version if available, else 'unknown'."""

    try:
        return importlib_metadata.version("molsim")
    except importlib_metadata.PackageNotFoundError:
        return "unknown"


def get_rdkit_version() -> str:
    from rdkit import rdBase

    return str(getattr(rdBase, "rdkitVersion", "unknown"))


def sha256_file(path: Path, *, max_bytes: int = 200 * 1024 * 1024) -> Optional[str]:
    """Compute SHA256 for a file, returning None if too large or unreadable."""

    try:
        if path.stat().st_size > max_bytes:
            return None
        h = hashlib.sha256()
        with path.open("rb") as f:
            for chunk in iter(lambda: f.read(1024 * 1024), b""):
                h.update(chunk)
        return h.hexdigest()
    except OSError:
        return None


def metadata_sidecar_path(output_path: str | Path) -> Path:
    p = Path(output_path)
    return p.with_name(f"{p.stem}.metadata.json")


def describe_input(path: str | Path, *, n_molecules: int, n_skipped: int) -> Dict[str, Any]:
    p = Path(path)
    return {
        "path": str(p.resolve()),
        "name": p.name,
        "sha256": sha256_file(p),
        "size_bytes": int(p.stat().st_size) if p.exists() else None,
        "n_molecules": int(n_molecules),
        "n_skipped": int(n_skipped),
    }


def write_run_metadata(
    *,
    tool: str,
    output_path: str | Path,
    inputs: Dict[str, Dict[str, Any]],
    parameters: Optional[Dict[str, Any]] = None,
    n_rows: Optional[int] = None,
) -> Path:
    """Write a standardized run metadata JSON sidecar.

    Called after the report itself has been written.
    """

    out_p = Path(output_path)

    payload: Dict[str, Any] = {
        "tool": str(tool),
        "created_at": datetime.now().isoformat(timespec="seconds"),
        "cwd": os.getcwd(),
        "argv": list(sys.argv),
        "versions": {
            "molsim": get_molsim_version(),
            "python": sys.version.split()[0],
            "rdkit": get_rdkit_version(),
        },
        "inputs": inputs,
        "output": {
            "path": str(out_p.resolve()),
            "name": out_p.name,
            "n_rows": n_rows,
            "size_bytes": int(out_p.stat().st_size) if out_p.exists() else None,
        },
        "parameters": parameters or {},
    }

    sidecar = metadata_sidecar_path(out_p)
    try:
        sidecar.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
    except OSError as e:
        raise OutputWriteError(f"Could not write run metadata to {sidecar}: {e}") from e
    return sidecar
