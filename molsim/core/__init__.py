"""Shared utilities for molsim.

Molecule file IO, run metadata sidecars and CLI printing helpers.
"""

from __future__ import annotations

from .io import Collection, MoleculeFormat, detect_molecule_format, load_collection, to_canonical_smiles
from .metadata import metadata_sidecar_path, sha256_file, write_run_metadata
from .printing import print_banner, print_summary
