"""molsim (importable package).

Batch best-match similarity search: for every query molecule, report the most
similar molecule of a reference database by fingerprint Tanimoto similarity.

Importing `molsim` itself is cheap; RDKit is loaded by the subpackages that
need it.
"""

from __future__ import annotations

__version__ = "0.1.0"
