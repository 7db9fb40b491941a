"""molsim - Similarity Module.

Fingerprint encoding + the Tanimoto metric + the dense similarity matrix and
its best-match reduction.
"""

from __future__ import annotations

from .fingerprints import (
    FINGERPRINT_TYPES,
    FingerprintAlgorithm,
    FingerprintSet,
    encode,
    get_fingerprint,
)
from .matrix import build_matrix
from .metrics import (
    SIMILARITY_METRICS,
    bulk_similarity,
    get_similarity_function,
    tanimoto_similarity,
)
from .search import BestMatch, reduce_best_matches

__all__ = [
    # fingerprints
    "FINGERPRINT_TYPES",
    "FingerprintAlgorithm",
    "FingerprintSet",
    "encode",
    "get_fingerprint",
    # metrics
    "SIMILARITY_METRICS",
    "tanimoto_similarity",
    "get_similarity_function",
    "bulk_similarity",
    # matrix + reduction
    "build_matrix",
    "BestMatch",
    "reduce_best_matches",
]
