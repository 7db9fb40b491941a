"""Dense query x database similarity matrix.

Every cell is computed exactly, one metric evaluation per cell: no pruning, no
early termination, no approximate neighbour index. Rows are filled one at a
time from the query fingerprints.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

import numpy as np
from tqdm import tqdm

from .metrics import MetricLike, bulk_similarity

LOGGER = logging.getLogger(__name__)


def build_matrix(
    query_fps: Sequence,
    db_fps: Sequence,
    metric: MetricLike = "tanimoto",
    *,
    show_progress: bool = False,
    logger: Optional[logging.Logger] = None,
) -> np.ndarray:
    """
    Compute the similarity matrix between two fingerprint sequences.

    Parameters
    ----------
    query_fps : FingerprintSet or sequence
        Row fingerprints
    db_fps : FingerprintSet or sequence
        Column fingerprints
    metric : str or callable
        Similarity metric name, or a callable (fp, fp) -> float in [0, 1]
    show_progress : bool
        Show a per-row progress bar

    Returns
    -------
    ndarray
        float64 matrix of shape (len(query_fps), len(db_fps)) where
        matrix[i, j] is the similarity between query i and database entry j.
        Either dimension may be zero.

    Raises
    ------
    ValueError
        The metric returned a value outside [0, 1] (or NaN).
    """
    log = logger or LOGGER

    rows = list(query_fps)
    cols = list(db_fps)
    n_rows, n_cols = len(rows), len(cols)

    matrix = np.zeros((n_rows, n_cols), dtype=np.float64)
    if n_rows == 0 or n_cols == 0:
        log.info("Similarity matrix is empty (%d x %d)", n_rows, n_cols)
        return matrix

    iterator = enumerate(rows)
    if show_progress:
        iterator = tqdm(iterator, total=n_rows, desc="Similarity matrix")

    for i, fp in iterator:
        row = bulk_similarity(fp, cols, metric=metric)
        bad = ~((row >= 0.0) & (row <= 1.0))
        if bad.any():
            j = int(np.flatnonzero(bad)[0])
            raise ValueError(
                f"Similarity metric returned {row[j]!r} for cell ({i}, {j}); "
                "expected a value in [0, 1]"
            )
        matrix[i, :] = row

    log.info("Computed %d x %d similarity matrix", n_rows, n_cols)
    return matrix
