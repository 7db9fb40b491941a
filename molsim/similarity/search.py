"""
Best-match reduction over a similarity matrix.

For each query row the single highest-scoring database column is kept. Ties go
to the lowest column index, i.e. the first maximum met when scanning the row
left to right.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import numpy as np

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class BestMatch:
    """Best database entry for one query row."""

    query_index: int
    database_index: int
    score: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "Query_Index": self.query_index,
            "Database_Index": self.database_index,
            "Similarity": self.score,
        }


def reduce_best_matches(
    matrix: np.ndarray, *, logger: Optional[logging.Logger] = None
) -> List[BestMatch]:
    """
    Reduce a similarity matrix to one BestMatch per query row.

    Parameters
    ----------
    matrix : ndarray
        2D matrix of shape (n_query, n_database)

    Returns
    -------
    list of BestMatch
        In query-index order. Empty when the matrix has no columns: a query
        without database candidates gets no match (and no report row).

    Examples
    --------
    >>> reduce_best_matches(np.array([[0.2, 0.9, 0.9]]))
    [BestMatch(query_index=0, database_index=1, score=0.9)]
    """
    log = logger or LOGGER

    m = np.asarray(matrix, dtype=np.float64)
    if m.ndim != 2:
        raise ValueError(f"Similarity matrix must be 2D, got shape {m.shape}")

    n_rows, n_cols = m.shape
    if n_cols == 0:
        if n_rows:
            log.warning("Database is empty; no best match for %d query molecule(s)", n_rows)
        return []
    if np.isnan(m).any():
        raise ValueError("Similarity matrix contains NaN")

    # np.argmax returns the first occurrence of the maximum, i.e. the lowest column on ties.
    best_cols = np.argmax(m, axis=1)

    return [
        BestMatch(query_index=i, database_index=int(j), score=float(m[i, j]))
        for i, j in enumerate(best_cols)
    ]
