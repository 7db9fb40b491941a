"""
Similarity metric for molecular fingerprint comparison.

molsim scores every query/database pair with a single configured metric, the
Tanimoto coefficient on RDKit bit vectors.
"""

from typing import Callable, Sequence, Union

import numpy as np
from rdkit import DataStructs

SimilarityFunction = Callable[..., float]
MetricLike = Union[str, SimilarityFunction]


# Available similarity metrics
SIMILARITY_METRICS = {
    "tanimoto": "Tanimoto coefficient (Jaccard index) - most common for fingerprints",
}


def tanimoto_similarity(fp1, fp2) -> float:
    """
    Calculate Tanimoto coefficient (Jaccard index) between two fingerprints.

    Tc = c / (a + b - c)

    Where:
    - a = bits on in fp1
    - b = bits on in fp2
    - c = bits on in both

    Parameters
    ----------
    fp1, fp2 : ExplicitBitVect
        Molecular fingerprints to compare

    Returns
    -------
    float
        Tanimoto coefficient in range [0, 1]
    """
    return DataStructs.TanimotoSimilarity(fp1, fp2)


def get_similarity_function(metric: MetricLike) -> SimilarityFunction:
    """
    Get similarity function by name.

    Parameters
    ----------
    metric : str or callable
        Name of similarity metric; callables are returned unchanged

    Returns
    -------
    callable
        Similarity function
    """
    if callable(metric):
        return metric

    metric = metric.lower()

    functions = {
        "tanimoto": tanimoto_similarity,
    }

    if metric not in functions:
        raise ValueError(
            f"Unknown similarity metric: {metric}. "
            f"Available: {list(functions.keys())}"
        )

    return functions[metric]


def bulk_similarity(query_fp, target_fps: Sequence, metric: MetricLike = "tanimoto") -> np.ndarray:
    """
    Calculate similarity between a query and multiple targets.

    Parameters
    ----------
    query_fp : ExplicitBitVect
        Query fingerprint
    target_fps : sequence
        Target fingerprints
    metric : str or callable
        Similarity metric to use

    Returns
    -------
    ndarray
        float64 array of length len(target_fps)
    """
    sim_func = get_similarity_function(metric)
    targets = list(target_fps)

    if not targets:
        return np.zeros(0, dtype=np.float64)

    if sim_func is tanimoto_similarity:
        return np.asarray(DataStructs.BulkTanimotoSimilarity(query_fp, targets), dtype=np.float64)

    return np.array([sim_func(query_fp, fp) for fp in targets], dtype=np.float64)
