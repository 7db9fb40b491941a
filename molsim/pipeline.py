"""Best-match similarity pipeline.

load query -> load database -> encode both -> build matrix -> reduce -> render -> write

Each stage runs to completion before the next one starts. Any error aborts the
run without leaving a report behind; there is no partial output.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

import numpy as np

from molsim.core.io import Collection, MoleculeFormat, load_collection
from molsim.core.metadata import describe_input, write_run_metadata
from molsim.errors import OutputWriteError
from molsim.reporting.report import DEFAULT_FLOAT_FORMAT, Report, render_report, write_report
from molsim.similarity.fingerprints import FingerprintAlgorithm, FingerprintSet, encode
from molsim.similarity.matrix import build_matrix
from molsim.similarity.metrics import get_similarity_function
from molsim.similarity.search import BestMatch, reduce_best_matches

LOGGER = logging.getLogger(__name__)

DEFAULT_OUTPUT = "best_matches.csv"


@dataclass
class PipelineConfig:
    input_path: Union[str, Path]
    database_path: Union[str, Path]
    output_path: Union[str, Path] = DEFAULT_OUTPUT
    input_format: Optional[Union[str, MoleculeFormat]] = None
    database_format: Optional[Union[str, MoleculeFormat]] = None
    algorithm: FingerprintAlgorithm = field(default_factory=FingerprintAlgorithm)
    metric: str = "tanimoto"
    float_format: str = DEFAULT_FLOAT_FORMAT
    write_metadata: bool = True
    show_progress: bool = False

    def parameters(self) -> dict:
        return {
            "fingerprint": self.algorithm.describe(),
            "metric": self.metric,
            "float_format": self.float_format,
        }


@dataclass
class PipelineResult:
    query: Collection
    database: Collection
    query_fps: FingerprintSet
    database_fps: FingerprintSet
    matrix: np.ndarray
    matches: List[BestMatch]
    report: Report
    output_path: Path
    metadata_path: Optional[Path] = None


def run_pipeline(config: PipelineConfig, *, logger: Optional[logging.Logger] = None) -> PipelineResult:
    """Run the full best-match search described by `config`.

    The query file is loaded (and its format checked) before the database file
    is touched.
    """
    log = logger or LOGGER

    # Validate the metric name up front so a bad value fails before any IO.
    get_similarity_function(config.metric)

    query = load_collection(config.input_path, config.input_format, logger=log)
    log.info("Number of molecules in the input file: %d", len(query))

    database = load_collection(config.database_path, config.database_format, logger=log)
    log.info("Number of molecules in the database file: %d", len(database))

    query_fps = encode(query, config.algorithm, show_progress=config.show_progress, logger=log)
    database_fps = encode(database, config.algorithm, show_progress=config.show_progress, logger=log)

    matrix = build_matrix(
        query_fps,
        database_fps,
        config.metric,
        show_progress=config.show_progress,
        logger=log,
    )
    matches = reduce_best_matches(matrix, logger=log)

    report = render_report(matches, query, database, float_format=config.float_format)
    output_path = write_report(report, config.output_path)
    log.info("Wrote %d best match(es) to %s", len(report), output_path)

    metadata_path = None
    if config.write_metadata:
        try:
            metadata_path = write_run_metadata(
                tool="molsim",
                output_path=output_path,
                inputs={
                    "query": describe_input(query.path, n_molecules=len(query), n_skipped=query.n_skipped),
                    "database": describe_input(
                        database.path, n_molecules=len(database), n_skipped=database.n_skipped
                    ),
                },
                parameters=config.parameters(),
                n_rows=len(report),
            )
        except OutputWriteError:
            # A failed run leaves no report.
            output_path.unlink(missing_ok=True)
            raise
        log.debug("Wrote run metadata to %s", metadata_path)

    return PipelineResult(
        query=query,
        database=database,
        query_fps=query_fps,
        database_fps=database_fps,
        matrix=matrix,
        matches=matches,
        report=report,
        output_path=output_path,
        metadata_path=metadata_path,
    )
