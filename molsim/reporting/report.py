"""Best-match report rendering and writing.

Output format (one header line, then one line per query with a match):

    <query_label>, <database_label>, similarity
    <query_smiles>, <database_smiles>, <score>

Rows follow query-index order and are never re-sorted by score. A query with no
database candidate has no BestMatch and therefore no row; no placeholder line
is written.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

import pandas as pd

from molsim.core.io import Collection, to_canonical_smiles
from molsim.errors import OutputWriteError
from molsim.similarity.search import BestMatch

DEFAULT_FLOAT_FORMAT = "{:.4f}"
SEPARATOR = ", "

REPORT_COLUMNS = [
    "Query_Index",
    "Query_ID",
    "Query_SMILES",
    "Database_Index",
    "Database_ID",
    "Database_SMILES",
    "Similarity",
]


@dataclass(frozen=True)
class ReportRow:
    query_index: int
    query_id: str
    query_smiles: str
    database_index: int
    database_id: str
    database_smiles: str
    score: float


@dataclass(frozen=True)
class Report:
    query_label: str
    database_label: str
    rows: Tuple[ReportRow, ...] = field(default_factory=tuple)
    float_format: str = DEFAULT_FLOAT_FORMAT

    def __len__(self) -> int:
        return len(self.rows)

    def header_line(self) -> str:
        return SEPARATOR.join([self.query_label, self.database_label, "similarity"])

    def lines(self) -> List[str]:
        """Header plus one rendered line per row."""
        out = [self.header_line()]
        for r in self.rows:
            out.append(SEPARATOR.join([r.query_smiles, r.database_smiles, self.float_format.format(r.score)]))
        return out

    def to_text(self) -> str:
        return "\n".join(self.lines()) + "\n"

    def to_dataframe(self) -> pd.DataFrame:
        """Convert rows to a pandas DataFrame (one row per best match)."""
        if not self.rows:
            return pd.DataFrame(columns=REPORT_COLUMNS)
        return pd.DataFrame(
            [
                [r.query_index, r.query_id, r.query_smiles, r.database_index,
                 r.database_id, r.database_smiles, r.score]
                for r in self.rows
            ],
            columns=REPORT_COLUMNS,
        )


def render_report(
    matches: Sequence[BestMatch],
    query_collection: Collection,
    database_collection: Collection,
    query_label: Optional[str] = None,
    database_label: Optional[str] = None,
    *,
    float_format: str = DEFAULT_FLOAT_FORMAT,
) -> Report:
    """Pair each best match with the canonical SMILES of both molecules.

    Labels default to the collection labels (source file names).
    """

    query_ids = query_collection.names
    database_ids = database_collection.names

    rows = []
    for m in sorted(matches, key=lambda x: x.query_index):
        rows.append(
            ReportRow(
                query_index=m.query_index,
                query_id=query_ids[m.query_index],
                query_smiles=to_canonical_smiles(query_collection[m.query_index]),
                database_index=m.database_index,
                database_id=database_ids[m.database_index],
                database_smiles=to_canonical_smiles(database_collection[m.database_index]),
                score=float(m.score),
            )
        )

    return Report(
        query_label=query_label if query_label is not None else query_collection.label,
        database_label=database_label if database_label is not None else database_collection.label,
        rows=tuple(rows),
        float_format=float_format,
    )


def write_report(report: Report, path: Union[str, Path]) -> Path:
    """Write the report, creating parent directories.

    The text goes to a sibling temporary file that is moved over `path` only
    once it is complete, so a failed write never leaves a truncated report.
    Raises OutputWriteError if the destination cannot be written.
    """

    p = Path(path)
    tmp = p.with_name(p.name + ".tmp")
    try:
        p.parent.mkdir(parents=True, exist_ok=True)
        tmp.write_text(report.to_text(), encoding="utf-8")
        os.replace(tmp, p)
    except OSError as e:
        if tmp.exists():
            tmp.unlink()
        raise OutputWriteError(f"Could not write report to {p}: {e}") from e
    return p
