# ruff: noqa: F401

"""Report generation utilities.

Turns best matches into the delimited best-match report written at the end of a
run.
"""

from __future__ import annotations

from .report import Report, ReportRow, render_report, write_report
