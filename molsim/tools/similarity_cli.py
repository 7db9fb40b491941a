#!/usr/bin/env python
"""
molsim: report the most similar database molecule for every query molecule.

Command-line interface for the best-match similarity pipeline.

Examples
--------
# Basic run (writes best_matches.csv + best_matches.metadata.json)
molsim --input queries.sdf --database library.smi

# Custom output and fingerprint settings
molsim --input queries.smi --database library.sdf --output out/matches.csv --radius 3 --nbits 4096

# Treat a .txt file as tab-delimited SMILES
molsim --input queries.txt --input-format smi --database library.sdf

# List available fingerprints
molsim --list-fps

Exit status is 0 on success and 1 on any error. `--help` also exits with 1.
"""

import argparse
import logging
import sys
from typing import List, Optional

DESCRIPTION = "Find the most similar database molecule for each query molecule"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="molsim",
        description=DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
        add_help=False,
    )

    parser.add_argument(
        "--help",
        action="store_true",
        help="Show this help message and exit (exit status 1)",
    )

    # Inputs / output
    parser.add_argument(
        "--input",
        help="Query molecules (.sdf or tab-delimited .smi)",
    )
    parser.add_argument(
        "--database",
        help="Database molecules (.sdf or tab-delimited .smi)",
    )
    parser.add_argument(
        "-o", "--output",
        default="best_matches.csv",
        help="Report file (default: best_matches.csv)",
    )
    parser.add_argument(
        "--input-format",
        choices=["sdf", "smi"],
        default=None,
        help="Format of --input (default: from extension)",
    )
    parser.add_argument(
        "--database-format",
        choices=["sdf", "smi"],
        default=None,
        help="Format of --database (default: from extension)",
    )

    # Fingerprint options
    parser.add_argument(
        "--fp", "--fingerprint",
        dest="fp_type",
        default="morgan",
        help="Fingerprint type (default: morgan)",
    )
    parser.add_argument(
        "--radius",
        type=int,
        default=2,
        help="Morgan fingerprint radius (default: 2)",
    )
    parser.add_argument(
        "--nbits",
        type=int,
        default=2048,
        help="Fingerprint bit length (default: 2048)",
    )

    # Similarity options
    parser.add_argument(
        "--metric",
        default="tanimoto",
        choices=["tanimoto"],
        help="Similarity metric (default: tanimoto)",
    )

    # Output options
    parser.add_argument(
        "--no-metadata",
        action="store_true",
        help="Do not write the <output>.metadata.json sidecar",
    )
    parser.add_argument(
        "--show",
        action="store_true",
        help="Print the best-match table to stdout",
    )
    parser.add_argument(
        "--progress",
        action="store_true",
        help="Show progress bars",
    )

    # Info options
    parser.add_argument(
        "--list-fps",
        action="store_true",
        help="List available fingerprint types",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output",
    )

    return parser


def _configure_logging(verbose: bool) -> logging.Logger:
    """Route the `molsim` logger to stderr; library code never configures logging itself."""
    log = logging.getLogger("molsim")
    log.handlers.clear()
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    log.addHandler(handler)
    log.setLevel(logging.INFO if verbose else logging.WARNING)

    if not verbose:
        from rdkit import RDLogger

        RDLogger.DisableLog("rdApp.*")
    return log


def _list_fingerprints():
    """Print available fingerprint types."""
    from molsim.similarity.fingerprints import FINGERPRINT_TYPES

    print("\nAvailable fingerprint types:\n")
    print(f"{'Type':<15} {'Description'}")
    print("-" * 60)
    for fp_type, info in FINGERPRINT_TYPES.items():
        print(f"{fp_type:<15} {info['description']}")
    print()


def _check_required(args) -> None:
    from molsim.errors import UsageError

    if not args.input:
        raise UsageError("Input file not specified")
    if not args.database:
        raise UsageError("Database file not specified")


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()

    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        # argparse reports its own errors on stderr; normalise the exit status.
        return 1 if e.code else 0

    if args.help:
        parser.print_help()
        return 1

    if args.list_fps:
        _list_fingerprints()
        return 0

    from molsim.errors import MolSimError, UsageError

    try:
        _check_required(args)
    except UsageError as e:
        print(str(e), file=sys.stderr)
        parser.print_usage(sys.stderr)
        return 1

    log = _configure_logging(args.verbose)
    print(f"Input file: {args.input}")
    print(f"Database file: {args.database}")
    print(f"Output file: {args.output}")

    from molsim.core.printing import print_summary
    from molsim.pipeline import PipelineConfig, run_pipeline
    from molsim.similarity.fingerprints import FingerprintAlgorithm

    try:
        algorithm = FingerprintAlgorithm.from_name(args.fp_type, radius=args.radius, n_bits=args.nbits)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    config = PipelineConfig(
        input_path=args.input,
        database_path=args.database,
        output_path=args.output,
        input_format=args.input_format,
        database_format=args.database_format,
        algorithm=algorithm,
        metric=args.metric,
        write_metadata=not args.no_metadata,
        show_progress=args.progress,
    )

    try:
        result = run_pipeline(config, logger=log)
    except MolSimError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Number of molecules in the input file: {len(result.query)}")
    print(f"Number of molecules in the database file: {len(result.database)}")

    if args.show:
        df = result.report.to_dataframe()
        print(df.to_string(index=False))

    items = [
        ("Query", f"{result.query.label} ({len(result.query)} molecules, {result.query.n_skipped} skipped)"),
        ("Database", f"{result.database.label} ({len(result.database)} molecules, {result.database.n_skipped} skipped)"),
        ("Fingerprint", algorithm.fp_type),
        ("Best matches", len(result.report)),
        ("Report", result.output_path),
    ]
    if result.metadata_path is not None:
        items.append(("Metadata", result.metadata_path))
    print_summary("molsim best-match search", items)

    return 0


if __name__ == "__main__":
    sys.exit(main())
