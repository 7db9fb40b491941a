"""Console-script entrypoints.

The CLI module stays runnable as `python -m molsim.tools.similarity_cli`; the
installed `molsim` script calls the same `main()` function.
"""

from __future__ import annotations


def similarity() -> None:
    from molsim.tools.similarity_cli import main

    raise SystemExit(main())
