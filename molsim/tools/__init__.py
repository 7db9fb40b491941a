"""Command-line tools for molsim."""
