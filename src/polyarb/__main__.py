"""Allow running with ``python -m polyarb``."""

from polyarb.cli import main

main()
