"""Allow ``python -m soko``."""

from soko.cli.app import main

main()
