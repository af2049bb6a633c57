"""Allow ``python -m acmelink``."""

from acmelink.cli.main import main

main()
