"""Allow ``python -m poolstat``."""

from poolstat.cli import main

if __name__ == "__main__":
    main()
