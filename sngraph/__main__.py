"""Allow ``python -m sngraph``."""

from sngraph.cli import main

if __name__ == "__main__":
    main()
