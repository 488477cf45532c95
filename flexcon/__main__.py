"""Allow running as ``python -m flexcon``."""

from flexcon.cli.main import main

if __name__ == "__main__":
    main()
