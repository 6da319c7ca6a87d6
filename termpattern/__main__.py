"""
Package entry point.

Allows running the tools via:

    python -m termpattern

This simply forwards execution to termpattern.cli.main().
"""

from termpattern.cli import main

if __name__ == "__main__":
    main()
