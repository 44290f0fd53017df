"""
Package entry point.

Allows running the application via:

    python -m dutyroster

This simply forwards execution to dutyroster.cli.main().
"""

from dutyroster.cli import main

if __name__ == "__main__":
    main()
