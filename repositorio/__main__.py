"""
Package entry point.

Allows running the application via:

    python -m repositorio

This simply forwards execution to repositorio.cli.main().
"""

from repositorio.cli import main

if __name__ == "__main__":
    main()
