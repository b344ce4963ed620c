"""Module entrypoint for ``python -m cewatch``.

All argument parsing and runtime setup happen in ``cewatch.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
