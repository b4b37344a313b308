"""Module entrypoint for ``python -m simtreenav``.

All argument parsing and session setup happen in ``simtreenav.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
