#!/usr/bin/env python
"""
Thin wrapper script to invoke the conventional_commit CLI.

Running ``python ccommit.py`` is equivalent to running the ``ccommit``
console script installed via ``pyproject.toml``.
"""

from conventional_commit.cli import main


if __name__ == "__main__":
    main(prog_name="ccommit")
