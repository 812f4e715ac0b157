from __future__ import annotations

from rw.cli.app import main

main()
