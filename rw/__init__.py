"""run-wasm: build a Cargo target to wasm and serve it in the browser."""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = ["__version__", "main", "run_wasm_cli_with_css"]


def run_wasm_cli_with_css(css: str) -> None:
    """Run the CLI with `css` included verbatim in the generated page.

    By default the body element has browser margins, so full-page apps
    usually want something like::

        rw.run_wasm_cli_with_css("body { margin: 0px; }")

    Blocks until the dev server is stopped with ctrl-c.
    """
    from rw.cli.app import main as _main

    _main(css=css)


def main() -> None:
    from rw.cli.app import main as _main

    _main()
