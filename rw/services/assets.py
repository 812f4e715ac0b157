"""Boot HTML for the generated bundle."""

from __future__ import annotations

from pathlib import Path

from rw.core.errors import AssetError
from rw.core.result import Err, Ok, Result
from rw.services.bindgen import INDEX_HTML

__all__ = ["compose_index_html", "write_index_html"]

_INDEX_TEMPLATE = """\
<!DOCTYPE html>
<html>
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>{{name}}</title>
    <style type="text/css">{{css}}</style>
  </head>
  <body>
    <script type="module">
      import init from "./{{glue}}";
      init();
    </script>
  </body>
</html>
"""


def compose_index_html(glue_module: str, css: str) -> str:
    """Render the page that loads `glue_module`.

    `css` comes from the integrating crate, not the network, and is
    inserted verbatim. Page structure is fixed; apps build their own DOM.
    """
    name = glue_module.removesuffix(".js")
    # css is substituted last so braces in it are never treated as placeholders.
    return (
        _INDEX_TEMPLATE.replace("{{name}}", name)
        .replace("{{glue}}", glue_module)
        .replace("{{css}}", css)
    )


def write_index_html(out_dir: Path, glue_module: str, css: str) -> Result[Path, AssetError]:
    path = out_dir / INDEX_HTML
    try:
        path.write_text(compose_index_html(glue_module, css), encoding="utf-8")
    except OSError as e:
        return Err(AssetError(message=f"could not write {path}: {e.strerror or e}", path=path))
    return Ok(path)
