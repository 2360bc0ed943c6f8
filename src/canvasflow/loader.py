"""Reading JSON Canvas documents from disk or streams."""

import json
import sys
from pathlib import Path
from typing import Any, Dict, Union

from .errors import ValidationError


def load_canvas(source: Union[str, Path]) -> Dict[str, Any]:
    """
    Read a ``.canvas`` file (JSON) and return the raw document.

    ``"-"`` reads from stdin. The document is not validated here; pass it to
    ``build_hierarchy`` or ``render_flowchart``.

    Raises:
        ValidationError: If the file is missing or is not valid JSON.
    """
    if str(source) == "-":
        text = sys.stdin.read()
        name = "<stdin>"
    else:
        path = Path(source)
        if not path.is_file():
            raise ValidationError(f"Canvas file not found: {path}")
        text = path.read_text(encoding="utf-8")
        name = str(path)

    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid JSON in {name}: {e}") from e
