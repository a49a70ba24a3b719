"""Save files: JSON documents written next to the run."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from kingdom.core.document import SaveGameError

logger = logging.getLogger(__name__)


def write_save(path: str | Path, document: dict[str, Any]) -> Path:
    """Write *document* as JSON.

    The caller takes the document first; a failing write cannot touch the
    running simulation. The file is replaced atomically via a sibling temp file.
    """
    target = Path(path)
    tmp = target.with_suffix(target.suffix + ".tmp")
    tmp.write_text(json.dumps(document, indent=2))
    tmp.replace(target)
    logger.info("Save written to %s (tick %s)", target, document.get("tick"))
    return target


def read_save(path: str | Path) -> dict[str, Any]:
    source = Path(path)
    try:
        document = json.loads(source.read_text())
    except json.JSONDecodeError as exc:
        raise SaveGameError(f"{source} is not valid JSON: {exc}") from exc
    if not isinstance(document, dict):
        raise SaveGameError(f"{source} does not hold a save document")
    return document
