from __future__ import annotations

from pathlib import Path
from typing import Iterable

from simctl.common.errors import WriteError

DOCUMENT_SEPARATOR = "---\n"


def render_stream(documents: Iterable[str]) -> str:
    """Concatenate serialized documents, each followed by a separator line."""

    parts = []
    for document in documents:
        if not document.endswith("\n"):
            document += "\n"
        parts.append(document)
        parts.append(DOCUMENT_SEPARATOR)
    return "".join(parts)


def write_documents(documents: Iterable[str], output_path: Path) -> Path:
    """Create or truncate ``output_path`` and write the whole stream in one call."""

    stream = render_stream(documents)
    output_path = Path(output_path)
    try:
        with output_path.open("w", encoding="utf-8") as handle:
            handle.write(stream)
    except OSError as exc:
        raise WriteError(f"error opening/creating file {output_path}: {exc}") from exc
    return output_path


__all__ = ["DOCUMENT_SEPARATOR", "render_stream", "write_documents"]
