"""Generated report files and the hand-off that writes them to disk."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from . import log


XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
PDF_MEDIA_TYPE = "application/pdf"
CSV_MEDIA_TYPE = "text/csv"


class ArtifactGenerationError(Exception):
    """Raised when a generated report cannot be written out."""


@dataclass(frozen=True)
class Artifact:
    """A finished export: suggested file name, raw bytes, and media type."""

    filename: str
    content: bytes
    media_type: str


def write_artifact(artifact: Artifact, directory: Path) -> Path:
    """Persist ``artifact`` inside ``directory`` and return the file path.

    The directory is expanded (supporting ``~``), resolved, and created on
    demand.

    Raises:
        ArtifactGenerationError: If the directory or file cannot be written.
    """

    target_dir = Path(directory).expanduser().resolve()
    destination = target_dir / artifact.filename
    try:
        target_dir.mkdir(parents=True, exist_ok=True)
        destination.write_bytes(artifact.content)
    except OSError as exc:
        raise ArtifactGenerationError(f"Unable to write '{destination}': {exc}") from exc
    log.info("Wrote %s (%d bytes)", destination, len(artifact.content))
    return destination
