"""Tests for writing generated artifacts to disk."""

from __future__ import annotations

from pathlib import Path

import pytest

from stockroom import artifacts


def test_write_artifact_creates_directory(tmp_path):
    artifact = artifacts.Artifact(filename="Report_warehouse_01.01.2024.csv", content=b"a,b\r\n", media_type=artifacts.CSV_MEDIA_TYPE)

    path = artifacts.write_artifact(artifact, tmp_path / "nested" / "out")

    assert path == (tmp_path / "nested" / "out" / artifact.filename).resolve()
    assert path.read_bytes() == b"a,b\r\n"


def test_write_artifact_wraps_os_errors(tmp_path, monkeypatch):
    artifact = artifacts.Artifact(filename="x.pdf", content=b"%PDF", media_type=artifacts.PDF_MEDIA_TYPE)

    def _fail(self, data):
        raise PermissionError("read-only")

    monkeypatch.setattr(Path, "write_bytes", _fail)

    with pytest.raises(artifacts.ArtifactGenerationError) as excinfo:
        artifacts.write_artifact(artifact, tmp_path)

    assert isinstance(excinfo.value.__cause__, PermissionError)
