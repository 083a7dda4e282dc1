"""Unit tests for FilesystemArtifactSink."""

from __future__ import annotations

import asyncio
import typing as typ

import pytest

from punchclock.reporting.filesystem_sink import FilesystemArtifactSink
from punchclock.reporting.sink import ArtifactMetadata, ArtifactSink

if typ.TYPE_CHECKING:
    from pathlib import Path

METADATA = ArtifactMetadata(
    process_id="7c9e6679-7425-40de-944b-e07fc1f90ae7", generated_at=1758758400
)


class TestFilesystemArtifactSink:
    """Tests for the filesystem artifact sink adapter."""

    @pytest.fixture
    def base_path(self, tmp_path: Path) -> Path:
        """Return a temporary, not yet existing, artifact directory."""
        return tmp_path / "reports"

    @pytest.fixture
    def sink(self, base_path: Path) -> FilesystemArtifactSink:
        """Return a FilesystemArtifactSink writing to the temp directory."""
        return FilesystemArtifactSink(base_path)

    def test_satisfies_protocol(self, sink: FilesystemArtifactSink) -> None:
        """The adapter is recognised as an ArtifactSink."""
        assert isinstance(sink, ArtifactSink)

    def test_write_uses_token_and_timestamp_name(
        self, sink: FilesystemArtifactSink, base_path: Path
    ) -> None:
        """Files are named report_<token>_<timestamp>.csv under the base path."""
        location = asyncio.run(sink.write_artifact(b"a,b\n", metadata=METADATA))

        expected = base_path / (
            "report_7c9e6679-7425-40de-944b-e07fc1f90ae7_1758758400.csv"
        )
        assert location == str(expected)
        assert expected.read_bytes() == b"a,b\n"

    def test_read_returns_written_bytes(self, sink: FilesystemArtifactSink) -> None:
        """read_artifact returns exactly what was stored."""
        content = "Nome do Usuário\n".encode()
        location = asyncio.run(sink.write_artifact(content, metadata=METADATA))

        assert asyncio.run(sink.read_artifact(location)) == content

    def test_read_missing_file_raises(
        self, sink: FilesystemArtifactSink, base_path: Path
    ) -> None:
        """Removed artifacts surface as FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            asyncio.run(sink.read_artifact(str(base_path / "gone.csv")))

    def test_failed_write_leaves_no_partial_file(
        self,
        sink: FilesystemArtifactSink,
        base_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """A failure during the rename removes the temporary file."""

        def broken_replace(_src: str, _dst: object) -> None:
            msg = "Disk full"
            raise OSError(msg)

        monkeypatch.setattr(
            "punchclock.reporting.filesystem_sink.os.replace", broken_replace
        )

        with pytest.raises(OSError, match="Disk full"):
            asyncio.run(sink.write_artifact(b"a,b\n", metadata=METADATA))

        assert list(base_path.iterdir()) == [], "no file may survive a failed write"
