r"""Filesystem adapter for the ArtifactSink protocol.

Artifacts are written flat under one directory::

    {base_path}/report_{process_id}_{timestamp}.csv

Each write goes to a hidden temporary file in the same directory first and
is then renamed over the final name, so readers never observe a partially
written CSV.

Usage
-----
>>> import asyncio
>>> from pathlib import Path
>>> from punchclock.reporting.filesystem_sink import FilesystemArtifactSink
>>> from punchclock.reporting.sink import ArtifactMetadata
>>>
>>> sink = FilesystemArtifactSink(Path("tmp/reports"))
>>> meta = ArtifactMetadata(process_id="abc-123", generated_at=1727136000)
>>> asyncio.run(sink.write_artifact(b"a,b\n", metadata=meta))
'tmp/reports/report_abc-123_1727136000.csv'

"""

from __future__ import annotations

import asyncio
import os
import tempfile
import typing as typ
from pathlib import Path

if typ.TYPE_CHECKING:
    from punchclock.reporting.sink import ArtifactMetadata


def _write_atomically(target: Path, content: bytes) -> None:
    target.parent.mkdir(parents=True, exist_ok=True)
    fd, temp_name = tempfile.mkstemp(
        dir=target.parent, prefix=f".{target.name}.", suffix=".part"
    )
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(content)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(temp_name, target)
    except BaseException:
        Path(temp_name).unlink(missing_ok=True)
        raise


class FilesystemArtifactSink:
    """Store report artifacts on the local filesystem.

    Parameters
    ----------
    base_path
        Directory for artifact files; created on first write.

    """

    def __init__(self, base_path: Path) -> None:
        """Initialise the sink with a base directory path."""
        self._base_path = base_path

    @property
    def base_path(self) -> Path:
        """Directory artifacts are written to."""
        return self._base_path

    async def write_artifact(
        self,
        content: bytes,
        *,
        metadata: ArtifactMetadata,
    ) -> str:
        """Write ``content`` atomically and return the file path as a string."""
        target = self._base_path / metadata.filename
        await asyncio.to_thread(_write_atomically, target, content)
        return str(target)

    async def read_artifact(self, location: str) -> bytes:
        """Read a previously written artifact.

        Raises
        ------
        FileNotFoundError
            If the file was removed after the report completed.

        """
        return await asyncio.to_thread(Path(location).read_bytes)
