"""ArtifactSink protocol for storing generated report files.

Adapters implement this protocol to keep report artifacts on some backend
(local filesystem today). ``write_artifact`` returns an opaque location
string that is stored on the report and later handed back to
``read_artifact``.

Usage
-----
>>> from punchclock.reporting.filesystem_sink import FilesystemArtifactSink
>>> isinstance(FilesystemArtifactSink(Path(".")), ArtifactSink)
True

"""

from __future__ import annotations

import dataclasses as dc
import typing as typ


@dc.dataclass(frozen=True, slots=True)
class ArtifactMetadata:
    """Identifying metadata for a generated artifact.

    Attributes
    ----------
    process_id
        Public token of the report the artifact belongs to.
    generated_at
        Unix timestamp (seconds) used to keep successive files apart.

    """

    process_id: str
    generated_at: int

    @property
    def filename(self) -> str:
        """Return the stored file name, ``report_<token>_<timestamp>.csv``."""
        return f"report_{self.process_id}_{self.generated_at}.csv"


@typ.runtime_checkable
class ArtifactSink(typ.Protocol):
    """Protocol for durable report artifact storage."""

    async def write_artifact(
        self,
        content: bytes,
        *,
        metadata: ArtifactMetadata,
    ) -> str:
        """Store ``content`` and return its location.

        A failed write must not leave a partial artifact behind.
        """
        ...

    async def read_artifact(self, location: str) -> bytes:
        """Return the bytes stored at ``location``.

        Raises
        ------
        FileNotFoundError
            If nothing is stored there any more.

        """
        ...
