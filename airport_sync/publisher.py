"""Write the snapshot pair and the bumped version record as one unit."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

import structlog

from .engine import ChangeSet
from .versioning import bumped_record, read_version_record, render_record


class SnapshotPublisher:
    """Own the snapshot files and version record; only ever replace them together.

    The new version is computed before anything is written, so a malformed
    version record leaves the previous snapshot untouched. All three payloads
    are staged as temp files next to their targets and only then moved into
    place with ``os.replace``. Each replace is atomic on its own; the three
    together are not, but nothing is replaced until every payload is staged.
    """

    def __init__(
        self,
        json_path: Path,
        csv_path: Path,
        version_path: Path,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.json_path = json_path
        self.csv_path = csv_path
        self.version_path = version_path
        self.logger = logger or structlog.get_logger("airport_sync.publisher")

    def publish(self, change_set: ChangeSet) -> str:
        record = bumped_record(read_version_record(self.version_path))
        payloads = [
            (self.json_path, change_set.new_json),
            (self.csv_path, change_set.new_csv),
            (self.version_path, render_record(record)),
        ]

        staged: list[tuple[Path, Path]] = []
        try:
            for target, payload in payloads:
                staged.append((self._stage(target, payload), target))
        except OSError:
            for temp_path, _target in staged:
                temp_path.unlink(missing_ok=True)
            raise

        for temp_path, target in staged:
            os.replace(temp_path, target)

        version = record["version"]
        self.logger.info(
            "snapshot_published",
            json_path=str(self.json_path),
            csv_path=str(self.csv_path),
            version=version,
        )
        return version

    @staticmethod
    def _stage(target: Path, payload: bytes) -> Path:
        target.parent.mkdir(parents=True, exist_ok=True)
        fd, name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".tmp", dir=target.parent)
        temp_path = Path(name)
        try:
            with os.fdopen(fd, "wb") as stream:
                stream.write(payload)
            # mkstemp creates 0600 files; snapshots are published artifacts.
            os.chmod(temp_path, 0o644)
        except OSError:
            temp_path.unlink(missing_ok=True)
            raise
        return temp_path


__all__ = ["SnapshotPublisher"]
