"""Per-run working directories.

Every run gets its own staging directory under ``DOWNLOADS_DIR`` and its own
output directory under ``MERGED_DIR``, both named by a fresh run id, so
overlapping runs never touch each other's files.
"""

import logging
import shutil
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from rollfetch.core.config import settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunPaths:
    run_id: str
    staging_dir: Path
    merged_path: Path
    download_url: str


def clean_folder(folder: Path) -> None:
    """Empty ``folder`` if it exists, otherwise create it."""
    if folder.exists():
        for entry in folder.iterdir():
            if entry.is_dir():
                shutil.rmtree(entry)
            else:
                entry.unlink()
    else:
        folder.mkdir(parents=True, exist_ok=True)


class RunStorage:
    """Creates, cleans and prunes run directories."""

    def __init__(
        self,
        downloads_dir: Optional[Path] = None,
        merged_dir: Optional[Path] = None,
        merged_filename: Optional[str] = None,
        url_prefix: Optional[str] = None,
    ):
        self.downloads_dir = Path(downloads_dir or settings.DOWNLOADS_DIR)
        self.merged_dir = Path(merged_dir or settings.MERGED_DIR)
        self.merged_filename = merged_filename or settings.MERGED_FILENAME
        self.url_prefix = (url_prefix or settings.MERGED_URL_PREFIX).rstrip("/")

    def create_run(self) -> RunPaths:
        """Allocate a run id and an empty staging directory for it."""
        run_id = uuid.uuid4().hex
        staging_dir = self.downloads_dir / run_id
        clean_folder(staging_dir)
        run = RunPaths(
            run_id=run_id,
            staging_dir=staging_dir,
            merged_path=self.merged_dir / run_id / self.merged_filename,
            download_url=f"{self.url_prefix}/{run_id}/{self.merged_filename}",
        )
        logger.info("Created run %s in %s", run_id, staging_dir)
        return run

    def discard_staging(self, run: RunPaths) -> None:
        """Remove a run's staging directory and the documents in it."""
        try:
            shutil.rmtree(run.staging_dir)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(
                "Failed to remove staging directory %s: %s",
                run.staging_dir,
                e,
            )

    def prune_merged(self, keep: int) -> List[str]:
        """
        Delete all but the ``keep`` most recent merged run directories.

        Args:
            keep: Number of run directories to keep; 0 or less disables
                pruning

        Returns:
            Run ids that were removed
        """
        if keep <= 0 or not self.merged_dir.is_dir():
            return []

        run_dirs = sorted(
            (path for path in self.merged_dir.iterdir() if path.is_dir()),
            key=lambda path: path.stat().st_mtime,
            reverse=True,
        )
        removed = []
        for path in run_dirs[keep:]:
            try:
                shutil.rmtree(path)
            except OSError as e:
                logger.warning("Failed to prune merged run %s: %s", path, e)
                continue
            removed.append(path.name)

        if removed:
            logger.info("Pruned %d old merged runs", len(removed))
        return removed
