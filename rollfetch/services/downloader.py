"""Direct HTTP download of result documents."""

import logging
from pathlib import Path
from typing import Optional

import requests

from rollfetch.core.config import settings
from rollfetch.core.exceptions import DownloadError

logger = logging.getLogger(__name__)


class DocumentDownloader:
    """Fetches a document URL and stores the body on disk."""

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ):
        self.session = session or requests.Session()
        self.session.headers.setdefault("User-Agent", settings.USER_AGENT)
        self.timeout = (
            timeout if timeout is not None else settings.DOWNLOAD_TIMEOUT_SECONDS
        )

    def download(self, roll_number: str, url: str, destination: Path) -> Path:
        """
        Download ``url`` into ``destination``.

        The body is fetched completely before anything is written, and a
        partially written file is removed, so ``destination`` either holds
        the whole document or does not exist.

        Args:
            roll_number: Roll number the document belongs to (for errors)
            url: Absolute document URL
            destination: File to write

        Returns:
            The destination path

        Raises:
            DownloadError: On network errors, non-2xx responses, or write
                failures
        """
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise DownloadError(
                roll_number, f"Failed to download {url}: {str(e)}"
            ) from e

        try:
            destination.write_bytes(response.content)
        except OSError as e:
            if destination.exists():
                try:
                    destination.unlink()
                except OSError:
                    logger.warning(
                        "Failed to clean up partial file: %s", destination
                    )
            raise DownloadError(
                roll_number, f"Failed to write {destination}: {str(e)}"
            ) from e

        logger.debug(
            "Saved %d bytes from %s to %s",
            len(response.content),
            url,
            destination,
        )
        return destination

    def close(self) -> None:
        self.session.close()
