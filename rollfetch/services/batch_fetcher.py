"""
Per-roll-number fetch loop.

Drives the result portal once per roll number in a range, downloading one
document per successful lookup. A failure for one roll number is recorded
and never stops the batch; only a failure to open the browser session
aborts the run.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional
from urllib.parse import urljoin

from rollfetch.core.config import settings
from rollfetch.core.exceptions import (
    BrowserSessionError,
    DocumentLinkNotFoundError,
    DocumentLookupError,
    ResultNotFoundError,
)
from rollfetch.core.identifiers import IdentifierRange
from rollfetch.interfaces.browser_session import BrowserSession
from rollfetch.services.downloader import DocumentDownloader
from rollfetch.services.lookup_triggers import (
    LookupTrigger,
    trigger_from_settings,
)

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], BrowserSession]


@dataclass
class PortalSelectors:
    """CSS selectors of the result portal's form and result page."""

    roll_input: str = "#txtRollNo"
    result: str = "#lblName"
    document_link: str = 'a[href$=".pdf"]'

    @classmethod
    def from_settings(cls) -> "PortalSelectors":
        return cls(
            roll_input=settings.ROLL_INPUT_SELECTOR,
            result=settings.RESULT_SELECTOR,
            document_link=settings.DOCUMENT_LINK_SELECTOR,
        )


@dataclass
class FetchReport:
    """Outcome of one batch: downloaded files and failed roll numbers."""

    downloaded: List[Path] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)

    @property
    def attempted(self) -> int:
        return len(self.downloaded) + len(self.failed)


class BatchFetcher:
    """Fetches one result document per roll number, sequentially."""

    def __init__(
        self,
        session_factory: SessionFactory,
        downloader: Optional[DocumentDownloader] = None,
        trigger: Optional[LookupTrigger] = None,
        selectors: Optional[PortalSelectors] = None,
        result_timeout_ms: Optional[int] = None,
        wait_until: Optional[str] = None,
    ):
        self.session_factory = session_factory
        self.downloader = downloader or DocumentDownloader()
        self.trigger = trigger or trigger_from_settings()
        self.selectors = selectors or PortalSelectors.from_settings()
        self.result_timeout_ms = (
            result_timeout_ms
            if result_timeout_ms is not None
            else settings.RESULT_TIMEOUT_MS
        )
        self.wait_until = wait_until or settings.NAVIGATION_WAIT_UNTIL

    def fetch(
        self,
        identifiers: IdentifierRange,
        target_url: str,
        staging_dir: Path,
    ) -> FetchReport:
        """
        Fetch the documents for every roll number in ``identifiers``.

        Args:
            identifiers: Inclusive roll number range
            target_url: URL of the portal's lookup form
            staging_dir: Existing directory receiving ``<roll>.pdf`` files

        Returns:
            FetchReport with one entry per roll number, either a downloaded
            file or a failed roll number

        Raises:
            BrowserSessionError: If the browser session cannot be opened
        """
        report = FetchReport()
        logger.info(
            "Fetching %d documents (%s..%s) from %s with %r",
            len(identifiers),
            identifiers.first,
            identifiers.last,
            target_url,
            self.trigger,
        )

        try:
            session = self.session_factory()
        except BrowserSessionError:
            raise
        except Exception as e:
            raise BrowserSessionError(
                f"Failed to open browser session: {str(e)}"
            ) from e

        try:
            for roll_number in identifiers:
                logger.info("Processing roll number %s", roll_number)
                try:
                    path = self.fetch_one(
                        session, roll_number, target_url, staging_dir
                    )
                except DocumentLookupError as e:
                    logger.warning("Failed for %s: %s", roll_number, e)
                    report.failed.append(roll_number)
                    continue
                except Exception as e:
                    logger.warning(
                        "Failed for %s: %s", roll_number, e, exc_info=True
                    )
                    report.failed.append(roll_number)
                    continue
                report.downloaded.append(path)
                logger.info("Downloaded %s", path.name)
        finally:
            session.close()

        logger.info(
            "Fetched %d of %d documents, %d not found",
            len(report.downloaded),
            report.attempted,
            len(report.failed),
        )
        return report

    def fetch_one(
        self,
        session: BrowserSession,
        roll_number: str,
        target_url: str,
        staging_dir: Path,
    ) -> Path:
        """
        Look up one roll number and download its document.

        Raises:
            DocumentLookupError: If the lookup form never appears
            ResultNotFoundError: If no result appears within the timeout
            DocumentLinkNotFoundError: If the result has no document link
            DownloadError: If the document cannot be downloaded
        """
        session.navigate(target_url, wait_until=self.wait_until)
        if not session.wait_for_element(self.selectors.roll_input):
            raise DocumentLookupError(roll_number, "lookup form not found")
        session.set_field_value(self.selectors.roll_input, roll_number)
        self.trigger.fire(session)

        if not session.wait_for_element(
            self.selectors.result, timeout_ms=self.result_timeout_ms
        ):
            raise ResultNotFoundError(
                roll_number,
                f"no result within {self.result_timeout_ms} ms",
            )

        href = session.read_attribute(self.selectors.document_link, "href")
        if not href:
            raise DocumentLinkNotFoundError(
                roll_number, "result page has no document link"
            )

        # Relative links are relative to the result page, which may differ
        # from the lookup form after submit
        base_url = session.current_url() or target_url
        document_url = urljoin(base_url, href)
        destination = staging_dir / f"{roll_number}.pdf"
        return self.downloader.download(roll_number, document_url, destination)
