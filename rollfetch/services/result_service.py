"""
Result PDF service.

This module contains the business logic behind the generate-pdf endpoint:
request validation, the fetch run and the merge, separated from the HTTP
and Celery layers.
"""

import logging
from typing import Callable, Optional, Tuple
from urllib.parse import urlparse

from fastapi import HTTPException, status

from rollfetch.core.config import settings
from rollfetch.core.exceptions import ValidationError
from rollfetch.core.identifiers import IdentifierRange
from rollfetch.core.pdf_merger import PDFMerger
from rollfetch.schemas.results import GeneratePdfRequest, GeneratePdfResponse
from rollfetch.services.batch_fetcher import BatchFetcher, SessionFactory
from rollfetch.services.browser import open_browser_session
from rollfetch.services.downloader import DocumentDownloader
from rollfetch.services.run_storage import RunStorage

logger = logging.getLogger(__name__)

MISSING_FIELDS_MESSAGE = (
    "Missing required fields: startRoll, endRoll, websiteURL"
)


class ResultService:
    """Runs a fetch-and-merge batch for a roll number range."""

    def __init__(
        self,
        session_factory: SessionFactory = open_browser_session,
        storage: Optional[RunStorage] = None,
        downloader_factory: Callable[
            [], DocumentDownloader
        ] = DocumentDownloader,
    ):
        self.session_factory = session_factory
        self._storage = storage
        self.downloader_factory = downloader_factory

    @property
    def storage(self) -> RunStorage:
        # Built lazily so directory settings patched at runtime are honoured
        if self._storage is None:
            return RunStorage()
        return self._storage

    def validate_request(
        self,
        start_roll: Optional[str],
        end_roll: Optional[str],
        website_url: Optional[str],
    ) -> Tuple[IdentifierRange, str]:
        """
        Check a request and derive its roll number range.

        Returns:
            The identifier range and the stripped website URL

        Raises:
            ValidationError: If a field is missing or malformed
        """
        if not all(
            value and value.strip()
            for value in (start_roll, end_roll, website_url)
        ):
            raise ValidationError(MISSING_FIELDS_MESSAGE)

        website_url = website_url.strip()
        parsed = urlparse(website_url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValidationError(
                f"websiteURL must be an absolute http(s) URL, got {website_url!r}"
            )

        identifiers = IdentifierRange.from_rolls(
            start_roll, end_roll, width=settings.ROLL_NUMBER_WIDTH
        )
        if len(identifiers) > settings.MAX_RANGE_SIZE:
            raise ValidationError(
                f"Range of {len(identifiers)} roll numbers exceeds the "
                f"limit of {settings.MAX_RANGE_SIZE}"
            )
        if not end_roll.strip().startswith(identifiers.prefix):
            logger.warning(
                "endRoll %s does not share the prefix %r of startRoll; "
                "using the startRoll prefix",
                end_roll,
                identifiers.prefix,
            )
        return identifiers, website_url

    def generate(
        self,
        start_roll: Optional[str],
        end_roll: Optional[str],
        website_url: Optional[str],
    ) -> GeneratePdfResponse:
        """
        Fetch every roll number's document and merge them into one PDF.

        Args:
            start_roll: First roll number of the range
            end_roll: Last roll number of the range
            website_url: URL of the portal's lookup form

        Returns:
            GeneratePdfResponse with the merged PDF's URL (None when nothing
            was merged), the roll numbers not found and the roll numbers
            whose documents could not be read

        Raises:
            ValidationError: If the request is invalid; nothing is written
            BrowserSessionError: If the browser session cannot be opened
            MergeError: If the merged document cannot be written
        """
        identifiers, website_url = self.validate_request(
            start_roll, end_roll, website_url
        )

        storage = self.storage
        run = storage.create_run()
        downloader = None
        try:
            downloader = self.downloader_factory()
            fetcher = BatchFetcher(
                session_factory=self.session_factory, downloader=downloader
            )
            fetch_report = fetcher.fetch(
                identifiers, website_url, run.staging_dir
            )
            merge_report = PDFMerger.merge_directory(
                run.staging_dir, run.merged_path
            )
        finally:
            if downloader is not None:
                downloader.close()
            storage.discard_staging(run)

        storage.prune_merged(keep=settings.MERGED_RUNS_TO_KEEP)

        download_url = (
            run.download_url if merge_report.output_path is not None else None
        )
        logger.info(
            "Run %s finished: %d merged, %d not found, %d skipped",
            run.run_id,
            len(merge_report.merged),
            len(fetch_report.failed),
            len(merge_report.skipped),
        )
        return GeneratePdfResponse(
            download_url=download_url,
            not_found=fetch_report.failed,
            skipped=merge_report.skipped,
        )

    def generate_pdf_endpoint(
        self, request: GeneratePdfRequest
    ) -> GeneratePdfResponse:
        """
        Handle the generate-pdf HTTP endpoint.

        Args:
            request: The roll number range and portal URL

        Returns:
            GeneratePdfResponse for the finished run

        Raises:
            HTTPException: 400 for invalid requests, 500 for anything else
        """
        try:
            logger.info(
                "Generate PDF requested for %s..%s at %s",
                request.start_roll,
                request.end_roll,
                request.website_url,
            )
            return self.generate(
                request.start_roll, request.end_roll, request.website_url
            )
        except ValidationError as e:
            logger.warning("Invalid generate-pdf request: %s", str(e))
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)
            )
        except Exception as e:
            logger.error(
                "Error in generate_pdf_endpoint: %s", str(e), exc_info=True
            )
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Internal server error",
            )


result_service = ResultService()
