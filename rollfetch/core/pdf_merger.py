"""PDF merging functionality."""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from pypdf import PdfReader, PdfWriter
from pypdf.errors import PyPdfError

from rollfetch.core.exceptions import MergeError

logger = logging.getLogger(__name__)

_TRAILING_DIGITS = re.compile(r"(\d+)$")


@dataclass
class MergeReport:
    """Outcome of merging a staging directory."""

    output_path: Optional[Path] = None
    merged: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    page_count: int = 0


def roll_number_sort_key(pdf_path: Path) -> Tuple[int, int, str]:
    """Order documents by the numeric suffix of their roll number."""
    match = _TRAILING_DIGITS.search(pdf_path.stem)
    if match is None:
        return (1, 0, pdf_path.stem)
    return (0, int(match.group(1)), pdf_path.stem)


class PDFMerger:
    """Concatenates per-roll PDFs into one document."""

    @staticmethod
    def list_documents(staging_dir: Path) -> List[Path]:
        """
        List the PDFs in a staging directory in roll number order.

        Args:
            staging_dir: Directory holding ``<roll>.pdf`` files

        Returns:
            Sorted list of PDF paths; empty if the directory does not exist
        """
        if not staging_dir.is_dir():
            return []
        documents = [
            path
            for path in staging_dir.iterdir()
            if path.is_file() and path.suffix.lower() == ".pdf"
        ]
        return sorted(documents, key=roll_number_sort_key)

    @staticmethod
    def merge_directory(staging_dir: Path, output_path: Path) -> MergeReport:
        """
        Merge every PDF in a staging directory into a single PDF.

        Pages are copied in roll number order and, within a document, in
        their original order. Documents that cannot be read or have no pages
        are skipped and reported instead of aborting the merge. When nothing
        is left to merge no output file is written.

        Args:
            staging_dir: Directory holding ``<roll>.pdf`` files
            output_path: Path where the merged PDF will be saved

        Returns:
            MergeReport describing what was merged and what was skipped

        Raises:
            MergeError: If the merged document cannot be written
        """
        report = MergeReport()
        documents = PDFMerger.list_documents(staging_dir)
        if not documents:
            logger.info("No documents to merge in %s", staging_dir)
            return report

        writer = PdfWriter()
        try:
            for pdf_path in documents:
                try:
                    reader = PdfReader(str(pdf_path))
                    pages = list(reader.pages)
                except Exception as e:
                    logger.warning(
                        "Skipping unreadable document %s: %s", pdf_path.name, e
                    )
                    report.skipped.append(pdf_path.stem)
                    continue

                if not pages:
                    logger.warning(
                        "Skipping document without pages: %s", pdf_path.name
                    )
                    report.skipped.append(pdf_path.stem)
                    continue

                for page in pages:
                    writer.add_page(page)
                report.merged.append(pdf_path.stem)
                report.page_count += len(pages)
                logger.debug(
                    "Added %d pages from %s", len(pages), pdf_path.name
                )

            if not report.merged:
                logger.warning(
                    "All %d documents in %s were skipped",
                    len(documents),
                    staging_dir,
                )
                return report

            output_path.parent.mkdir(parents=True, exist_ok=True)
            try:
                with open(output_path, "wb") as output_file:
                    writer.write(output_file)
            except (OSError, PyPdfError) as e:
                if output_path.exists():
                    try:
                        output_path.unlink()
                    except OSError:
                        logger.warning(
                            "Failed to clean up output file: %s", output_path
                        )
                raise MergeError(
                    f"Failed to write merged PDF: {str(e)}"
                ) from e

            report.output_path = output_path
            logger.info(
                "Merged %d documents (%d pages) into %s",
                len(report.merged),
                report.page_count,
                output_path,
            )
            return report
        finally:
            writer.close()
