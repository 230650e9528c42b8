"""Pytest configuration and fixtures for testing."""

import io
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional

import pytest
from pypdf import PdfReader, PdfWriter

from rollfetch.core.config import settings
from rollfetch.core.exceptions import DownloadError
from rollfetch.interfaces.browser_session import BrowserSession

PORTAL_URL = "https://results.example.edu/lookup.aspx"
PORTAL_ROOT = "https://results.example.edu"


def build_pdf(page_widths: Iterable[int], height: int = 300) -> bytes:
    """Return a PDF with one blank page per width.

    Tests tell pages apart by their width.
    """
    writer = PdfWriter()
    for width in page_widths:
        writer.add_blank_page(width=width, height=height)
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


def page_widths(pdf_path: Path) -> List[int]:
    """Return the width of every page of a PDF, in order."""
    reader = PdfReader(str(pdf_path))
    return [int(page.mediabox.width) for page in reader.pages]


class FakeBrowserSession(BrowserSession):
    """In-memory result portal.

    ``results`` maps a roll number to the document href shown on its result
    page, or to None when the result page has no document link. Roll
    numbers missing from ``results`` never show a result (timeout).
    Submitting the form loads ``result_url`` when given, otherwise the page
    stays at the navigated URL.
    """

    def __init__(
        self,
        results: Dict[str, Optional[str]],
        roll_input: str = "#txtRollNo",
        result_selector: str = "#lblName",
        failing_rolls: Iterable[str] = (),
        result_url: Optional[str] = None,
    ):
        self.results = results
        self.roll_input = roll_input
        self.result_selector = result_selector
        self.failing_rolls = set(failing_rolls)
        self.result_url = result_url
        self.calls: List[tuple] = []
        self.typed: Optional[str] = None
        self.submitted = False
        self.closed = False
        self.url: Optional[str] = None

    def navigate(self, url: str, wait_until: str = "networkidle") -> None:
        self.calls.append(("navigate", url, wait_until))
        self.url = url
        self.typed = None
        self.submitted = False

    def _submit(self) -> None:
        self.submitted = True
        if self.result_url is not None:
            self.url = self.result_url

    def wait_for_element(
        self, selector: str, timeout_ms: Optional[int] = None
    ) -> bool:
        self.calls.append(("wait_for_element", selector, timeout_ms))
        if selector == self.roll_input:
            return True
        if selector == self.result_selector:
            return self.submitted and self.typed in self.results
        return False

    def set_field_value(self, selector: str, value: str) -> None:
        self.calls.append(("set_field_value", selector, value))
        if value in self.failing_rolls:
            raise RuntimeError("Target page crashed")
        self.typed = value

    def click(self, selector: str) -> None:
        self.calls.append(("click", selector))
        self._submit()

    def evaluate_script(self, script: str, arg: Any = None) -> Any:
        self.calls.append(("evaluate_script", script, arg))
        self._submit()
        return None

    def read_attribute(self, selector: str, name: str) -> Optional[str]:
        self.calls.append(("read_attribute", selector, name))
        return self.results.get(self.typed)

    def current_url(self) -> Optional[str]:
        return self.url

    def close(self) -> None:
        self.calls.append(("close",))
        self.closed = True


class FakeDownloader:
    """Serves documents from a URL to bytes mapping."""

    def __init__(self, documents: Dict[str, bytes]):
        self.documents = documents
        self.requested: List[str] = []
        self.closed = False

    def download(self, roll_number: str, url: str, destination: Path) -> Path:
        self.requested.append(url)
        if url not in self.documents:
            raise DownloadError(roll_number, f"404 for {url}")
        destination.write_bytes(self.documents[url])
        return destination

    def close(self) -> None:
        self.closed = True


@pytest.fixture(autouse=True)
def apply_test_settings(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> Path:
    """Point every working directory of the app at a per-test folder."""
    monkeypatch.setattr(settings, "TESTING", True)
    monkeypatch.setattr(settings, "DOWNLOADS_DIR", tmp_path / "downloads")
    monkeypatch.setattr(settings, "MERGED_DIR", tmp_path / "merged")
    monkeypatch.setattr(settings, "LOOKUP_TRIGGER", "click")
    return tmp_path


@pytest.fixture
def portal_url() -> str:
    return PORTAL_URL


@pytest.fixture
def make_pdf() -> Callable[..., bytes]:
    """Factory producing PDF bytes with the given page widths."""
    return build_pdf


@pytest.fixture
def read_page_widths() -> Callable[[Path], List[int]]:
    """Reader returning the page widths of a PDF file."""
    return page_widths


@pytest.fixture
def fake_session_factory() -> Callable[..., FakeBrowserSession]:
    """Factory producing fake portal sessions."""

    def factory(results: Dict[str, Optional[str]], **kwargs):
        return FakeBrowserSession(results, **kwargs)

    return factory


@pytest.fixture
def fake_downloader_factory() -> Callable[..., FakeDownloader]:
    """Factory producing fake downloaders."""
    return FakeDownloader


@pytest.fixture
def scenario_portal(make_pdf):
    """Portal where A2021B0001 and A2021B0003 have results, 0002 times out.

    Returns the portal's result links and the documents behind them.
    """
    results = {
        "A2021B0001": "pdf/A2021B0001.pdf",
        "A2021B0003": "/pdf/A2021B0003.pdf",
    }
    documents = {
        f"{PORTAL_ROOT}/pdf/A2021B0001.pdf": make_pdf([101, 102]),
        f"{PORTAL_ROOT}/pdf/A2021B0003.pdf": make_pdf([103]),
    }
    return results, documents
