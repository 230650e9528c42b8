"""Tests for the document downloader."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from rollfetch.core.config import settings
from rollfetch.core.exceptions import DownloadError
from rollfetch.services.downloader import DocumentDownloader

DOC_URL = "https://results.example.edu/pdf/A0001.pdf"


@pytest.fixture
def mock_session():
    session = MagicMock(spec=requests.Session)
    session.headers = {}
    return session


def test_download_writes_body(mock_session, tmp_path):
    """The response body lands at the destination."""
    response = MagicMock()
    response.content = b"%PDF-1.4 body"
    mock_session.get.return_value = response
    destination = tmp_path / "A0001.pdf"

    result = DocumentDownloader(session=mock_session, timeout=5).download(
        "A0001", DOC_URL, destination
    )

    assert result == destination
    assert destination.read_bytes() == b"%PDF-1.4 body"
    mock_session.get.assert_called_once_with(DOC_URL, timeout=5)
    response.raise_for_status.assert_called_once()


def test_default_headers_and_timeout(mock_session):
    """User agent and timeout come from settings."""
    downloader = DocumentDownloader(session=mock_session)

    assert mock_session.headers["User-Agent"] == settings.USER_AGENT
    assert downloader.timeout == settings.DOWNLOAD_TIMEOUT_SECONDS


def test_http_error(mock_session, tmp_path):
    """A non-2xx response raises DownloadError and writes nothing."""
    response = MagicMock()
    response.raise_for_status.side_effect = requests.HTTPError("404 Not Found")
    mock_session.get.return_value = response
    destination = tmp_path / "A0001.pdf"

    with pytest.raises(DownloadError, match="404 Not Found") as exc_info:
        DocumentDownloader(session=mock_session).download(
            "A0001", DOC_URL, destination
        )

    assert exc_info.value.roll_number == "A0001"
    assert not destination.exists()


def test_connection_error(mock_session, tmp_path):
    mock_session.get.side_effect = requests.ConnectionError("refused")

    with pytest.raises(DownloadError, match="refused"):
        DocumentDownloader(session=mock_session).download(
            "A0001", DOC_URL, tmp_path / "A0001.pdf"
        )


def test_write_failure_removes_partial_file(mock_session, tmp_path):
    """A failed write leaves no file behind."""
    response = MagicMock()
    response.content = b"%PDF-1.4 body"
    mock_session.get.return_value = response
    destination = tmp_path / "A0001.pdf"

    def partial_write(self, data):
        with open(self, "wb") as f:
            f.write(data[:3])
        raise OSError("No space left on device")

    with patch("pathlib.Path.write_bytes", partial_write):
        with pytest.raises(DownloadError, match="No space left"):
            DocumentDownloader(session=mock_session).download(
                "A0001", DOC_URL, destination
            )

    assert not destination.exists()


def test_close(mock_session):
    DocumentDownloader(session=mock_session).close()
    mock_session.close.assert_called_once()
