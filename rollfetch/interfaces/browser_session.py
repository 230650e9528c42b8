"""Interface for a scriptable browser session.

The batch fetcher only talks to this interface so it can run against a fake
session in tests and against Playwright in production.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional


class BrowserSession(ABC):
    """A single browser tab driven by the fetch loop."""

    @abstractmethod
    def navigate(self, url: str, wait_until: str = "networkidle") -> None:
        """Load ``url`` and wait until the page reaches ``wait_until``."""
        pass

    @abstractmethod
    def wait_for_element(
        self, selector: str, timeout_ms: Optional[int] = None
    ) -> bool:
        """Wait for ``selector`` to appear; return False on timeout."""
        pass

    @abstractmethod
    def set_field_value(self, selector: str, value: str) -> None:
        """Clear the input matched by ``selector`` and type ``value``."""
        pass

    @abstractmethod
    def click(self, selector: str) -> None:
        """Click the element matched by ``selector``."""
        pass

    @abstractmethod
    def evaluate_script(self, script: str, arg: Any = None) -> Any:
        """Run ``script`` in the page and return its result."""
        pass

    @abstractmethod
    def read_attribute(self, selector: str, name: str) -> Optional[str]:
        """Return attribute ``name`` of the first match, or None."""
        pass

    @abstractmethod
    def current_url(self) -> Optional[str]:
        """Return the URL of the loaded page, or None before navigation."""
        pass

    @abstractmethod
    def close(self) -> None:
        """Release the browser and everything it owns."""
        pass

    def __enter__(self) -> "BrowserSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
