"""
Strategies for submitting the result portal's lookup form.

Some portals submit with a plain button, others (ASP.NET WebForms) expect a
``__doPostBack`` call. Which one is used is a configuration choice.
"""

from abc import ABC, abstractmethod

from rollfetch.core.config import settings
from rollfetch.interfaces.browser_session import BrowserSession

POSTBACK_SCRIPT = (
    "([target, argument]) => { __doPostBack(target, argument); }"
)


class LookupTrigger(ABC):
    """Submits the lookup form once the roll number has been typed."""

    @abstractmethod
    def fire(self, session: BrowserSession) -> None:
        pass


class ClickTrigger(LookupTrigger):
    """Click the submit button."""

    def __init__(self, selector: str):
        self.selector = selector

    def fire(self, session: BrowserSession) -> None:
        session.click(self.selector)

    def __repr__(self) -> str:
        return f"ClickTrigger({self.selector!r})"


class PostbackTrigger(LookupTrigger):
    """Fire a server-side postback event from page script."""

    def __init__(self, event_target: str, event_argument: str = ""):
        self.event_target = event_target
        self.event_argument = event_argument

    def fire(self, session: BrowserSession) -> None:
        session.evaluate_script(
            POSTBACK_SCRIPT, [self.event_target, self.event_argument]
        )

    def __repr__(self) -> str:
        return f"PostbackTrigger({self.event_target!r})"


def trigger_from_settings() -> LookupTrigger:
    """Build the lookup trigger named by ``settings.LOOKUP_TRIGGER``."""
    kind = settings.LOOKUP_TRIGGER.lower()
    if kind == "click":
        return ClickTrigger(settings.SUBMIT_SELECTOR)
    if kind == "postback":
        return PostbackTrigger(
            settings.POSTBACK_EVENT_TARGET, settings.POSTBACK_EVENT_ARGUMENT
        )
    raise ValueError(f"Unknown lookup trigger: {settings.LOOKUP_TRIGGER}")
