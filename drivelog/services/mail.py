import logging
import webbrowser
from typing import Optional
from urllib.parse import quote

logger = logging.getLogger(__name__)


def mailto_url(recipient: str, subject: str, body: str) -> str:
    return f"mailto:{recipient.strip()}?subject={quote(subject, safe='')}&body={quote(body, safe='')}"


class BrowserMailComposer:
    """Opens the system mail client through a mailto: link."""

    def compose(self, recipient: str, subject: str, body: str) -> None:
        url = mailto_url(recipient, subject, body)
        if not webbrowser.open(url):
            logger.warning("No handler accepted the mailto link for %s", recipient)


class MailtoLink:
    """Keeps the mailto: link for the web UI to open."""

    def __init__(self):
        self.url: Optional[str] = None

    def compose(self, recipient: str, subject: str, body: str) -> None:
        self.url = mailto_url(recipient, subject, body)
