"""Interfaces the core uses to reach storage, the screen and the operator."""
from typing import Optional, Protocol


class BlobStore(Protocol):
    def load(self) -> Optional[str]:
        """Return the stored text, or None when nothing was saved yet."""

    def save(self, text: str) -> None:
        ...


class DisplaySink(Protocol):
    def show_elapsed(self, text: str) -> None:
        ...

    def show_status(self, label: str) -> None:
        ...


class ConfirmationGate(Protocol):
    def confirm(self, message: str) -> bool:
        ...


class FileDelivery(Protocol):
    def deliver(self, content: str, filename: str, mime_type: str) -> str:
        """Hand the file to the user. Returns a short description of where it went."""


class MailComposer(Protocol):
    def compose(self, recipient: str, subject: str, body: str) -> None:
        ...


class Notifier(Protocol):
    def notify(self, message: str, kind: str = "info") -> None:
        ...
