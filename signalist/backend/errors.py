from __future__ import annotations


class SignalistError(Exception):
    """Base class for errors raised by the Signalist backend."""


class NewsSourceError(SignalistError):
    """The market news API could not be reached or returned garbage."""


class MailDeliveryError(SignalistError):
    def __init__(self, recipient: str, reason: str) -> None:
        super().__init__(f"Failed to deliver mail to {recipient}: {reason}")
        self.recipient = recipient
        self.reason = reason
