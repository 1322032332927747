"""Outbound notifications (OTP codes, password reset links)."""

import logging
import smtplib
from abc import ABC, abstractmethod
from concurrent.futures import Future, ThreadPoolExecutor
from email.message import EmailMessage
from typing import Optional

from ridelink import config

logger = logging.getLogger(__name__)


class Notifier(ABC):
    """Delivers a short message to an address."""

    @abstractmethod
    def send(self, to_address: str, subject: str, body: str) -> None:
        pass


class LogNotifier(Notifier):
    """Writes messages to the log instead of delivering them. Meant for development."""

    def send(self, to_address: str, subject: str, body: str) -> None:
        logger.warning(f"[notification] to={to_address} subject={subject!r} body={body!r}")


class SmtpNotifier(Notifier):
    """Sends plain-text mail through an SMTP relay."""

    def __init__(self, host: Optional[str] = None, port: Optional[int] = None,
                 user: Optional[str] = None, password: Optional[str] = None,
                 sender: Optional[str] = None):
        self.host = host or config.SMTP_HOST
        self.port = port or config.SMTP_PORT
        self.user = user if user is not None else config.SMTP_USER
        self.password = password if password is not None else config.SMTP_PASSWORD
        self.sender = sender or config.MAIL_FROM

    def send(self, to_address: str, subject: str, body: str) -> None:
        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = to_address
        message["Subject"] = subject
        message.set_content(body)

        with smtplib.SMTP(self.host, self.port, timeout=10) as smtp:
            if self.user:
                smtp.starttls()
                smtp.login(self.user, self.password or "")
            smtp.send_message(message)


class BackgroundNotifier(Notifier):
    """
    Hands messages to a worker thread so callers never wait on delivery.

    Delivery failures are logged as warnings and otherwise dropped.
    """

    def __init__(self, delegate: Notifier, max_workers: int = 2):
        self.delegate = delegate
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="notifier")

    def send(self, to_address: str, subject: str, body: str) -> Future:
        return self._executor.submit(self._deliver, to_address, subject, body)

    def _deliver(self, to_address: str, subject: str, body: str) -> bool:
        try:
            self.delegate.send(to_address, subject, body)
            return True
        except Exception as e:
            logger.warning(f"Failed to deliver '{subject}' to {to_address}: {str(e)}")
            return False

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)


def build_notifier(backend: Optional[str] = None) -> Notifier:
    """Notifier selected by configuration, always dispatched in the background."""
    backend = (backend or config.NOTIFIER_BACKEND).lower()
    if backend == "smtp":
        delegate = SmtpNotifier()
    elif backend == "log":
        delegate = LogNotifier()
    else:
        raise ValueError(f"Unknown notifier backend: {backend}")
    return BackgroundNotifier(delegate)
