"""One-time passcode generation and delivery."""

import logging
import secrets

from ridelink.services.notifier import Notifier

logger = logging.getLogger(__name__)

OTP_MIN = 100000
OTP_MAX = 999999


class OtpIssuer:
    """Generates 6-digit passcodes and sends them out."""

    def __init__(self, notifier: Notifier):
        self.notifier = notifier

    @staticmethod
    def generate_otp() -> str:
        """Uniformly random code in [100000, 999999] from a CSPRNG."""
        return str(OTP_MIN + secrets.randbelow(OTP_MAX - OTP_MIN + 1))

    def send_otp(self, email: str, otp: str) -> None:
        """Send the code. Delivery problems never fail the caller."""
        try:
            self.notifier.send(email, "Your OTP Code", f"Your OTP code is: {otp}")
        except Exception as e:
            logger.warning(f"Could not dispatch OTP to {email}: {str(e)}")
