"""Configuration for the RideLink application."""

import os

from dotenv import load_dotenv

load_dotenv()

# Base URL for the JSON data server
BASE_URL = os.getenv("RIDELINK_API_URL", "http://localhost:3000")

# "json-server" or "memory"
STORAGE_BACKEND = os.getenv("RIDELINK_STORAGE", "json-server")
REQUEST_TIMEOUT = float(os.getenv("RIDELINK_REQUEST_TIMEOUT", "5"))
DB_FILE = os.getenv("RIDELINK_DB_FILE", os.path.join("data", "db.json"))

COLLECTIONS = [
    "users",
    "drivers",
    "rides",
    "otp_tokens",
    "password_reset_tokens",
    "sessions",
]

# Secret for session token signing - in production, set JWT_SECRET
JWT_SECRET = os.getenv("JWT_SECRET", "ridelink_secret_key")
JWT_ALGORITHM = "HS256"
SESSION_EXPIRATION_HOURS = int(os.getenv("SESSION_EXPIRATION_HOURS", "24"))

OTP_EXPIRATION_MINUTES = 5
RESET_TOKEN_EXPIRATION_HOURS = 1
RESET_PASSWORD_URL = os.getenv("RESET_PASSWORD_URL", "http://localhost:3000/reset-password")

# "log" or "smtp"
NOTIFIER_BACKEND = os.getenv("RIDELINK_NOTIFIER", "log")
SMTP_HOST = os.getenv("SMTP_HOST", "localhost")
SMTP_PORT = int(os.getenv("SMTP_PORT", "25"))
SMTP_USER = os.getenv("SMTP_USER")
SMTP_PASSWORD = os.getenv("SMTP_PASSWORD")
MAIL_FROM = os.getenv("MAIL_FROM", "no-reply@ridelink.local")

LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")

# CLI session file
CONFIG_DIR = os.path.expanduser("~/.ridelink")
CONFIG_FILE = os.path.join(CONFIG_DIR, "config.json")
