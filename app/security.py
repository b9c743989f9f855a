import hashlib
import hmac
from typing import Optional

from app.errors import ConfigurationError

ADMIN = "admin"
ASSESSMENT = "assessment"
REPORT = "report"


def derive_raw_token(purpose: str, identifier: str, secret: Optional[str]) -> str:
    """
    Derive the raw link token for a record.

    Deterministic, so a resent invite carries the same link as the first one.
    """
    if not secret or not secret.strip():
        raise ConfigurationError("TOKEN_SECRET is required for token derivation")
    return hmac.new(secret.encode(), f"{purpose}:{identifier}".encode(), hashlib.sha256).hexdigest()


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode()).hexdigest()
