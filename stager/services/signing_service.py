"""Stateless signed links for fetching a file without a session.

A token binds ``(file_id, expires)`` with HMAC-SHA256 under
FILE_SIGNING_SECRET. ``expires`` is epoch milliseconds. Nothing is stored:
verification recomputes the signature.

The signature is checked before the expiry, so only a genuinely signed
link can ever report "expired". A forged link is always "invalid".
"""
import hashlib
import hmac
import logging
import time
from dataclasses import dataclass
from urllib.parse import urlencode, urlsplit, parse_qs

from flask import current_app

from stager.errors import Expired, InvalidSignature, ValidationError

logger = logging.getLogger(__name__)

TEMP_FILES_PATH = "/api/temp/files"


@dataclass(frozen=True)
class SignedToken:
    file_id: str
    expires: int
    signature: str

    def query_params(self):
        return {"expires": str(self.expires), "signature": self.signature}


def _now_ms():
    return int(time.time() * 1000)


def _secret():
    secret = current_app.config.get("FILE_SIGNING_SECRET")
    if not secret:
        raise RuntimeError("FILE_SIGNING_SECRET must be configured")
    return secret.encode("utf-8")


def sign(file_id, expires):
    payload = f"{file_id}:{int(expires)}".encode("utf-8")
    return hmac.new(_secret(), payload, hashlib.sha256).hexdigest()


def issue_token(file_id, expires_at=None, ttl=None):
    """Issue a token for ``file_id``.

    ``expires_at`` is epoch ms. Otherwise the token lives ``ttl`` seconds,
    defaulting to SIGNED_URL_TTL_SECONDS.
    """
    if not file_id:
        raise ValidationError("File id is required")
    if expires_at is None:
        if ttl is None:
            ttl = current_app.config["SIGNED_URL_TTL_SECONDS"]
        expires_at = _now_ms() + int(ttl * 1000)
    expires_at = int(expires_at)
    return SignedToken(file_id=file_id, expires=expires_at, signature=sign(file_id, expires_at))


def verify_token(file_id, expires, signature, now=None):
    """Verify a token taken from a request.

    Raises ValidationError for a non-numeric expiry, InvalidSignature on a
    signature mismatch, and Expired when a validly signed token is past its
    expiry.
    """
    try:
        expires_ms = int(expires)
    except (TypeError, ValueError):
        raise ValidationError("Invalid expiry")

    expected = sign(file_id, expires_ms)
    if not hmac.compare_digest(expected.encode(), str(signature or "").encode("utf-8")):
        logger.info("Invalid signature for file %s", file_id)
        raise InvalidSignature()

    if now is None:
        now = _now_ms()
    if now >= expires_ms:
        logger.info("Signed URL expired for file %s (%d ms ago)", file_id, now - expires_ms)
        raise Expired()

    return SignedToken(file_id=file_id, expires=expires_ms, signature=expected)


def build_signed_url(file_id, expires_at=None, ttl=None, external=False):
    """Relative (or APP_URL-absolute) temp-file link for ``file_id``."""
    token = issue_token(file_id, expires_at=expires_at, ttl=ttl)
    url = f"{TEMP_FILES_PATH}/{file_id}?{urlencode(token.query_params())}"
    if external:
        url = current_app.config["APP_URL"].rstrip("/") + url
    return url, token


def is_url_expiring_soon(url, buffer_minutes=30, now=None):
    """True if the link lacks a readable expiry or expires within the buffer."""
    try:
        query = parse_qs(urlsplit(url).query)
        expires = int(query["expires"][0])
    except (KeyError, IndexError, TypeError, ValueError):
        return True
    if now is None:
        now = _now_ms()
    return now > expires - buffer_minutes * 60 * 1000
