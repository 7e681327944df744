"""Tests for signed temp-file tokens."""
import time

import pytest

from stager.errors import Expired, InvalidSignature, ValidationError
from stager.services import signing_service


def _flip_bit(signature, index=0):
    raw = bytearray(bytes.fromhex(signature))
    raw[index] ^= 0x01
    return raw.hex()


def test_round_trip_before_expiry(app):
    token = signing_service.issue_token("abc", ttl=60)

    verified = signing_service.verify_token("abc", str(token.expires), token.signature)

    assert verified.file_id == "abc"
    assert verified.expires == token.expires


def test_token_expires(app):
    token = signing_service.issue_token("abc", expires_at=int(time.time() * 1000) + 1000)

    signing_service.verify_token("abc", token.expires, token.signature)
    with pytest.raises(Expired):
        signing_service.verify_token(
            "abc", token.expires, token.signature, now=token.expires + 500
        )


def test_expiry_instant_is_already_expired(app):
    token = signing_service.issue_token("abc", expires_at=5_000)

    signing_service.verify_token("abc", token.expires, token.signature, now=4_999)
    with pytest.raises(Expired):
        signing_service.verify_token("abc", token.expires, token.signature, now=5_000)


@pytest.mark.parametrize("index", [0, 7, 31])
def test_bit_flip_is_invalid(app, index):
    token = signing_service.issue_token("abc", ttl=60)

    with pytest.raises(InvalidSignature):
        signing_service.verify_token("abc", token.expires, _flip_bit(token.signature, index))


def test_signature_is_checked_before_expiry(app):
    token = signing_service.issue_token("abc", expires_at=1_000)

    with pytest.raises(InvalidSignature):
        signing_service.verify_token("abc", token.expires, _flip_bit(token.signature), now=10_000)


def test_signature_bound_to_file_and_expiry(app):
    token = signing_service.issue_token("abc", ttl=60)

    with pytest.raises(InvalidSignature):
        signing_service.verify_token("abd", token.expires, token.signature)
    with pytest.raises(InvalidSignature):
        signing_service.verify_token("abc", token.expires + 1, token.signature)


def test_secret_change_invalidates_tokens(app):
    token = signing_service.issue_token("abc", ttl=60)
    app.config["FILE_SIGNING_SECRET"] = "rotated"

    with pytest.raises(InvalidSignature):
        signing_service.verify_token("abc", token.expires, token.signature)


@pytest.mark.parametrize("expires", ["soon", "", None, "12.5"])
def test_non_numeric_expiry_is_validation_error(app, expires):
    with pytest.raises(ValidationError):
        signing_service.verify_token("abc", expires, "00")


def test_build_signed_url(app):
    url, token = signing_service.build_signed_url("abc", ttl=60)

    assert url.startswith("/api/temp/files/abc?")
    assert f"expires={token.expires}" in url
    assert f"signature={token.signature}" in url


def test_build_signed_url_external(app):
    url, _ = signing_service.build_signed_url("abc", ttl=60, external=True)
    assert url.startswith("http://localhost:5000/api/temp/files/abc?")


def test_is_url_expiring_soon(app):
    url, token = signing_service.build_signed_url("abc", expires_at=10 * 60 * 1000 * 6)

    assert not signing_service.is_url_expiring_soon(url, buffer_minutes=30, now=0)
    assert signing_service.is_url_expiring_soon(url, buffer_minutes=30, now=token.expires - 60_000)
    assert signing_service.is_url_expiring_soon("/api/temp/files/abc")


def test_non_ascii_signature_is_invalid(app):
    token = signing_service.issue_token("file-1", ttl=60)

    with pytest.raises(InvalidSignature):
        signing_service.verify_token("file-1", token.expires, "ü" + token.signature[1:])
