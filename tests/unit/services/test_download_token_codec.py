"""
Unit tests for DownloadTokenCodec

Signing, scoping and expiry of stateless download tokens.
"""
import hmac
import statistics
import time
from datetime import timedelta
from unittest.mock import patch
from urllib.parse import parse_qs, urlparse
from uuid import uuid4

import pytest

from src.app.services.download_token_codec import DownloadTokenCodec

SECRET = "unit-test-download-secret-0123456789abcdef"
NOW = 1_700_000_000_000


class FakeClock:
    def __init__(self, now: int = NOW):
        self.now = now

    def __call__(self) -> int:
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def codec(clock):
    return DownloadTokenCodec(SECRET, clock=clock)


@pytest.fixture
def ids():
    return {"product_id": uuid4(), "order_id": uuid4(), "user_id": uuid4()}


def test_issue_sets_expiry_from_ttl(codec, ids):
    link = codec.issue(ids["product_id"], ids["order_id"], ids["user_id"], timedelta(minutes=15))

    assert link.expires == NOW + 15 * 60 * 1000


def test_issue_builds_url_with_product_path_and_query(codec, ids):
    link = codec.issue(ids["product_id"], ids["order_id"], ids["user_id"], timedelta(minutes=15))

    parsed = urlparse(link.url)
    assert parsed.path == f"/products/download/{ids['product_id']}"

    query = parse_qs(parsed.query)
    assert query["token"] == [link.token]
    assert query["order"] == [str(ids["order_id"])]
    assert query["expires"] == [str(link.expires)]


def test_token_is_unpadded_base64url(codec, ids):
    link = codec.issue(ids["product_id"], ids["order_id"], ids["user_id"], timedelta(minutes=15))

    # 32-byte HMAC-SHA256 digest -> 43 base64url chars without padding
    assert len(link.token) == 43
    assert "=" not in link.token
    assert "+" not in link.token and "/" not in link.token


def test_issue_is_deterministic_for_same_inputs(codec, ids):
    first = codec.issue(ids["product_id"], ids["order_id"], ids["user_id"], timedelta(minutes=15))
    second = codec.issue(ids["product_id"], ids["order_id"], ids["user_id"], timedelta(minutes=15))

    assert first.token == second.token


def test_verify_accepts_issued_token(codec, ids):
    link = codec.issue(ids["product_id"], ids["order_id"], ids["user_id"], timedelta(minutes=15))

    assert codec.verify(ids["product_id"], ids["order_id"], ids["user_id"], link.token, link.expires)


def test_verify_accepts_string_and_uuid_ids_alike(codec, ids):
    link = codec.issue(ids["product_id"], ids["order_id"], ids["user_id"], timedelta(minutes=15))

    assert codec.verify(
        str(ids["product_id"]), str(ids["order_id"]), str(ids["user_id"]), link.token, link.expires
    )


@pytest.mark.parametrize("field", ["product_id", "order_id", "user_id"])
def test_mutating_any_scoped_id_invalidates_token(codec, ids, field):
    link = codec.issue(ids["product_id"], ids["order_id"], ids["user_id"], timedelta(minutes=15))

    tampered = dict(ids)
    tampered[field] = uuid4()

    assert not codec.verify(
        tampered["product_id"], tampered["order_id"], tampered["user_id"], link.token, link.expires
    )


def test_mutating_expiry_invalidates_token(codec, ids):
    link = codec.issue(ids["product_id"], ids["order_id"], ids["user_id"], timedelta(minutes=15))

    assert not codec.verify(
        ids["product_id"], ids["order_id"], ids["user_id"], link.token, link.expires + 60_000
    )


def test_verify_succeeds_at_exact_deadline(codec, clock, ids):
    link = codec.issue(ids["product_id"], ids["order_id"], ids["user_id"], timedelta(minutes=15))

    clock.now = link.expires

    assert codec.verify(ids["product_id"], ids["order_id"], ids["user_id"], link.token, link.expires)


def test_verify_fails_after_deadline(codec, clock, ids):
    link = codec.issue(ids["product_id"], ids["order_id"], ids["user_id"], timedelta(minutes=15))

    clock.now = link.expires + 1

    assert not codec.verify(ids["product_id"], ids["order_id"], ids["user_id"], link.token, link.expires)


def test_rotated_secret_rejects_old_tokens(clock, ids):
    old_codec = DownloadTokenCodec(SECRET, clock=clock)
    new_codec = DownloadTokenCodec(SECRET + "-rotated", clock=clock)

    link = old_codec.issue(ids["product_id"], ids["order_id"], ids["user_id"], timedelta(minutes=15))

    assert not new_codec.verify(ids["product_id"], ids["order_id"], ids["user_id"], link.token, link.expires)


@pytest.mark.parametrize("token", ["", "short", "x" * 200, "ünïcødé-token"])
def test_malformed_tokens_are_rejected(codec, ids, token):
    expires = NOW + 60_000

    assert not codec.verify(ids["product_id"], ids["order_id"], ids["user_id"], token, expires)


def test_verify_uses_constant_time_comparison(codec, ids):
    link = codec.issue(ids["product_id"], ids["order_id"], ids["user_id"], timedelta(minutes=15))

    with patch("hmac.compare_digest", wraps=hmac.compare_digest) as compare:
        assert codec.verify(ids["product_id"], ids["order_id"], ids["user_id"], link.token, link.expires)

    compare.assert_called_once()


def test_verify_time_does_not_depend_on_mismatch_position(codec, ids):
    link = codec.issue(ids["product_id"], ids["order_id"], ids["user_id"], timedelta(minutes=15))

    def flip(token: str, index: int) -> str:
        replacement = "A" if token[index] != "A" else "B"
        return token[:index] + replacement + token[index + 1:]

    def median_verify_time(token: str) -> float:
        samples = []
        for _ in range(2000):
            start = time.perf_counter()
            codec.verify(ids["product_id"], ids["order_id"], ids["user_id"], token, link.expires)
            samples.append(time.perf_counter() - start)
        return statistics.median(samples)

    early = median_verify_time(flip(link.token, 0))
    late = median_verify_time(flip(link.token, len(link.token) - 1))

    # Generous bound: only a short-circuiting compare would show a systematic gap
    assert max(early, late) / min(early, late) < 3.0
