"""Tests for Slack request signing."""

import pytest

from chatbridge.services.slack_signature import (
    SignatureError,
    compute_slack_signature,
    is_url_verification,
    verify_slack_signature,
)

SECRET = "8f742231b10e8888abcd99yyyzzz85a5"
BODY = b'{"type":"event_callback","event":{"type":"message","text":"hi"}}'
NOW = 1_700_000_000


class TestComputeSignature:
    """Test signature computation."""

    def test_deterministic(self):
        """Same inputs always produce the same signature."""
        first = compute_slack_signature(SECRET, str(NOW), BODY)
        second = compute_slack_signature(SECRET, str(NOW), BODY)

        assert first == second
        assert first.startswith("v0=")
        assert len(first) == 3 + 64

    def test_str_and_bytes_body_agree(self):
        assert compute_slack_signature(SECRET, "1", "abc") == compute_slack_signature(SECRET, "1", b"abc")

    def test_known_vector(self):
        """Matches the example from Slack's request verification guide."""
        body = (
            "token=xyzz0WbapA4vBCDEFasx0q6G&team_id=T1DC2JH3J&team_domain=testteamnow&channel_id=G8PSS9T3V"
            "&channel_name=foobar&user_id=U2CERLKJA&user_name=roadrunner&command=%2Fwebhook-collect&text="
            "&response_url=https%3A%2F%2Fhooks.slack.com%2Fcommands%2FT1DC2JH3J%2F397700885554%2F96rGlfmibIGlgcZRskXaIFfN"
            "&trigger_id=398738663015.47445629121.803a0bc887a14d10d2c447fce8b6703c"
        )
        signature = compute_slack_signature(SECRET, "1531420618", body)

        assert signature == "v0=a2114d57b48eac39b9ad189dd8316235a7b4a8d21a10bd27519666489c69b503"


class TestVerifySignature:
    """Test webhook verification."""

    def _headers(self, body: bytes = BODY, timestamp: int = NOW):
        return compute_slack_signature(SECRET, str(timestamp), body), str(timestamp)

    def test_valid_signature(self):
        signature, timestamp = self._headers()
        verify_slack_signature(SECRET, signature, timestamp, BODY, now=NOW)

    def test_flipped_body_byte_rejected(self):
        """Any change to the body invalidates the signature."""
        signature, timestamp = self._headers()
        tampered = bytearray(BODY)
        tampered[10] ^= 0x01

        with pytest.raises(SignatureError) as exc_info:
            verify_slack_signature(SECRET, signature, timestamp, bytes(tampered), now=NOW)
        assert exc_info.value.code == "invalid_signature"

    def test_flipped_timestamp_bit_rejected(self):
        """A timestamp one bit off, still inside the window, no longer matches."""
        signature, timestamp = self._headers()
        tampered = timestamp[:-1] + chr(ord(timestamp[-1]) ^ 0x01)
        assert abs(int(tampered) - NOW) <= 300

        with pytest.raises(SignatureError) as exc_info:
            verify_slack_signature(SECRET, signature, tampered, BODY, now=NOW)
        assert exc_info.value.code == "invalid_signature"

    def test_flipped_signature_digit_rejected(self):
        signature, timestamp = self._headers()
        for position in (len("v0="), len(signature) - 1):
            digit = signature[position]
            tampered = signature[:position] + ("1" if digit == "0" else "0") + signature[position + 1:]

            with pytest.raises(SignatureError) as exc_info:
                verify_slack_signature(SECRET, tampered, timestamp, BODY, now=NOW)
            assert exc_info.value.code == "invalid_signature"

    def test_wrong_secret_rejected(self):
        signature, timestamp = self._headers()

        with pytest.raises(SignatureError) as exc_info:
            verify_slack_signature("other-secret", signature, timestamp, BODY, now=NOW)
        assert exc_info.value.code == "invalid_signature"

    def test_inside_window_accepted(self):
        """A request exactly 300 seconds old or early is still accepted."""
        for offset in (-300, 300):
            signature, timestamp = self._headers(timestamp=NOW + offset)
            verify_slack_signature(SECRET, signature, timestamp, BODY, now=NOW, window_seconds=300)

    def test_outside_window_rejected(self):
        """Replayed requests are rejected even with a valid signature."""
        for offset in (-301, 301):
            signature, timestamp = self._headers(timestamp=NOW + offset)
            with pytest.raises(SignatureError) as exc_info:
                verify_slack_signature(SECRET, signature, timestamp, BODY, now=NOW, window_seconds=300)
            assert exc_info.value.code == "stale_timestamp"

    def test_missing_headers_rejected(self):
        signature, timestamp = self._headers()

        for sig, ts in ((None, timestamp), (signature, None), ("", "")):
            with pytest.raises(SignatureError) as exc_info:
                verify_slack_signature(SECRET, sig, ts, BODY, now=NOW)
            assert exc_info.value.code == "invalid_signature"

    def test_malformed_timestamp_rejected(self):
        signature, _ = self._headers()

        with pytest.raises(SignatureError) as exc_info:
            verify_slack_signature(SECRET, signature, "yesterday", BODY, now=NOW)
        assert exc_info.value.code == "invalid_signature"

    def test_non_utf8_body_does_not_crash(self):
        body = b"\xff\xfe\x00garbage"
        signature, timestamp = self._headers(body=body)
        verify_slack_signature(SECRET, signature, timestamp, body, now=NOW)


class TestUrlVerification:
    def test_challenge_payload(self):
        assert is_url_verification({"type": "url_verification", "challenge": "abc"})

    def test_other_payloads(self):
        assert not is_url_verification({"type": "event_callback"})
        assert not is_url_verification({"type": "url_verification"})
        assert not is_url_verification(["url_verification"])
