"""Tests for the HMAC signing primitives."""

import base64
import hashlib
import hmac

import pytest

from webhook_gate.core.signing import (
    InvalidInputError,
    UnsupportedAlgorithmError,
    compute_hmac,
    timing_safe_equal,
)

# RFC 4231, test case 2
RFC4231_KEY = "Jefe"
RFC4231_DATA = b"what do ya want for nothing?"
RFC4231_SHA256_HEX = "5bdcc146bf60754e6a042426089575c75a003f089d2739839dec58b964ec3843"


# ---------------------------------------------------------------------------
# compute_hmac
# ---------------------------------------------------------------------------


class TestComputeHmac:
    """Tests for compute_hmac."""

    def test_matches_rfc4231_vector_hex(self) -> None:
        """Hex output matches the published HMAC-SHA256 test vector."""
        assert compute_hmac(RFC4231_DATA, RFC4231_KEY, "sha256", "hex") == RFC4231_SHA256_HEX

    def test_matches_rfc4231_vector_base64(self) -> None:
        """Base64 output encodes the same digest bytes."""
        expected = base64.b64encode(bytes.fromhex(RFC4231_SHA256_HEX)).decode()
        assert compute_hmac(RFC4231_DATA, RFC4231_KEY) == expected

    def test_defaults_are_sha256_base64(self) -> None:
        """Default algorithm and encoding follow Shopify's convention."""
        body = b'{"id":1}'
        expected = base64.b64encode(hmac.new(b"shhh", body, hashlib.sha256).digest()).decode()
        assert compute_hmac(body, "shhh") == expected

    def test_deterministic(self) -> None:
        """Identical inputs always produce the identical digest."""
        body = b'{"id": 123, "title": "Test Product"}'
        digests = {compute_hmac(body, "secret") for _ in range(20)}
        assert len(digests) == 1

    def test_single_byte_change_changes_digest(self) -> None:
        """Flipping any single bit of the body yields a different digest."""
        body = bytearray(b'{"id": 123, "note": "sampled bit flips"}')
        original = compute_hmac(bytes(body), "secret")

        for index in range(0, len(body), 3):
            for bit in (0, 3, 7):
                mutated = bytearray(body)
                mutated[index] ^= 1 << bit
                assert compute_hmac(bytes(mutated), "secret") != original

    def test_empty_body_is_allowed(self) -> None:
        """An empty body is a valid input."""
        expected = hmac.new(b"secret", b"", hashlib.sha256).hexdigest()
        assert compute_hmac(b"", "secret", encoding="hex") == expected

    def test_hex_is_lowercase(self) -> None:
        """Hex digests use lowercase characters."""
        digest = compute_hmac(b"payload", "secret", encoding="hex")
        assert digest == digest.lower()
        assert len(digest) == 64

    @pytest.mark.parametrize("algorithm", ["sha1", "sha512", "sha3_256"])
    def test_other_algorithms(self, algorithm: str) -> None:
        """Any hashlib digest usable with HMAC is supported."""
        expected = hmac.new(b"secret", b"payload", algorithm).hexdigest()
        assert compute_hmac(b"payload", "secret", algorithm, "hex") == expected

    def test_accepts_bytearray_and_memoryview(self) -> None:
        """Bytes-like bodies hash the same as bytes."""
        expected = compute_hmac(b"payload", "secret")
        assert compute_hmac(bytearray(b"payload"), "secret") == expected
        assert compute_hmac(memoryview(b"payload"), "secret") == expected

    def test_unicode_secret(self) -> None:
        """Secrets are UTF-8 encoded before keying."""
        expected = hmac.new("clé-secrète".encode(), b"x", hashlib.sha256).hexdigest()
        assert compute_hmac(b"x", "clé-secrète", encoding="hex") == expected

    def test_lone_surrogate_secret(self) -> None:
        """A secret with a lone surrogate still produces a stable digest."""
        digest = compute_hmac(b"x", "\udcff")
        assert digest == compute_hmac(b"x", "\udcff")
        assert digest != compute_hmac(b"x", "\udcfe")

    def test_empty_secret_rejected(self) -> None:
        """A zero-length key is treated as a misconfiguration."""
        with pytest.raises(InvalidInputError, match="secret"):
            compute_hmac(b"payload", "")

    @pytest.mark.parametrize("algorithm", ["md42", "not-a-hash", "", "shake_128"])
    def test_unsupported_algorithm_rejected(self, algorithm: str) -> None:
        """Unknown or variable-length digests fail loudly."""
        with pytest.raises(UnsupportedAlgorithmError):
            compute_hmac(b"payload", "secret", algorithm)

    def test_unsupported_algorithm_is_invalid_input(self) -> None:
        """UnsupportedAlgorithmError is part of the InvalidInputError family."""
        with pytest.raises(InvalidInputError):
            compute_hmac(b"payload", "secret", "md42")

    def test_unknown_encoding_rejected(self) -> None:
        """Only hex and base64 encodings are accepted."""
        with pytest.raises(InvalidInputError, match="encoding"):
            compute_hmac(b"payload", "secret", "sha256", "base32")  # type: ignore[arg-type]

    @pytest.mark.parametrize("body", [None, '{"id": 1}'])
    def test_non_bytes_body_rejected(self, body: object) -> None:
        """Decoded or missing bodies cannot be verified."""
        with pytest.raises(InvalidInputError, match="raw_body"):
            compute_hmac(body, "secret")  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# timing_safe_equal
# ---------------------------------------------------------------------------


class TestTimingSafeEqual:
    """Tests for timing_safe_equal."""

    @pytest.mark.parametrize(
        "value",
        ["", "a", "abc123==", "5bdcc146bf60754e6a042426089575c7", "日本語テスト"],
    )
    def test_reflexive(self, value: str) -> None:
        """Every string equals itself."""
        assert timing_safe_equal(value, value) is True

    @pytest.mark.parametrize(("len_a", "len_b"), [(0, 1), (1, 0), (43, 44), (44, 43), (10, 64)])
    def test_length_mismatch_is_false(self, len_a: int, len_b: int) -> None:
        """Different lengths never compare equal."""
        assert timing_safe_equal("a" * len_a, "a" * len_b) is False

    def test_same_length_mismatch(self) -> None:
        """Equal-length strings differing in one position are unequal."""
        assert timing_safe_equal("abcdef", "abcdeg") is False
        assert timing_safe_equal("abcdef", "xbcdef") is False

    def test_case_sensitive(self) -> None:
        """Comparison is exact; no case folding."""
        assert timing_safe_equal("ABCDEF", "abcdef") is False

    def test_lone_surrogates_do_not_raise(self) -> None:
        """Strings that are not valid UTF-8 still compare to a boolean."""
        assert timing_safe_equal("\udcff", "\udcff") is True
        assert timing_safe_equal("\udcff", "\udcfe") is False
        assert timing_safe_equal("\udcff", "abc") is False

    def test_non_ascii_length_measured_in_bytes(self) -> None:
        """Strings with equal character counts but different byte lengths are unequal."""
        assert timing_safe_equal("é", "e") is False
        assert timing_safe_equal("日本", "日本") is True
