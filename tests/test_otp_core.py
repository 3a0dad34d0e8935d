import pyotp
import pytest

from gmfa.core import otp_core
from gmfa.core.errors import InvalidSecretEncodingError

# RFC 6238 appendix B, SHA-1 column (8 digits, 30 s step)
RFC6238_SHA1_VECTORS = [
    (59, "94287082"),
    (1111111109, "07081804"),
    (1111111111, "14050471"),
    (1234567890, "89005924"),
    (2000000000, "69279037"),
    (20000000000, "65353130"),
]

# RFC 4226 appendix D
RFC4226_HOTP_VECTORS = [
    "755224", "287082", "359152", "969429", "338314",
    "254676", "287922", "162583", "399871", "520489",
]


@pytest.mark.parametrize("timestamp,expected", RFC6238_SHA1_VECTORS)
def test_totp_matches_rfc6238_vectors(rfc_secret, timestamp, expected):
    assert otp_core.totp(rfc_secret, timestamp, 30, 8) == expected


def test_hotp_matches_rfc4226_vectors(rfc_secret):
    assert [otp_core.hotp(rfc_secret, i) for i in range(10)] == RFC4226_HOTP_VECTORS


def test_short_rfc_pattern_secret_matches_reference_implementation():
    # base32 of ASCII "1234567890"
    secret = "GEZDGNBVGY3TQOJQ"
    assert otp_core.totp(secret, 59, 30, 8) == pyotp.TOTP(secret, digits=8, interval=30).at(59)


@pytest.mark.parametrize("timestamp", [0, 59, 1111111109, 1700000000, 2000000000])
def test_totp_agrees_with_pyotp(timestamp):
    secret = "JBSWY3DPEHPK3PXP"
    assert otp_core.totp(secret, timestamp) == pyotp.TOTP(secret).at(timestamp)


def test_secret_is_case_insensitive(rfc_secret):
    assert otp_core.totp(rfc_secret.lower(), 59, 30, 8) == "94287082"


def test_totp_is_deterministic(rfc_secret):
    codes = {otp_core.totp(rfc_secret, 1234567890, 30, 6) for _ in range(5)}
    assert len(codes) == 1


@pytest.mark.parametrize("start", [0, 30, 1111111080, 1700000010])
def test_code_is_stable_within_a_step(rfc_secret, start):
    assert start % 30 == 0
    assert otp_core.totp(rfc_secret, start, 30, 6) == otp_core.totp(rfc_secret, start + 29, 30, 6)


def test_code_changes_on_the_next_step(rfc_secret):
    # counters 1 and 2 -> RFC 4226 values 287082 and 359152
    assert otp_core.totp(rfc_secret, 30, 30, 6) == "287082"
    assert otp_core.totp(rfc_secret, 60, 30, 6) == "359152"


def test_custom_timestep_changes_counter(rfc_secret):
    # counter = 59 // 60 = 0
    assert otp_core.totp(rfc_secret, 59, 60, 6) == RFC4226_HOTP_VECTORS[0]


@pytest.mark.parametrize("digits", [6, 7, 8])
def test_codes_are_zero_padded_to_digits(rfc_secret, digits):
    for timestamp in range(0, 30 * 200, 30):
        code = otp_core.totp(rfc_secret, timestamp, 30, digits)
        assert len(code) == digits
        assert code.isdigit()


def test_leading_zero_is_kept(rfc_secret):
    assert otp_core.totp(rfc_secret, 1111111109, 30, 8).startswith("0")


@pytest.mark.parametrize("secret", ["not-base32!!", "ABC", "", "ÄÖÜÄÖÜÄÖ", "GEZDGNBV1"])
def test_malformed_secret_raises(secret):
    with pytest.raises(InvalidSecretEncodingError):
        otp_core.totp(secret, 59, 30, 6)


def test_invalid_secret_error_is_a_value_error():
    assert issubclass(InvalidSecretEncodingError, ValueError)


@pytest.mark.parametrize("timestep", [0, -30])
def test_non_positive_timestep_is_rejected(rfc_secret, timestep):
    with pytest.raises(ValueError):
        otp_core.totp(rfc_secret, 59, timestep, 6)


@pytest.mark.parametrize("digits", [0, 11])
def test_out_of_range_digits_are_rejected(rfc_secret, digits):
    with pytest.raises(ValueError):
        otp_core.totp(rfc_secret, 59, 30, digits)


def test_negative_timestamp_is_rejected(rfc_secret):
    with pytest.raises(ValueError):
        otp_core.totp(rfc_secret, -1, 30, 6)


def test_int_to_bytes_is_8_byte_big_endian():
    assert otp_core.int_to_bytes(1) == b"\x00\x00\x00\x00\x00\x00\x00\x01"
    assert otp_core.int_to_bytes(0x0102030405060708) == bytes(range(1, 9))


def test_dynamic_truncate_rfc4226_example():
    digest = bytes.fromhex("1f8698690e02ca16618550ef7f19da8e945b555a")
    assert otp_core.dynamic_truncate(digest) == 0x50EF7F19


def test_dynamic_truncate_clears_sign_bit():
    digest = bytes([0xFF] * 19 + [0x00])
    assert otp_core.dynamic_truncate(digest) == 0x7FFFFFFF


def test_seconds_remaining_and_valid_until():
    assert otp_core.seconds_remaining(59, 30) == 1
    assert otp_core.seconds_remaining(60, 30) == 30
    assert otp_core.valid_until(59, 30) == 60
    assert otp_core.valid_until(60, 30) == 90


@pytest.mark.parametrize("timestep", [0.5, 30.0, True])
def test_non_integer_timestep_is_rejected(rfc_secret, timestep):
    with pytest.raises(ValueError):
        otp_core.totp(rfc_secret, 59, timestep, 6)
    with pytest.raises(ValueError):
        otp_core.seconds_remaining(59, timestep)
