import base64

from core.security import decode_basic_auth, get_password_hash, verify_password


def test_verify_password_returns_false_for_invalid_hash() -> None:
    assert verify_password("123456", "plain-text-password") is False


def test_password_hash_round_trip() -> None:
    hashed = get_password_hash("secret")

    assert hashed != "secret"
    assert verify_password("secret", hashed) is True
    assert verify_password("other", hashed) is False


def test_decode_basic_auth() -> None:
    header = "Basic " + base64.b64encode(b"bob@example.com:pa:ss").decode()

    assert decode_basic_auth(header) == ("bob@example.com", "pa:ss")
    assert decode_basic_auth(None) is None
    assert decode_basic_auth("Basic %%%") is None
    assert decode_basic_auth("Token abc") is None
