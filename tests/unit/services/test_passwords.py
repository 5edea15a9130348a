from src.app.services.passwords import (
    hash_password,
    validate_password,
    verify_password,
)
from src.app.services.slug import generate_slug


def test_valid_password_has_no_violations():
    assert validate_password("correct horse battery") == []


def test_short_password_rejected():
    errors = validate_password("short")
    assert len(errors) == 1
    assert "at least 8" in errors[0]


def test_long_password_rejected():
    assert validate_password("x" * 73)
    assert validate_password("x" * 100)
    assert validate_password("x" * 72) == []


def test_length_limit_counts_utf8_bytes():
    # 40 characters, 80 bytes
    errors = validate_password("\u00e9" * 40)
    assert len(errors) == 1
    assert "72 bytes" in errors[0]


def test_longest_accepted_password_hashes_and_verifies():
    password = "x" * 71 + "y"
    assert validate_password(password) == []

    password_hash = hash_password(password)

    assert verify_password(password_hash, password)


def test_common_password_rejected_case_insensitive():
    assert validate_password("Password123")


def test_hash_and_verify():
    password_hash = hash_password("correct horse battery")

    assert password_hash.startswith("$2")
    assert verify_password(password_hash, "correct horse battery")
    assert not verify_password(password_hash, "wrong horse battery")


def test_verify_with_malformed_hash_is_false():
    assert not verify_password("not-a-bcrypt-hash", "anything")


def test_generate_slug():
    assert generate_slug("My Channel") == "my-channel"
    assert generate_slug("  Acme, Inc.  ") == "acme-inc"
    assert generate_slug("!!!") == "my-channel"
    assert generate_slug("!!!", fallback="workspace") == "workspace"
