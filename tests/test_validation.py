"""Tests for the secret gate and request field validation."""

from __future__ import annotations

import pytest

from fakes import COMMIT, PLATFORM, SECRET, SHA3
from push_release.core.validation import (
    INVALID_SECRET,
    RequestValidator,
    check_secret,
    keccak_hex,
)
from push_release.errors import SoftDeclined, Unauthorized, ValidationFailed

PLATFORMS = ["x86_64-apple-darwin", "x86_64-pc-windows-msvc", PLATFORM]


@pytest.fixture()
def validator() -> RequestValidator:
    return RequestValidator(PLATFORMS)


class TestSecretGate:
    def test_keccak_of_known_string(self):
        assert keccak_hex("test") == (
            "9c22ff5f21f0b81b113e63f7db6da94fedef11b2119b4088b89664fb9a3cb658"
        )

    def test_matching_secret_passes(self, secret_hash):
        check_secret(SECRET, secret_hash)

    def test_hash_comparison_ignores_case(self, secret_hash):
        check_secret(SECRET, secret_hash.upper())

    @pytest.mark.parametrize("secret", ["xxx", "xx", "Test", "test "])
    def test_wrong_secret_is_unauthorized(self, secret_hash, secret):
        with pytest.raises(Unauthorized) as exc_info:
            check_secret(secret, secret_hash)
        assert exc_info.value.message == INVALID_SECRET
        assert exc_info.value.status_code == 401

    @pytest.mark.parametrize("secret", [None, ""])
    def test_missing_secret_is_unauthorized(self, secret_hash, secret):
        with pytest.raises(Unauthorized):
            check_secret(secret, secret_hash)


class TestTag:
    @pytest.mark.parametrize("tag", ["nightly", "v1.7.13", "v0.0.0", "v10.20.300"])
    def test_valid_tags(self, validator, tag):
        assert validator.is_valid("tag", tag)

    @pytest.mark.parametrize(
        "tag",
        ["xxx", "v1.9.5-ci0", "1.7.13", "v1.7", "Nightly", "nightly-1", "v1.x.3", "", "v1.7.13\n", "nightly\n"],
    )
    def test_invalid_tags(self, validator, tag):
        assert not validator.is_valid("tag", tag)

    def test_invalid_tag_is_soft_declined(self, validator):
        with pytest.raises(SoftDeclined) as exc_info:
            validator.validate_release(tag="v1.9.5-ci0", commit=COMMIT, secret=SECRET)
        assert "tag" in exc_info.value.message
        assert exc_info.value.status_code == 202


class TestCommit:
    def test_forty_hex_chars_pass(self, validator):
        assert validator.is_valid("commit", COMMIT)
        assert validator.is_valid("commit", COMMIT.upper())

    @pytest.mark.parametrize(
        "commit",
        ["123", COMMIT[:-1], COMMIT + "0", "g" + COMMIT[1:], "0x" + COMMIT[2:], COMMIT + "\n", None],
    )
    def test_other_commits_fail(self, validator, commit):
        assert not validator.is_valid("commit", commit)

    def test_invalid_commit_is_hard_failure(self, validator):
        with pytest.raises(ValidationFailed) as exc_info:
            validator.validate_release(tag="v1.7.13", commit="123", secret=SECRET)
        assert exc_info.value.message == "Invalid commit: 123"
        assert exc_info.value.status_code == 400


class TestPlatform:
    def test_whitelisted_platform_passes(self, validator):
        for platform in PLATFORMS:
            assert validator.is_valid("platform", platform)

    @pytest.mark.parametrize("platform", ["aarch64-unknown-linux-gnu", "linux", ""])
    def test_unknown_platform_is_soft_declined(self, validator, platform):
        with pytest.raises(SoftDeclined) as exc_info:
            validator.validate_build(
                tag="v1.7.13",
                platform=platform,
                commit=COMMIT,
                sha3=SHA3,
                filename="parity",
                secret=SECRET,
            )
        assert "platform" in exc_info.value.message


class TestBuildFields:
    def _build(self, validator, **overrides):
        values = dict(
            tag="v1.7.13",
            platform=PLATFORM,
            commit=COMMIT,
            sha3=SHA3,
            filename="parity",
            secret=SECRET,
        )
        values.update(overrides)
        validator.validate_build(**values)

    def test_valid_build_passes(self, validator):
        self._build(validator)

    @pytest.mark.parametrize("sha3", ["none", "beefcafe", SHA3 + "00", SHA3 + "\n", None])
    def test_bad_sha3_is_hard_failure(self, validator, sha3):
        with pytest.raises(ValidationFailed) as exc_info:
            self._build(validator, sha3=sha3)
        assert "sha3" in exc_info.value.message

    @pytest.mark.parametrize("filename", ["ab", "", None])
    def test_short_or_missing_filename_is_hard_failure(self, validator, filename):
        with pytest.raises(ValidationFailed) as exc_info:
            self._build(validator, filename=filename)
        assert "filename" in exc_info.value.message

    def test_short_secret_is_hard_failure_without_echo(self, validator):
        with pytest.raises(ValidationFailed) as exc_info:
            self._build(validator, secret="ab")
        assert exc_info.value.message == "Invalid secret format"

    def test_first_failing_field_decides(self, validator):
        # tag is checked before commit, so the soft decline wins.
        with pytest.raises(SoftDeclined):
            self._build(validator, tag="xxx", commit="123")
        with pytest.raises(ValidationFailed):
            self._build(validator, commit="123", sha3="none")
