"""Inbound request checks: the secret gate and per-field schema validation.

Field rules are JSON Schema fragments validated with ``jsonschema``.  Fields
are checked in route order and the first failure decides the outcome:
``tag`` and ``platform`` failures are soft declines (202), everything else is
a hard validation failure (400).
"""

from __future__ import annotations

import hmac
from typing import Iterable, Mapping

from eth_hash.auto import keccak
from jsonschema import Draft202012Validator

from push_release.errors import SoftDeclined, Unauthorized, ValidationFailed

INVALID_SECRET = "Invalid secret"

TAG_PATTERN = r"^(?:nightly|v[0-9]+\.[0-9]+\.[0-9]+)\Z"

FIELD_SCHEMAS: dict[str, dict] = {
    "secret": {"type": "string", "minLength": 3},
    "tag": {"type": "string", "pattern": TAG_PATTERN},
    "commit": {"type": "string", "pattern": r"^[0-9a-fA-F]{40}\Z"},
    "filename": {"type": "string", "minLength": 3},
    "sha3": {"type": "string", "pattern": r"^[0-9a-fA-F]{64}\Z"},
}

SOFT_FIELDS = frozenset({"tag", "platform"})

RELEASE_FIELDS = ("tag", "commit", "secret")
BUILD_FIELDS = ("tag", "platform", "commit", "sha3", "filename", "secret")


def keccak_hex(value: str) -> str:
    """Lower-case hex keccak-256 digest of a UTF-8 string."""
    return keccak(value.encode("utf-8")).hex()


def check_secret(secret: str | None, expected_hash: str) -> None:
    """Raise :class:`Unauthorized` unless ``keccak256(secret)`` matches."""
    if not secret:
        raise Unauthorized(INVALID_SECRET)
    if not hmac.compare_digest(keccak_hex(secret), expected_hash.lower()):
        raise Unauthorized(INVALID_SECRET)


class RequestValidator:
    """Schema checks for push-release and push-build parameters."""

    def __init__(self, supported_platforms: Iterable[str]) -> None:
        schemas = dict(FIELD_SCHEMAS)
        schemas["platform"] = {"type": "string", "enum": sorted(supported_platforms)}
        self._validators = {
            name: Draft202012Validator(schema) for name, schema in schemas.items()
        }

    def is_valid(self, name: str, value: str | None) -> bool:
        return self._validators[name].is_valid(value)

    def validate(self, fields: Iterable[str], values: Mapping[str, str | None]) -> None:
        """Check *fields* in order, raising on the first invalid one."""
        for name in fields:
            value = values.get(name)
            if self.is_valid(name, value):
                continue
            message = _describe(name, value)
            if name in SOFT_FIELDS:
                raise SoftDeclined(message)
            raise ValidationFailed(message)

    def validate_release(self, *, tag: str, commit: str, secret: str | None) -> None:
        self.validate(RELEASE_FIELDS, {"tag": tag, "commit": commit, "secret": secret})

    def validate_build(
        self,
        *,
        tag: str,
        platform: str,
        commit: str | None,
        sha3: str | None,
        filename: str | None,
        secret: str | None,
    ) -> None:
        self.validate(
            BUILD_FIELDS,
            {
                "tag": tag,
                "platform": platform,
                "commit": commit,
                "sha3": sha3,
                "filename": filename,
                "secret": secret,
            },
        )


def _describe(name: str, value: str | None) -> str:
    if value is None or value == "":
        return f"Missing {name}"
    if name == "secret":
        # Never echo the secret back.
        return "Invalid secret format"
    return f"Invalid {name}: {value}"
