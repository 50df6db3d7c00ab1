"""Load bundled contract ABIs and encode calls against them.

Usage::

    from push_release.contracts.abi import load_abi, encode_call

    operations = load_abi("operations.json")
    data = encode_call(operations, "addRelease", [release, 0, 1, 67341, False])
"""

from __future__ import annotations

import json
from importlib import resources
from pathlib import Path
from typing import Any, Sequence

from eth_abi import decode, encode
from eth_hash.auto import keccak

ABI_DIR = "data/abi"

REGISTRAR_ABI = "registrar.json"
GITHUBHINT_ABI = "githubhint.json"
OPERATIONS_ABI = "operations.json"


def _abi_path(name: str, abi_dir: Path | None = None) -> Path:
    """Resolve an ABI file.

    Priority:
    1. Explicit *abi_dir* override from configuration
    2. Canonical ``src/push_release/data/abi/`` (relative to this file)
    3. pip-installed package data via importlib.resources
    """
    if abi_dir is not None:
        return Path(abi_dir) / name

    canonical = Path(__file__).resolve().parents[1] / ABI_DIR / name
    if canonical.exists():
        return canonical

    with resources.as_file(resources.files("push_release") / ABI_DIR / name) as p:
        return p


def load_abi(name: str, abi_dir: Path | None = None) -> list[dict[str, Any]]:
    """Load a contract ABI (a JSON list of entries) by filename."""
    path = _abi_path(name, abi_dir)
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, list):
        raise ValueError(f"{path}: ABI must be a JSON list")
    return data


def function_entry(abi: Sequence[dict[str, Any]], method: str) -> dict[str, Any]:
    for entry in abi:
        if entry.get("type", "function") == "function" and entry.get("name") == method:
            return entry
    raise KeyError(f"ABI has no function {method!r}")


def input_types(entry: dict[str, Any]) -> list[str]:
    return [arg["type"] for arg in entry.get("inputs", [])]


def output_types(entry: dict[str, Any]) -> list[str]:
    return [arg["type"] for arg in entry.get("outputs", [])]


def function_signature(entry: dict[str, Any]) -> str:
    return f"{entry['name']}({','.join(input_types(entry))})"


def function_selector(entry: dict[str, Any]) -> bytes:
    return keccak(function_signature(entry).encode("ascii"))[:4]


def _coerce(abi_type: str, value: Any) -> Any:
    """Adapt JSON-ish values to what ``eth_abi`` expects.

    ``0x``-prefixed strings become raw bytes for ``bytes``/``bytesN``; other
    strings are taken as UTF-8 text (``bytes32`` platform names).  Decimal
    strings become integers for ``uintN``/``intN``.
    """
    if abi_type.startswith("bytes") and isinstance(value, str):
        if value.startswith("0x"):
            return bytes.fromhex(value[2:])
        return value.encode("utf-8")
    if abi_type.startswith(("uint", "int")) and isinstance(value, str):
        return int(value, 0)
    return value


def encode_call(abi: Sequence[dict[str, Any]], method: str, args: Sequence[Any]) -> str:
    """ABI-encode a call to *method*, returning ``0x``-prefixed hex calldata."""
    entry = function_entry(abi, method)
    types = input_types(entry)
    if len(types) != len(args):
        raise ValueError(
            f"{function_signature(entry)} takes {len(types)} arguments, got {len(args)}"
        )
    payload = encode(types, [_coerce(t, v) for t, v in zip(types, args)])
    return "0x" + (function_selector(entry) + payload).hex()


def decode_result(abi: Sequence[dict[str, Any]], method: str, data: str) -> tuple:
    """Decode the hex output of an ``eth_call`` to *method*."""
    entry = function_entry(abi, method)
    raw = bytes.fromhex(data[2:] if data.startswith("0x") else data)
    return tuple(decode(output_types(entry), raw))


def decode_call(abi: Sequence[dict[str, Any]], data: str) -> tuple[str, tuple]:
    """Inverse of :func:`encode_call`: return ``(method, args)`` for calldata."""
    raw = bytes.fromhex(data[2:] if data.startswith("0x") else data)
    for entry in abi:
        if entry.get("type", "function") != "function":
            continue
        if function_selector(entry) == raw[:4]:
            return entry["name"], tuple(decode(input_types(entry), raw[4:]))
    raise KeyError(f"No ABI function matches selector 0x{raw[:4].hex()}")
