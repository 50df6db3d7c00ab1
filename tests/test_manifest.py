"""Tests for manifest parsing and the metadata sources."""

from __future__ import annotations

import logging
import textwrap

import pytest

from fakes import COMMIT, MANIFEST, FakeFetcher, manifest_for
from push_release.core.manifest import (
    LEGACY_FORKS_PATH,
    LEGACY_TRACK_PATH,
    LEGACY_VERSION_PATH,
    LegacySource,
    ManifestSource,
    metadata_source,
    parse_legacy_forks,
    parse_legacy_track,
    parse_manifest,
)
from push_release.errors import ManifestError, MetadataFetchError
from push_release.model import MetadataSourceKind
from push_release.model.release import SemVer

MISC_RS = textwrap.dedent("""\
    use std::fs;

    /// Current track.
    const THIS_TRACK: &'static str = "beta";
""")

ETHEREUM_MOD_RS = textwrap.dedent("""\
    /// Most recent fork block that this client supports.
    pub const FORK_SUPPORTED_FOUNDATION: u64 = 4370000;
    pub const FORK_SUPPORTED_ROPSTEN: u64 = 10;
    pub const FORK_SUPPORTED_KOVAN: u64 = 0;
""")

CARGO_TOML = textwrap.dedent("""\
    [package]
    description = "Parity Ethereum client"
    name = "parity"
    version = "1.8.2"
""")


class TestParseManifest:
    def test_full_manifest(self):
        meta = parse_manifest(MANIFEST)
        assert meta.version == SemVer(1, 7, 13)
        assert meta.track == "stable"
        assert meta.forks == {"foundation": 4370000, "kovan": 5067000}
        assert meta.critical is False

    def test_critical_flag(self):
        assert parse_manifest(manifest_for(critical="true")).critical is True

    def test_missing_metadata_block(self):
        meta = parse_manifest('[package]\nname = "parity"\nversion = "2.0.1"\n')
        assert meta.version == SemVer(2, 0, 1)
        assert meta.track is None
        assert meta.forks == {}
        assert meta.critical is False

    def test_networks_table(self):
        text = textwrap.dedent("""\
            [package]
            version = "1.9.0"

            [package.metadata]
            track = "beta"

            [package.metadata.networks]
            foundation = { forkBlock = 4370000, critical = false }
            Kovan = { forkBlock = 5067000, critical = true }
        """)
        meta = parse_manifest(text)
        assert meta.forks == {"foundation": 4370000, "kovan": 5067000}
        assert meta.critical is True

    def test_fork_lookup_is_case_insensitive(self):
        assert parse_manifest(MANIFEST).fork_block("KOVAN") == 5067000
        assert parse_manifest(MANIFEST).fork_block("ropsten") is None

    def test_workspace_inherited_version(self):
        text = textwrap.dedent("""\
            [workspace.package]
            version = "1.10.0"

            [package]
            name = "parity"
            version.workspace = true
        """)
        assert parse_manifest(text).version == SemVer(1, 10, 0)

    @pytest.mark.parametrize("value", ['"abc"', "-5", "true", "1.5", "4294967296", "99999999999"])
    def test_unparseable_fork_defaults_to_zero(self, value, caplog):
        text = manifest_for() + f"ropsten = {value}\n"
        with caplog.at_level(logging.WARNING, logger="push_release.core.manifest"):
            meta = parse_manifest(text)
        assert meta.forks["ropsten"] == 0
        assert "ropsten" in caplog.text

    def test_numeric_string_fork_accepted(self):
        assert parse_manifest(manifest_for() + 'ropsten = "42"\n').forks["ropsten"] == 42

    def test_largest_uint32_fork_accepted(self):
        assert parse_manifest(manifest_for() + "ropsten = 4294967295\n").forks["ropsten"] == 4294967295

    def test_invalid_toml(self):
        with pytest.raises(ManifestError, match="Unable to parse manifest"):
            parse_manifest("[package\nversion = ")

    def test_missing_version(self):
        with pytest.raises(ManifestError, match="version"):
            parse_manifest('[package]\nname = "parity"\n')

    def test_missing_package(self):
        with pytest.raises(ManifestError):
            parse_manifest('[dependencies]\nserde = "1"\n')


class TestManifestSource:
    def test_single_fetch(self):
        fetcher = FakeFetcher({"Cargo.toml": MANIFEST})
        meta = ManifestSource(fetcher).load(COMMIT)
        assert meta.track == "stable"
        assert fetcher.requests == [(COMMIT, "Cargo.toml")]

    def test_custom_path(self):
        fetcher = FakeFetcher({"parity/Cargo.toml": MANIFEST})
        assert ManifestSource(fetcher, "parity/Cargo.toml").load_track(COMMIT) == "stable"

    def test_fetch_failure_propagates(self):
        with pytest.raises(MetadataFetchError):
            ManifestSource(FakeFetcher()).load(COMMIT)


class TestLegacySource:
    @pytest.fixture()
    def fetcher(self) -> FakeFetcher:
        return FakeFetcher(
            {
                LEGACY_TRACK_PATH: MISC_RS,
                LEGACY_FORKS_PATH: ETHEREUM_MOD_RS,
                LEGACY_VERSION_PATH: CARGO_TOML,
            }
        )

    def test_parse_track(self):
        assert parse_legacy_track(MISC_RS) == "beta"
        assert parse_legacy_track("fn main() {}") is None

    def test_parse_forks(self):
        assert parse_legacy_forks(ETHEREUM_MOD_RS) == {
            "foundation": 4370000,
            "ropsten": 10,
            "kovan": 0,
        }

    def test_oversized_fork_defaults_to_zero(self):
        text = "pub const FORK_SUPPORTED_KOVAN: u64 = 99999999999;\n"
        assert parse_legacy_forks(text) == {"kovan": 0}

    def test_load_reads_three_files(self, fetcher):
        meta = LegacySource(fetcher).load(COMMIT)
        assert meta.track == "beta"
        assert meta.version == SemVer(1, 8, 2)
        assert meta.forks["foundation"] == 4370000
        assert meta.critical is False
        assert [path for _, path in fetcher.requests] == [
            LEGACY_TRACK_PATH,
            LEGACY_FORKS_PATH,
            LEGACY_VERSION_PATH,
        ]

    def test_load_track_reads_one_file(self, fetcher):
        assert LegacySource(fetcher).load_track(COMMIT) == "beta"
        assert fetcher.requests == [(COMMIT, LEGACY_TRACK_PATH)]

    def test_missing_version(self, fetcher):
        fetcher.files[LEGACY_VERSION_PATH] = "[package]\n"
        with pytest.raises(ManifestError):
            LegacySource(fetcher).load(COMMIT)


def test_metadata_source_selection():
    fetcher = FakeFetcher()
    assert isinstance(metadata_source(MetadataSourceKind.MANIFEST, fetcher), ManifestSource)
    assert isinstance(metadata_source(MetadataSourceKind.LEGACY, fetcher), LegacySource)
