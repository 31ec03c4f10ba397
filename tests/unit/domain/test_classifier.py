"""Tests for granule classification."""

import re

import pytest

from granule_discovery.domain.granules import FileDescriptor, classify, granule_id_of_file
from granule_discovery.exceptions import ConfigurationError, DiscoveryStage

pytestmark = pytest.mark.unit

LEADING_TOKEN = r"^([A-Za-z0-9]+)\..*$"


def _files(*names):
    return [FileDescriptor(name=name, path="incoming") for name in names]


class TestGranuleIdOfFile:
    def test_returns_first_group(self):
        pattern = re.compile(r"(MOD\d+)\.(A\d+)")
        assert granule_id_of_file(pattern, FileDescriptor("MOD09.A2017.hdf")) == "MOD09"

    def test_search_is_unanchored(self):
        pattern = re.compile(r"(A\d+)")
        assert granule_id_of_file(pattern, FileDescriptor("prefix_A17_suffix")) == "A17"

    def test_no_match_returns_none(self):
        pattern = re.compile(LEADING_TOKEN)
        assert granule_id_of_file(pattern, FileDescriptor("README")) is None

    def test_non_participating_group_counts_as_no_match(self):
        pattern = re.compile(r"(A\d+)?\.dat$")
        assert granule_id_of_file(pattern, FileDescriptor("readme.dat")) is None


class TestClassify:
    def test_groups_files_by_extracted_id(self):
        files = _files("A1.dat", "A1.qa", "B2.dat")

        groups = classify(LEADING_TOKEN, files)

        assert list(groups) == ["A1", "B2"]
        assert [f.name for f in groups["A1"]] == ["A1.dat", "A1.qa"]
        assert [f.name for f in groups["B2"]] == ["B2.dat"]

    def test_every_matching_file_lands_in_exactly_one_group_in_order(self):
        files = _files("B2.qa", "A1.dat", "B2.dat", "A1.qa", "A1.xml")

        groups = classify(LEADING_TOKEN, files)

        grouped = [f for members in groups.values() for f in members]
        assert sorted(f.name for f in grouped) == sorted(f.name for f in files)
        assert [f.name for f in groups["A1"]] == ["A1.dat", "A1.qa", "A1.xml"]
        assert [f.name for f in groups["B2"]] == ["B2.qa", "B2.dat"]
        # first-seen key order
        assert list(groups) == ["B2", "A1"]

    def test_unmatched_files_are_excluded_silently(self):
        files = _files("A1.dat", "no_dot_here", "-bad-.dat")

        groups = classify(LEADING_TOKEN, files)

        assert list(groups) == ["A1"]
        assert all(
            f.name not in ("no_dot_here", "-bad-.dat")
            for members in groups.values()
            for f in members
        )

    def test_empty_listing_yields_no_groups(self):
        assert classify(LEADING_TOKEN, []) == {}

    def test_accepts_compiled_pattern(self):
        groups = classify(re.compile(LEADING_TOKEN), _files("C3.dat"))
        assert list(groups) == ["C3"]

    def test_pattern_without_group_is_configuration_error(self):
        with pytest.raises(ConfigurationError) as exc_info:
            classify(r"^[A-Z0-9]+\..*$", _files("A1.dat"))

        assert "capturing group" in str(exc_info.value)
        assert exc_info.value.stage is DiscoveryStage.CONFIG_VALIDATION

    def test_invalid_pattern_is_configuration_error(self):
        with pytest.raises(ConfigurationError):
            classify(r"^(A1", _files("A1.dat"))
