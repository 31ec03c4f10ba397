"""Tests for granule data models."""

import dataclasses

import pytest

from granule_discovery.domain.granules import (
    DiscoveryResult,
    DuplicatePolicy,
    EnrichedFile,
    FileDescriptor,
    Granule,
)

pytestmark = pytest.mark.unit


class TestFileDescriptor:
    def test_from_dict_keeps_unknown_keys_in_extra(self):
        file = FileDescriptor.from_dict(
            {"name": "A1.dat", "path": "in", "size": 3, "checksum": "abc"}
        )

        assert file.name == "A1.dat"
        assert file.time is None
        assert file.extra == {"checksum": "abc"}
        assert file.to_dict() == {
            "name": "A1.dat",
            "path": "in",
            "size": 3,
            "checksum": "abc",
        }

    def test_is_immutable(self):
        file = FileDescriptor(name="A1.dat")
        with pytest.raises(dataclasses.FrozenInstanceError):
            file.name = "B2.dat"


class TestDiscoveryResult:
    def test_to_dict_emits_only_granules(self):
        granule = Granule(
            granule_id="A1",
            data_type="SCN",
            version="1",
            files=(EnrichedFile(FileDescriptor("A1.dat"), bucket="b", type="data"),),
        )
        result = DiscoveryResult(granules=[granule], granules_found=2, granules_skipped=1)

        assert result.to_dict() == {
            "granules": [
                {
                    "granuleId": "A1",
                    "dataType": "SCN",
                    "version": "1",
                    "files": [
                        {
                            "name": "A1.dat",
                            "path": "",
                            "bucket": "b",
                            "url_path": "",
                            "type": "data",
                        }
                    ],
                }
            ]
        }

    def test_stats(self):
        result = DiscoveryResult(
            granules=[],
            files_listed=5,
            files_unmatched=1,
            granules_found=2,
            granules_skipped=2,
            duplicate_policy=DuplicatePolicy.SKIP,
        )

        stats = result.stats()

        assert stats["granules_emitted"] == 0
        assert stats["duplicate_policy"] == "skip"
        assert stats["files_listed"] == 5
