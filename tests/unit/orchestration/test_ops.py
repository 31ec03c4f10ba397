"""Tests for granule discovery dagster ops and job wiring."""

import json
from unittest.mock import patch

import pytest
import yaml
from dagster import build_op_context
from pydantic import ValidationError

from granule_discovery.domain.granules import DiscoveryResult, Granule
from granule_discovery.exceptions import ConfigurationError
from granule_discovery.orchestration.jobs import discover_granules_job
from granule_discovery.orchestration.ops import (
    DiscoverGranulesOpConfig,
    WriteGranulesConfig,
    discover_granules_op,
    load_event,
    write_granules_op,
)
from granule_discovery.orchestration.repository import defs

pytestmark = pytest.mark.unit


@pytest.fixture
def event_file(tmp_path, discovery_event):
    path = tmp_path / "event.yml"
    path.write_text(yaml.safe_dump(discovery_event), encoding="utf-8")
    return path


class TestLoadEvent:
    def test_wraps_config_and_applies_overrides(self, event_file):
        event = load_event(str(event_file), duplicate_handling="skip", use_list=True)

        assert event["config"]["duplicateHandling"] == "skip"
        assert event["config"]["useList"] is True
        assert event["config"]["collection"]["name"] == "MOD09GQ"

    def test_bare_config_file(self, tmp_path, discovery_event):
        path = tmp_path / "config.json"
        path.write_text(json.dumps(discovery_event["config"]), encoding="utf-8")

        event = load_event(str(path))

        assert event == {"config": discovery_event["config"]}

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_event(str(tmp_path / "absent.yml"))

    def test_non_mapping_content(self, tmp_path):
        path = tmp_path / "event.yml"
        path.write_text("- just\n- a list\n", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            load_event(str(path))

    @pytest.mark.parametrize("body", ["config: null\n", "config: [a, b]\n", "config: text\n"])
    def test_non_mapping_config(self, tmp_path, body):
        path = tmp_path / "event.yml"
        path.write_text(body, encoding="utf-8")

        with pytest.raises(ConfigurationError) as exc_info:
            load_event(str(path))

        assert exc_info.value.value == str(path)


class TestDiscoverGranulesOp:
    def test_config_rejects_unknown_policy(self):
        with pytest.raises(ValidationError):
            DiscoverGranulesOpConfig(event_path="e.yml", duplicate_handling="bogus")

    @patch("granule_discovery.orchestration.ops.GranuleDiscoveryService")
    def test_returns_granule_payload(self, mock_service_cls, event_file):
        granule = Granule(granule_id="MOD09GQ.A2017025", data_type="MOD09GQ", version="006")
        mock_service_cls.return_value.discover.return_value = DiscoveryResult(
            granules=[granule], granules_found=1
        )

        context = build_op_context()
        result = discover_granules_op(
            context,
            DiscoverGranulesOpConfig(event_path=str(event_file), duplicate_handling="replace"),
        )

        assert result["granules"][0]["granuleId"] == "MOD09GQ.A2017025"
        event = mock_service_cls.return_value.discover.call_args.args[0]
        assert event["config"]["duplicateHandling"] == "replace"


class TestWriteGranulesOp:
    def test_writes_json(self, tmp_path):
        output = tmp_path / "out" / "granules.json"
        payload = {"granules": [{"granuleId": "A1"}]}

        written = write_granules_op(
            build_op_context(), WriteGranulesConfig(output_path=str(output)), payload
        )

        assert written == str(output)
        assert json.loads(output.read_text(encoding="utf-8")) == payload

    def test_without_path_returns_none(self):
        written = write_granules_op(
            build_op_context(), WriteGranulesConfig(), {"granules": []}
        )
        assert written is None


def test_job_is_registered():
    assert defs.get_job_def("discover_granules_job").name == discover_granules_job.name
