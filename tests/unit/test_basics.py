import json
import random
from pathlib import Path
from time import sleep

import pytest
from rich.console import Console

from ddb_bench import config
from ddb_bench.domain import dataset as dataset_module
from ddb_bench.domain.dataset import generate_dataset, load_dataset, save_dataset
from ddb_bench.domain.models import Record
from ddb_bench.orchestrator import available_adapters, available_scenarios
from ddb_bench.reporter import print_results
from ddb_bench.utils import profiler

WIRE_ATTRIBUTES = [
    "id",
    "boolean",
    "string",
    "nullable",
    "number",
    "externalIdList",
    "numberList",
    "nested",
]


def test_settings_defaults():
    settings = config.Settings(_env_file=None)
    assert settings.table_name == "LargeItem"
    assert settings.capacity_units == 1_000_000
    assert settings.dataset_size == 1_000
    assert settings.rounds_by_kind() == {"get": 10_000, "scan": 50, "query": 1_000}
    assert settings.request_timeout_seconds >= 1_000


def test_settings_read_endpoint_from_environment(monkeypatch):
    monkeypatch.setenv("MOCK_DYNAMODB_ENDPOINT", "http://localhost:4567")
    monkeypatch.setenv("BENCHMARK_SCAN_ROUNDS", "7")
    settings = config.Settings(_env_file=None)
    assert settings.mock_dynamodb_endpoint == "http://localhost:4567"
    assert settings.rounds_by_kind()["scan"] == 7


def test_profile_block_measures_time():
    with profiler.profile_block("sleep") as stats:
        sleep(0.05)
    assert stats.duration_seconds >= 0.05
    assert stats.peak_rss_bytes is None or stats.peak_rss_bytes > 0
    if stats.cpu_percent is not None:
        assert isinstance(stats.cpu_percent, float)
    assert set(vars(stats)) == {
        "label",
        "start_ts",
        "end_ts",
        "duration_seconds",
        "peak_rss_bytes",
        "cpu_percent",
    }


def test_available_adapters_and_scenarios():
    assert available_adapters() == ["document", "mapped", "native"]
    assert available_scenarios() == ["get", "scan", "query"]


class TestGenerator:
    """Synthetic dataset shape."""

    def test_generates_requested_count_with_unique_ids(self):
        records = generate_dataset(200)
        assert len(records) == 200
        assert len({r.id for r in records}) == 200

    def test_every_record_has_the_fixed_shape(self):
        for record in generate_dataset(100, rng=random.Random(1)):
            assert list(record.to_item()) == WIRE_ATTRIBUTES
            assert record.boolean is False
            assert record.nullable is None
            assert record.string in dataset_module.ANIMALS
            assert 0 <= record.number < dataset_module.NUMBER_UPPER_BOUND
            assert record.external_id_list == [
                "some-external-id-1",
                "some-external-id-2",
                "some-external-id-3",
            ]
            assert record.number_list == [1, 2, 3]
            assert record.nested == {"any": {"level": {"supported": True}}}

    def test_records_do_not_share_containers(self):
        first, second = generate_dataset(2)
        assert first.number_list is not second.number_list
        assert first.nested is not second.nested
        assert first.nested["any"] is not second.nested["any"]

    def test_zero_records_is_empty(self):
        assert generate_dataset(0) == []

    def test_negative_count_rejected(self):
        with pytest.raises(ValueError):
            generate_dataset(-1)

    def test_unseeded_generation_differs_between_calls(self):
        assert [r.id for r in generate_dataset(5)] != [r.id for r in generate_dataset(5)]


def test_save_and_load_dataset(tmp_path: Path):
    records = generate_dataset(5, rng=random.Random(123))
    path = save_dataset(records, tmp_path / "data" / "dataset.json")
    assert path.exists()

    with path.open("r", encoding="utf-8") as f:
        raw = json.load(f)
    assert raw[0]["externalIdList"] == records[0].external_id_list
    assert raw[0]["nullable"] is None

    assert load_dataset(path) == records


class TestRecord:
    """Record validation."""

    def test_wire_attribute_lookup(self):
        record = generate_dataset(1)[0]
        assert Record.attribute_names() == WIRE_ATTRIBUTES
        assert record.get_attribute("numberList") == [1, 2, 3]
        assert record.get_attribute("string") == record.string
        with pytest.raises(KeyError):
            record.get_attribute("missing")

    def test_rejects_extra_attributes(self):
        item = generate_dataset(1)[0].to_item()
        item["unexpected"] = 1
        with pytest.raises(ValueError):
            Record.model_validate(item)

    def test_rejects_stringly_numbers(self):
        item = generate_dataset(1)[0].to_item()
        item["number"] = "12"
        with pytest.raises(ValueError):
            Record.model_validate(item)


def test_print_results_renders_rows_and_errors():
    console = Console(record=True, width=200)
    print_results(
        [
            {
                "scenario": "get",
                "status": "ok",
                "verification": {"adapters": ["native"]},
                "benchmarks": [
                    {"adapter": "native", "rounds": 10, "total_seconds": 0.5, "mean_ms": 5.0, "cpu_percent": None}
                ],
            },
            {
                "scenario": "scan",
                "status": "failed",
                "error": "Adapter 'mapped' disagrees",
                "error_type": "EquivalenceMismatchError",
            },
        ],
        console=console,
    )
    text = console.export_text()
    assert "native" in text
    assert "FAILED" in text
    assert "Adapter 'mapped' disagrees" in text
