# tests/test_export.py
import datetime as dt
import json
from decimal import Decimal
from urllib.parse import unquote

from apps.console.export import download_artifact, to_data_uri, to_json
from console_core.models.result import QueryResult


def test_to_json_two_space_indent():
    text = to_json([{"id": 1}])
    assert text == '[\n  {\n    "id": 1\n  }\n]'


def test_to_json_keeps_unicode_and_handles_odd_values():
    text = to_json([{"name": "José", "d": dt.date(2020, 5, 1), "amt": Decimal("1.25")}])
    assert "José" in text
    assert json.loads(text) == [{"name": "José", "d": "2020-05-01", "amt": 1.25}]


def test_data_uri_round_trips():
    uri = to_data_uri('[{"a": "b c"}]')
    prefix = "data:application/json;charset=utf-8,"
    assert uri.startswith(prefix)
    assert " " not in uri
    assert unquote(uri[len(prefix):]) == '[{"a": "b c"}]'


def test_download_artifact():
    art = download_artifact(QueryResult.ok([{"a": 1}]))
    assert art.file_name == "patient_query_results.json"
    assert art.mime == "application/json"
    assert json.loads(art.payload) == [{"a": 1}]
    assert art.data_uri.startswith("data:application/json")


def test_download_artifact_nothing_to_export():
    assert download_artifact(None) is None
    assert download_artifact(QueryResult.ok([])) is None
    assert download_artifact(QueryResult.failure("x")) is None


def test_nan_rows_export_as_strict_json():
    res = QueryResult.from_raw({"success": True, "data": [{"x": float("nan"), "y": 2.0}], "error": None})
    text = download_artifact(res).payload

    def reject(const):
        raise ValueError(const)

    assert json.loads(text, parse_constant=reject) == [{"x": None, "y": 2.0}]
