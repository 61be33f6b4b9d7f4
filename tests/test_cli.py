import json

from click.testing import CliRunner

from treediff import __version__
from treediff.cli import main


def _invoke(args):
    return CliRunner().invoke(main, args)


def test_version_flag():
    result = _invoke(["--version"])

    assert result.exit_code == 0
    assert f"treediff version {__version__}" in result.output


def test_identical_documents_exit_zero(write_json):
    source = write_json("a.json", {"a": [1, 2]})
    target = write_json("b.json", {"a": [1.0, 2]})

    result = _invoke(["diff", source, target])

    assert result.exit_code == 0
    assert json.loads(result.output) == []


def test_differences_exit_one_with_event_list(write_json):
    source = write_json("a.json", {"a": 1, "b": 2})
    target = write_json("b.json", {"b": 2, "c": 3})

    result = _invoke(["diff", source, target])

    assert result.exit_code == 1
    assert json.loads(result.output) == [
        {"op": "remove", "path": "/a", "value": 1},
        {"op": "add", "path": "/c", "value": 3},
    ]


def test_key_option_selects_key_aware_engine(write_json):
    source = write_json("a.json", {"items": [{"id": 1, "v": "a"}]})
    target = write_json("b.json", {"items": [{"id": 1, "v": "b"}]})

    result = _invoke(["diff", source, target, "--key", "/items=id", "--format", "patch"])

    assert result.exit_code == 1
    assert json.loads(result.output) == [{"op": "replace", "path": "/items/0/v", "value": "b"}]


def test_key_file_and_config_entries_are_merged(tmp_path, write_json):
    (tmp_path / "pyproject.toml").write_text('[tool.treediff.key_fields]\n"/items" = "id"\n', encoding="utf-8")
    source = write_json("a.json", {"items": [{"id": 1}], "tags": ["x", "y"]})
    target = write_json("b.json", {"items": [{"id": 1}], "tags": ["y", "x"]})
    key_file = write_json("keys.json", {"/tags": None})

    result = _invoke(["diff", source, target, "--key-file", key_file])

    assert result.exit_code == 0
    assert json.loads(result.output) == []


def test_human_format(write_json):
    source = write_json("a.json", {"a": 1})
    target = write_json("b.json", {"a": 2})

    result = _invoke(["diff", source, target, "--format", "human"])

    assert result.exit_code == 1
    assert "~ /a: 1 -> 2" in result.output
    assert "Detected 1 difference(s): replace=1" in result.output


def test_malformed_key_is_a_structured_error(write_json):
    source = write_json("a.json", {"items": [1]})
    target = write_json("b.json", {"items": [2]})

    result = _invoke(["diff", source, target, "--key", "items=id"])

    assert result.exit_code == 2
    assert "treediff error [KEY_TABLE:MALFORMED_LOCATION]" in result.output


def test_invalid_json_input_is_a_usage_error(tmp_path, write_json):
    broken = tmp_path / "broken.json"
    broken.write_text("{", encoding="utf-8")
    target = write_json("b.json", {})

    result = _invoke(["diff", str(broken), target])

    assert result.exit_code == 2
    assert "is not valid JSON" in result.output


def test_unchanged_command_lists_pointers(write_json):
    source = write_json("a.json", {"a": {"x": 1}, "b": 1})
    target = write_json("b.json", {"a": {"x": 1}, "b": 2})

    result = _invoke(["unchanged", source, target, "--indent", "0"])

    assert result.exit_code == 0
    assert json.loads(result.output) == {"/a": {"x": 1}}


def test_floats_are_compared_at_full_precision(tmp_path):
    source = tmp_path / "a.json"
    target = tmp_path / "b.json"
    source.write_text('{"n": 1.00000000000000000001, "m": 2.5}', encoding="utf-8")
    target.write_text('{"n": 1.0, "m": 2.5}', encoding="utf-8")

    result = _invoke(["diff", str(source), str(target)])

    assert result.exit_code == 1
    events = json.loads(result.output)
    assert [(event["op"], event["path"]) for event in events] == [("replace", "/n")]
    assert isinstance(events[0]["old_value"], float)
    assert isinstance(events[0]["value"], float)


def test_decimal_values_are_written_as_numbers(write_json):
    source = write_json("a.json", {"a": 1.5, "b": 1})
    target = write_json("b.json", {"a": 1.5, "b": 2})

    result = _invoke(["unchanged", source, target])

    assert result.exit_code == 0
    assert json.loads(result.output) == {"/a": 1.5}


def test_unchanged_command_reports_bad_config(tmp_path, write_json):
    (tmp_path / "pyproject.toml").write_text('[tool.treediff]\noutput_format = "xml"\n', encoding="utf-8")
    source = write_json("a.json", {"a": 1})
    target = write_json("b.json", {"a": 1})

    result = _invoke(["unchanged", source, target])

    assert result.exit_code == 2
    assert "treediff error [CONFIG:CONFIG]" in result.output
