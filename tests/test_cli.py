"""Tests for the grouped-select command line."""

import json

import pytest
import yaml

from grouped_select import cli
from grouped_select.normalize import GroupConfigError
from grouped_select.prompt import GroupedCheckbox

GROUPS_YAML = """\
groups:
  - key: fruits
    label: Fruits
    choices:
      - apple
      - {value: banana, checked: true}
  - key: vegetables
    label: Vegetables
    choices: [carrot]
"""


@pytest.fixture
def choices_file(tmp_path):
    path = tmp_path / "food.yaml"
    path.write_text(GROUPS_YAML)
    return path


class TestLoadGroups:
    def test_yaml_with_groups_key(self, choices_file):
        groups = cli.load_groups(choices_file)
        assert [g["key"] for g in groups] == ["fruits", "vegetables"]

    def test_json_list(self, tmp_path):
        path = tmp_path / "food.json"
        path.write_text(json.dumps([{"key": "g", "label": "G", "choices": ["x"]}]))
        assert cli.load_groups(path) == [{"key": "g", "label": "G", "choices": ["x"]}]

    def test_missing_file(self, tmp_path):
        with pytest.raises(GroupConfigError, match="Cannot read"):
            cli.load_groups(tmp_path / "nope.yaml")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        with pytest.raises(GroupConfigError, match="Cannot parse"):
            cli.load_groups(path)

    def test_no_groups_list(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("title: nothing here\n")
        with pytest.raises(GroupConfigError, match="expected a list"):
            cli.load_groups(path)


class TestFormatSelections:
    def test_json(self):
        output = cli.format_selections({"fruits": ["apple"], "vegetables": []}, "json")
        assert json.loads(output) == {"fruits": ["apple"], "vegetables": []}

    def test_yaml_keeps_group_order(self):
        output = cli.format_selections({"b": [1], "a": []}, "yaml")
        assert yaml.safe_load(output) == {"b": [1], "a": []}
        assert output.index("b:") < output.index("a:")


class TestMain:
    def test_prints_selections(self, choices_file, monkeypatch, capsys):
        monkeypatch.setattr(GroupedCheckbox, "show", lambda self: self.state.selections())
        assert cli.main([str(choices_file)]) == 0
        assert json.loads(capsys.readouterr().out) == {"fruits": ["banana"], "vegetables": []}

    def test_yaml_output(self, choices_file, monkeypatch, capsys):
        monkeypatch.setattr(GroupedCheckbox, "show", lambda self: self.state.selections())
        assert cli.main([str(choices_file), "-o", "yaml"]) == 0
        assert yaml.safe_load(capsys.readouterr().out) == {"fruits": ["banana"], "vegetables": []}

    def test_options_reach_prompt(self, choices_file, monkeypatch):
        seen = {}

        def fake_show(self):
            seen["config"] = self.config
            seen["page_size"] = self.pager.page_size
            seen["theme"] = self.theme.name
            return {}

        monkeypatch.setattr(GroupedCheckbox, "show", fake_show)
        cli.main([str(choices_file), "-s", "-r", "-m", "Eat?", "--page-size", "5", "--theme", "ascii"])
        assert seen["config"].searchable
        assert seen["config"].required
        assert seen["config"].message == "Eat?"
        assert seen["page_size"] == 5
        assert seen["theme"] == "ascii"

    def test_abort_exit_code(self, choices_file, monkeypatch, capsys):
        monkeypatch.setattr(GroupedCheckbox, "show", lambda self: None)
        assert cli.main([str(choices_file)]) == cli.EXIT_ABORTED
        assert capsys.readouterr().out == ""

    def test_bad_file(self, tmp_path, capsys):
        path = tmp_path / "bad.yaml"
        path.write_text("groups: oops\n")
        assert cli.main([str(path)]) == 1
        assert "Error:" in capsys.readouterr().err

    def test_duplicate_group_keys(self, tmp_path, capsys):
        path = tmp_path / "dup.yaml"
        path.write_text(yaml.safe_dump({"groups": [{"key": "a", "label": "A"}, {"key": "a", "label": "B"}]}))
        assert cli.main([str(path)]) == 1
        assert "Error:" in capsys.readouterr().err

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc:
            cli.main(["--version"])
        assert exc.value.code == 0
        assert "grouped-select" in capsys.readouterr().out


@pytest.mark.parametrize("value", ["0", "-3", "many"])
def test_page_size_must_be_positive(choices_file, value, capsys):
    with pytest.raises(SystemExit) as exc:
        cli.main([str(choices_file), "--page-size", value])
    assert exc.value.code == 2
    assert "--page-size" in capsys.readouterr().err
