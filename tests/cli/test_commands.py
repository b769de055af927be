"""CLI command tests using Click CliRunner.

Strategy: point the config env var at a temp config so every command runs the
real engine against a throwaway data dir. Logging setup is patched out so the
runner's streams never end up on the root logger.
"""

import json
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from cli.config import CONFIG_ENV_VAR
from cli.main import cli
from problems.transfer import encode_problems


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def data_dir(tmp_path):
    return tmp_path / "data"


@pytest.fixture(autouse=True)
def temp_config(tmp_path, data_dir, monkeypatch):
    config_path = tmp_path / "config.yaml"
    config_path.write_text(f"paths:\n  data_dir: {data_dir}\nviews:\n  primary: batch\n")
    monkeypatch.setenv(CONFIG_ENV_VAR, str(config_path))
    with patch("cli.main.setup_logging"):
        yield config_path


@pytest.fixture
def seeded(data_dir, sample_problems):
    """Data dir pre-populated with the sample problems."""
    data_dir.mkdir(parents=True, exist_ok=True)
    (data_dir / "problems.json").write_bytes(encode_problems(sample_problems, indent=None))
    return sample_problems


def _stored(data_dir):
    path = data_dir / "problems.json"
    if not path.exists():
        return None
    return json.loads(path.read_text(encoding="utf-8"))


class TestMain:
    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_bad_config(self, runner, temp_config):
        temp_config.write_text("scheduler:\n  backend: http\n")
        result = runner.invoke(cli, ["list"])
        assert result.exit_code == 1
        assert "Config error" in result.output


class TestProblemCommands:
    def test_add(self, runner, data_dir):
        result = runner.invoke(cli, ["add", "Two Sum", "--tags", "array, hash-map", "--level", "easy"])
        assert result.exit_code == 0
        assert "Added:" in result.output
        (record,) = _stored(data_dir)
        assert record["name"] == "Two Sum"
        assert record["tags"] == ["array", "hash-map"]
        assert record["level"] == "EASY"

    def test_add_blank_name(self, runner, data_dir):
        result = runner.invoke(cli, ["add", "   "])
        assert result.exit_code == 1
        assert "Error" in result.output
        assert _stored(data_dir) is None

    def test_add_invalid_level(self, runner):
        result = runner.invoke(cli, ["add", "Two Sum", "--level", "MEDIUM"])
        assert result.exit_code != 0

    def test_list_empty(self, runner):
        result = runner.invoke(cli, ["list"])
        assert result.exit_code == 0
        assert "No problems yet" in result.output

    def test_list(self, runner, seeded):
        result = runner.invoke(cli, ["list", "--sort", "name"])
        assert result.exit_code == 0
        assert "Problems (4)" in result.output

    def test_list_search_no_match(self, runner, seeded):
        result = runner.invoke(cli, ["list", "--search", "zzz"])
        assert result.exit_code == 0
        assert "No problems match" in result.output

    def test_search(self, runner, seeded):
        result = runner.invoke(cli, ["search", "graph"])
        assert result.exit_code == 0
        assert "p4" in result.output

    def test_due_on_date(self, runner, seeded):
        result = runner.invoke(cli, ["due", "--date", "2024-06-15"])
        assert result.exit_code == 0
        assert "Due on 2024-06-15 (2)" in result.output

    def test_nothing_due(self, runner, seeded):
        result = runner.invoke(cli, ["due", "--date", "2024-01-01"])
        assert result.exit_code == 0
        assert "Nothing due on 2024-01-01" in result.output

    def test_show(self, runner, seeded):
        result = runner.invoke(cli, ["show", "p4"])
        assert result.exit_code == 0
        assert "course schedule" in result.output
        assert "Topological sort" in result.output

    def test_show_missing(self, runner, seeded):
        result = runner.invoke(cli, ["show", "nope"])
        assert result.exit_code == 1
        assert "Not found" in result.output

    def test_review(self, runner, seeded, data_dir):
        result = runner.invoke(cli, ["review", "p2", "--outcome", "again"])
        assert result.exit_code == 0
        assert "Reviewed:" in result.output
        records = _stored(data_dir)
        assert [r["id"] for r in records] == ["p1", "p2", "p3", "p4"]
        assert records[1]["level"] == "AGAIN"

    def test_review_prompts_for_outcome(self, runner, seeded, data_dir):
        result = runner.invoke(cli, ["review", "p1"], input="hard\n")
        assert result.exit_code == 0
        assert _stored(data_dir)[0]["level"] == "HARD"

    def test_review_unknown_problem(self, runner, seeded):
        result = runner.invoke(cli, ["review", "nope", "--outcome", "GOOD"])
        assert result.exit_code == 1
        assert "No problem with id nope" in result.output

    def test_review_not_yet_due(self, runner, seeded, data_dir):
        runner.invoke(cli, ["review", "p2", "--outcome", "easy"])
        before = _stored(data_dir)
        result = runner.invoke(cli, ["review", "p2", "--outcome", "again"])
        assert result.exit_code == 1
        assert "not due until" in result.output
        assert _stored(data_dir) == before


class TestDataCommands:
    def test_export(self, runner, seeded, tmp_path):
        out = tmp_path / "out" / "algo-rewind.json"
        result = runner.invoke(cli, ["export", "-o", str(out)])
        assert result.exit_code == 0
        text = out.read_text(encoding="utf-8")
        assert text.startswith("[\n  {")
        assert [r["id"] for r in json.loads(text)] == ["p1", "p2", "p3", "p4"]

    def test_export_empty(self, runner, tmp_path):
        out = tmp_path / "algo-rewind.json"
        result = runner.invoke(cli, ["export", "-o", str(out)])
        assert result.exit_code == 0
        assert "No problems to export" in result.output
        assert not out.exists()

    def test_import(self, runner, seeded, tmp_path, data_dir, problem_factory):
        src = tmp_path / "in.json"
        src.write_bytes(encode_problems([problem_factory(id="n1", name="New One")]))
        result = runner.invoke(cli, ["import", str(src), "--yes"])
        assert result.exit_code == 0
        assert "Imported:" in result.output
        assert [r["id"] for r in _stored(data_dir)] == ["n1"]

    def test_import_invalid_keeps_data(self, runner, seeded, tmp_path, data_dir):
        src = tmp_path / "bad.json"
        src.write_text('{"not": "a list"}')
        result = runner.invoke(cli, ["import", str(src), "--yes"])
        assert result.exit_code == 1
        assert len(_stored(data_dir)) == 4

    def test_import_declined(self, runner, seeded, tmp_path, data_dir, problem_factory):
        src = tmp_path / "in.json"
        src.write_bytes(encode_problems([problem_factory(id="n1")]))
        result = runner.invoke(cli, ["import", str(src)], input="n\n")
        assert result.exit_code == 0
        assert len(_stored(data_dir)) == 4

    def test_clear_confirmed(self, runner, seeded, data_dir):
        result = runner.invoke(cli, ["clear"], input="y\n")
        assert result.exit_code == 0
        assert "Cleared:" in result.output
        assert _stored(data_dir) is None

    def test_clear_declined(self, runner, seeded, data_dir):
        result = runner.invoke(cli, ["clear"], input="n\n")
        assert result.exit_code == 0
        assert "Cancelled" in result.output
        assert len(_stored(data_dir)) == 4

    def test_clear_empty(self, runner):
        result = runner.invoke(cli, ["clear", "--yes"])
        assert result.exit_code == 0
        assert "No problems to clear" in result.output

    def test_corrupt_store_warns(self, runner, data_dir):
        data_dir.mkdir(parents=True)
        (data_dir / "problems.json").write_text("garbage")
        result = runner.invoke(cli, ["list"])
        assert result.exit_code == 0
        assert "could not be read" in result.output
