"""
Tests for the command-line runner using the in-memory store
"""

import pytest

from graph_analysis import runner
from graph_analysis.record_store import InMemoryRecordStore
from graph_analysis.settings import Settings


@pytest.fixture
def seeded_store(monkeypatch, calculus_store):
    """Make every runner invocation use the seeded calculus store"""
    monkeypatch.setattr(runner, "open_store", lambda settings, in_memory: calculus_store)
    return calculus_store


def test_demo_imports_and_reports(sample_csv, capsys):
    assert runner.main(["--in-memory", "demo", str(sample_csv)]) == 0
    out = capsys.readouterr().out
    assert "=== PREREQUISITE RELATIONSHIP REPORT ===" in out
    assert "Total prerequisite relationships: 2" in out


def test_import_in_memory(sample_csv):
    assert runner.main(["--in-memory", "import", str(sample_csv)]) == 0


def test_missing_csv_exits_1(tmp_path):
    assert runner.main(["--in-memory", "import", str(tmp_path / "missing.csv")]) == 1


def test_chains(seeded_store, capsys):
    assert runner.main(["chains", "Calculus2"]) == 0
    assert capsys.readouterr().out.strip() == "Calculus2 -> Calculus1"


def test_unknown_course_exits_1(seeded_store):
    assert runner.main(["chains", "Calculus9"]) == 1


def test_popular_min_count(seeded_store, capsys):
    assert runner.main(["popular", "--min-count", "2"]) == 0
    assert capsys.readouterr().out.strip() == "Calculus1 (required by 2 courses)"


def test_no_prereqs(seeded_store, capsys):
    assert runner.main(["no-prereqs"]) == 0
    assert capsys.readouterr().out.strip() == "Calculus1"


def test_cycles_none(seeded_store, capsys):
    assert runner.main(["cycles"]) == 0
    assert "No circular dependencies found" in capsys.readouterr().out


def test_unreachable_store_exits_1(monkeypatch):
    def _fail(settings, in_memory):
        raise ConnectionError("neo4j down")
    monkeypatch.setattr(runner, "open_store", _fail)
    assert runner.main(["report"]) == 1


def test_bad_arguments_exit_2():
    with pytest.raises(SystemExit) as exc_info:
        runner.main(["popular", "--min-count", "many"])
    assert exc_info.value.code == 2


def test_open_store_in_memory():
    assert isinstance(runner.open_store(Settings(), in_memory=True), InMemoryRecordStore)


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("NEO4J_URI", "bolt://neo4j:7687")
    monkeypatch.setenv("USE_IN_MEMORY_STORE", "TRUE")
    monkeypatch.setenv("POPULAR_PREREQUISITE_THRESHOLD", "3")
    monkeypatch.delenv("NEO4J_DATABASE", raising=False)

    settings = Settings.from_env()
    assert settings.neo4j_uri == "bolt://neo4j:7687"
    assert settings.use_in_memory_store
    assert settings.popular_prerequisite_threshold == 3
    assert settings.neo4j_database is None
