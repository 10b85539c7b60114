import json
from pathlib import Path

import pytest
from conftest import make_question

import cli
from satprep.models.db import QuestionSet


@pytest.fixture
def cli_db(monkeypatch: pytest.MonkeyPatch, session_factory):
    monkeypatch.setattr(cli, "SessionLocal", session_factory)
    monkeypatch.setattr(cli, "init_db", lambda: None)
    return session_factory


def _write_sets(path: Path, sets: list[dict]) -> Path:
    path.write_text(json.dumps(sets), encoding="utf-8")
    return path


def _math_set(count: int = 12) -> dict:
    return {
        "title": "Linear equations",
        "test_type": "math",
        "questions": [make_question(f"lin-{i}") for i in range(count)],
    }


def test_import_then_generate(tmp_path: Path, cli_db, capsys) -> None:
    path = _write_sets(tmp_path / "sets.json", [_math_set()])

    assert cli.main(["import", str(path), "--author", "author-1"]) == 0
    assert "12 questions" in capsys.readouterr().out

    db = cli_db()
    stored = db.query(QuestionSet).one()
    assert stored.is_official
    assert stored.created_by == "author-1"
    db.close()

    assert cli.main(["generate", "--user", "user-1", "--type", "math", "--seed", "3"]) == 0
    generated = json.loads(capsys.readouterr().out)
    assert len(generated["questions"]) == 10
    assert generated["time_limit"] == 10


def test_unofficial_import_is_not_used_for_generation(tmp_path: Path, cli_db, capsys) -> None:
    path = _write_sets(tmp_path / "sets.json", [_math_set()])

    assert cli.main(["import", str(path), "--unofficial"]) == 0
    assert cli.main(["generate", "--user", "user-1", "--type", "math"]) == 1


def test_import_rejects_invalid_file(tmp_path: Path, cli_db) -> None:
    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    assert cli.main(["import", str(broken)]) == 1

    empty_set = _write_sets(tmp_path / "empty.json", [_math_set(count=0)])
    assert cli.main(["import", str(empty_set)]) == 1

    assert cli.main(["import", str(tmp_path / "missing.json")]) == 1


def test_load_question_sets_accepts_single_object(tmp_path: Path) -> None:
    path = tmp_path / "one.json"
    path.write_text(json.dumps(_math_set(count=2)), encoding="utf-8")

    (question_set,) = cli.load_question_sets(path, official=False)

    assert question_set.is_official is False
    assert len(question_set.questions) == 2


def test_import_rejects_questions_from_another_section(tmp_path: Path, cli_db) -> None:
    mixed = _math_set(count=3)
    mixed["questions"].append(make_question("rw-1", section="reading_writing"))
    path = _write_sets(tmp_path / "mixed.json", [mixed])

    assert cli.main(["import", str(path)]) == 1

    db = cli_db()
    assert db.query(QuestionSet).count() == 0
    db.close()


def test_import_rejects_duplicate_question_ids(tmp_path: Path, cli_db) -> None:
    duplicated = _math_set(count=2)
    duplicated["questions"][1]["id"] = "lin-0"
    path = _write_sets(tmp_path / "duplicated.json", [duplicated])

    assert cli.main(["import", str(path)]) == 1
