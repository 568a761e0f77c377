import json
from pathlib import Path
import pytest
from offside.__main__ import main

SRC = "f x | x > 0 = 1\n  | otherwise = 2\n"


def _seed(tmp: Path) -> str:
    p = tmp / "Guards.hs"
    p.write_text(SRC, encoding="utf-8")
    return str(p)


@pytest.mark.e2e
def test_cli_lists_candidates_as_json(tmp_path: Path, capsys):
    path = _seed(tmp_path)
    assert main([path, "--line", "2", "--json"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["line"] == 2
    assert data["candidates"] == [{"column": 4, "insert_text": None}]
    assert data["diagnostics"] == []


@pytest.mark.e2e
def test_cli_apply_prints_reindented_file(tmp_path: Path, capsys):
    path = _seed(tmp_path)
    assert main([path, "--line", "2", "--apply", "0"]) == 0
    assert capsys.readouterr().out == "f x | x > 0 = 1\n    | otherwise = 2\n"
    # without --write the file is left alone
    assert Path(path).read_text(encoding="utf-8") == SRC


@pytest.mark.e2e
def test_cli_apply_write(tmp_path: Path):
    path = _seed(tmp_path)
    assert main([path, "--line", "2", "--apply", "0", "--write"]) == 0
    assert Path(path).read_text(encoding="utf-8") == "f x | x > 0 = 1\n    | otherwise = 2\n"


@pytest.mark.e2e
def test_cli_cycle_steps(tmp_path: Path, capsys):
    path = _seed(tmp_path)
    assert main([path, "--line", "2", "--cycle", "2", "--json"]) == 0
    steps = json.loads(capsys.readouterr().out)
    assert [s["index"] for s in steps] == [0, 0]
    assert all(s["line"] == "    | otherwise = 2" for s in steps)


@pytest.mark.e2e
def test_cli_bad_line_and_missing_file(tmp_path: Path):
    path = _seed(tmp_path)
    assert main([path, "--line", "9"]) == 2
    assert main([str(tmp_path / "missing.hs"), "--line", "1"]) == 2
