"""
Tests for proofpatch CLI.
"""

import io
import json

import pytest

from helpers import SpawnRecorder, Z3ApiSession, goal_dump
from proofpatch import cli
from proofpatch.cli import main


@pytest.fixture
def fake_solver(monkeypatch):
    """Route the CLI's solver sessions through the z3 API double"""
    spawn = SpawnRecorder(Z3ApiSession)
    monkeypatch.setattr(cli, "spawn_auto", spawn)
    return spawn


def write_dump(tmp_path, payload, name="pp_dump.json"):
    path = tmp_path / name
    path.write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")
    return str(path)


class TestEntailsCommand:
    """Tests for the entails command"""

    def test_entailed(self, tmp_path, fake_solver, capsys):
        path = write_dump(tmp_path, goal_dump(["n : ℕ"], "n ≥ 0"))
        result = main(["--root", str(tmp_path), "entails", path])
        captured = capsys.readouterr()
        assert result == 0
        assert "ENTAILED" in captured.out

    def test_not_entailed(self, tmp_path, fake_solver, capsys):
        path = write_dump(tmp_path, goal_dump(["n : ℤ"], "n ≥ 0"))
        result = main(["--root", str(tmp_path), "entails", path])
        captured = capsys.readouterr()
        assert result == 1
        assert "NOT ENTAILED" in captured.out

    def test_unknown(self, tmp_path, fake_solver, capsys):
        path = write_dump(tmp_path, goal_dump([], "k ≤ 5"))
        result = main(["--root", str(tmp_path), "entails", path])
        captured = capsys.readouterr()
        assert result == 1
        assert "UNKNOWN" in captured.out
        assert "Reason:" in captured.out

    def test_json_format(self, tmp_path, fake_solver, capsys):
        path = write_dump(tmp_path, goal_dump(["n : ℕ"], "n ≥ 0"))
        result = main(["--root", str(tmp_path), "entails", path, "--format", "json"])
        data = json.loads(capsys.readouterr().out)
        assert result == 0
        assert data["verdict"] == "entailed"
        assert data["solver"] == "z3-api"
        assert "time_ms" in data

    def test_stdin(self, tmp_path, fake_solver, capsys, monkeypatch):
        payload = json.dumps(goal_dump(["n : ℕ"], "n ≥ 0"))
        monkeypatch.setattr("sys.stdin", io.StringIO(payload))
        result = main(["--root", str(tmp_path), "entails"])
        assert result == 0

    def test_options_forwarded(self, tmp_path, fake_solver):
        path = write_dump(tmp_path, goal_dump(["n : ℕ"], "n ≥ 0"))
        main(["--root", str(tmp_path), "entails", path, "--timeout", "321", "--seed", "4",
              "--solver", "cvc5"])
        assert fake_solver.preferred == ["cvc5"]
        transcript = fake_solver.sessions[0].transcript
        assert "(set-option :timeout 321)" in transcript
        assert "(set-option :random-seed 4)" in transcript

    def test_config_defaults(self, tmp_path, fake_solver):
        (tmp_path / "proofpatch.toml").write_text("[smt]\ntimeout_ms = 900\nseed = 3\n")
        path = write_dump(tmp_path, goal_dump(["n : ℕ"], "n ≥ 0"))
        main(["--root", str(tmp_path), "entails", path])
        transcript = fake_solver.sessions[0].transcript
        assert "(set-option :timeout 900)" in transcript
        assert "(set-option :random-seed 3)" in transcript

    def test_malformed_input(self, tmp_path, fake_solver, capsys):
        path = write_dump(tmp_path, {"goals": []})
        result = main(["--root", str(tmp_path), "entails", path])
        captured = capsys.readouterr()
        assert result == 2
        assert "goals[0]" in captured.err

    def test_not_json(self, tmp_path, fake_solver, capsys):
        path = tmp_path / "dump.json"
        path.write_text("⊢ n ≥ 0")
        result = main(["--root", str(tmp_path), "entails", str(path)])
        assert result == 2
        assert "not JSON" in capsys.readouterr().err

    def test_missing_file(self, tmp_path, capsys):
        result = main(["--root", str(tmp_path), "entails", str(tmp_path / "absent.json")])
        assert result == 2
        assert "Error reading file" in capsys.readouterr().err

    def test_bad_config(self, tmp_path, capsys):
        (tmp_path / "proofpatch.toml").write_text("[smt]\nbogus = 1\n")
        result = main(["--root", str(tmp_path), "entails", "unused.json"])
        assert result == 2
        assert "Config error" in capsys.readouterr().err

    def test_negative_timeout(self, tmp_path, fake_solver, capsys):
        path = write_dump(tmp_path, goal_dump(["n : ℕ"], "n ≥ 0"))
        result = main(["--root", str(tmp_path), "entails", path, "--timeout", "-1"])
        assert result == 2


class TestParseCommand:
    """Tests for the parse command"""

    def test_parse_linear(self, capsys):
        result = main(["parse", "n + n - 3 ≤ m"])
        out = capsys.readouterr().out
        assert result == 0
        assert "Operator: ≤" in out
        assert "Left: 2*n - 3" in out
        assert "Right: m" in out
        assert "Variables: m, n" in out
        assert "SMT-LIB: (<= (+ (- 3) (* 2 n)) m)" in out

    def test_parse_priority_quirk(self, capsys):
        result = main(["parse", "a > b <= c"])
        out = capsys.readouterr().out
        assert result == 1
        assert "Operator: <=" in out
        assert "'a > b' is not linear" in out

    def test_parse_nonlinear(self, capsys):
        result = main(["parse", "2*n <= 5"])
        assert result == 1
        assert "not linear" in capsys.readouterr().out

    def test_parse_no_operator(self, capsys):
        result = main(["parse", "Even n"])
        assert result == 1
        assert "No relation operator" in capsys.readouterr().err


class TestExtractJsonCommand:
    """Tests for the extract-json command"""

    def test_extract(self, tmp_path, capsys):
        path = tmp_path / "reply.txt"
        path.write_text('Here:\n```json\n{"tactic": "omega"}\n```\n')
        result = main(["extract-json", str(path)])
        assert result == 0
        assert json.loads(capsys.readouterr().out) == {"tactic": "omega"}

    def test_nothing_found(self, tmp_path, capsys):
        path = tmp_path / "reply.txt"
        path.write_text("no json")
        result = main(["extract-json", str(path)])
        assert result == 1


class TestPresetsCommand:
    """Tests for the presets command"""

    def test_lists_presets(self, tmp_path, capsys):
        (tmp_path / "proofpatch.toml").write_text(
            '[research.presets.omega]\nquery = "omega tactic"\nmax_results = 3\n'
        )
        result = main(["--root", str(tmp_path), "presets"])
        out = capsys.readouterr().out
        assert result == 0
        assert "omega: 'omega tactic' (max_results=3, timeout_ms=20000)" in out

    def test_no_config(self, tmp_path, capsys):
        result = main(["--root", str(tmp_path), "presets"])
        assert result == 0
        assert "No proofpatch.toml" in capsys.readouterr().out


class TestMain:
    """Tests for top-level CLI behaviour"""

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 0
        assert "usage" in capsys.readouterr().out.lower()

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as info:
            main(["--version"])
        assert info.value.code == 0
        assert "proofpatch" in capsys.readouterr().out
