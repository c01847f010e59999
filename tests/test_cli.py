import builtins
import json

import pytest

from vshell.cli import main


def test_cli_exec_outputs(capsys):
    with pytest.raises(SystemExit) as exc:
        main(["exec", "echo hi"])
    assert exc.value.code == 0
    captured = capsys.readouterr()
    assert captured.out == "hi\n"


def test_cli_exec_reports_failures(capsys):
    with pytest.raises(SystemExit) as exc:
        main(["exec", "frobnicate"])
    assert exc.value.code == 127
    captured = capsys.readouterr()
    assert "frobnicate: command not found" in captured.err


def test_cli_loads_and_saves_project(tmp_path, capsys):
    project = tmp_path / "tree.json"
    project.write_text(
        json.dumps(
            [
                {
                    "id": "src",
                    "name": "src",
                    "type": "folder",
                    "children": [{"id": "n1", "name": "app.js", "type": "file", "content": "1"}],
                }
            ]
        )
    )
    saved = tmp_path / "out.json"
    with pytest.raises(SystemExit) as exc:
        main(["exec", "touch src/new.js", "--project", str(project), "--save", str(saved)])
    assert exc.value.code == 0
    tree = json.loads(saved.read_text())
    assert [child["name"] for child in tree[0]["children"]] == ["app.js", "new.js"]
    assert tree[0]["children"][0]["id"] == "n1"


def test_cli_shell_repl(monkeypatch, capsys):
    inputs = iter(["echo hello", "cd /nope", ":q"])
    prompts: list[str] = []

    def fake_input(prompt: str) -> str:
        prompts.append(prompt)
        return next(inputs)

    monkeypatch.setattr(builtins, "input", fake_input)
    with pytest.raises(SystemExit) as exc:
        main(["shell"])
    assert exc.value.code == 0
    captured = capsys.readouterr()
    assert "hello" in captured.out
    assert "cd: no such file or directory: /nope" in captured.err
    assert prompts[0] == "developer:~ $ "


def test_cli_shell_exits_on_eof(monkeypatch):
    def fake_input(_: str) -> str:
        raise EOFError

    monkeypatch.setattr(builtins, "input", fake_input)
    with pytest.raises(SystemExit) as exc:
        main(["shell"])
    assert exc.value.code == 0
