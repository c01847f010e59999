import pytest

from vshell import ProjectNode, VirtualShell

@pytest.fixture
def shell() -> VirtualShell:
    content = "\n".join([f"line {i}" for i in range(1, 21)])
    sh = VirtualShell()
    sh.start([ProjectNode.file("lines.txt", content)])
    return sh

def test_head_default(shell):
    result = shell.execute("head lines.txt")
    assert result.exit_code == 0
    lines = result.output.splitlines()
    assert len(lines) == 10
    assert lines[0] == "line 1"
    assert lines[-1] == "line 10"

def test_head_lines(shell):
    result = shell.execute("head -n 5 lines.txt")
    assert result.exit_code == 0
    lines = result.output.splitlines()
    assert len(lines) == 5
    assert lines[-1] == "line 5"

def test_head_bytes(shell):
    result = shell.execute("head -c 5 lines.txt")
    assert result.exit_code == 0
    assert result.output == "line "

def test_tail_default(shell):
    result = shell.execute("tail lines.txt")
    assert result.exit_code == 0
    lines = result.output.splitlines()
    assert len(lines) == 10
    assert lines[0] == "line 11"
    assert lines[-1] == "line 20"

def test_tail_bytes(shell):
    result = shell.execute("tail -c 2 lines.txt")
    assert result.exit_code == 0
    assert result.output == "20"  # last line is "line 20"

def test_multiple_files(shell):
    shell.vfs.write_file("/other.txt", "other content")
    result = shell.execute("head -n 1 lines.txt other.txt")
    assert "==> lines.txt <==" in result.output
    assert "line 1" in result.output
    assert "==> other.txt <==" in result.output
    assert "other content" in result.output

def test_head_errors(shell):
    assert shell.execute("head").output == "head: missing file operand"
    assert shell.execute("head -n").output == "head: option requires an argument -- 'n'"
    assert shell.execute("head -n x lines.txt").output == "head: invalid number: 'x'"
    missing = shell.execute("tail gone.txt")
    assert missing.exit_code == 1
    assert "No such file or directory" in missing.output

def test_wc_counts(shell):
    result = shell.execute("wc lines.txt")
    assert result.output == f"{19:>7} {40:>7} {len(shell.vfs.read_file('/lines.txt')):>7} lines.txt"

def test_zero_count_prints_nothing(shell):
    shell.vfs.write_file("/log.txt", "a\nb\nc\n")
    assert shell.execute("tail -n 0 log.txt").output == ""
    assert shell.execute("tail -c 0 log.txt").output == ""
    assert shell.execute("head -n 0 log.txt").output == ""
    assert shell.execute("tail -n 5 log.txt").output == "a\nb\nc\n"
