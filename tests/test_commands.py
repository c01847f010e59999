import pytest

from vshell import ProjectNode, VirtualShell


@pytest.fixture
def shell() -> VirtualShell:
    sh = VirtualShell()
    sh.start(
        [
            ProjectNode.folder(
                "src",
                [
                    ProjectNode.file("index.js", "import App from './App'\nrender(App)\n"),
                    ProjectNode.file("App.jsx", "export default function App() {}\n"),
                    ProjectNode.folder("styles", [ProjectNode.file("main.css", "body {}\n")]),
                ],
            ),
            ProjectNode.file("README.md", "# Demo\nRun npm start\n"),
            ProjectNode.file(".env", "SECRET=1\n"),
        ]
    )
    return sh


def test_pwd_and_cd(shell):
    shell.execute("cd src/styles")
    assert shell.execute("pwd").output == "/src/styles"
    assert shell.env["PWD"] == "/src/styles"
    shell.execute("cd")
    assert shell.vfs.cwd == "/"
    back = shell.execute("cd -")
    assert back.output == "/src/styles"
    assert shell.execute("cd a b").exit_code == 2


def test_cd_into_file_fails(shell):
    result = shell.execute("cd README.md")
    assert result.output == "cd: no such file or directory: README.md"


def test_ls_marks_directories_and_hides_dotfiles(shell):
    assert shell.execute("ls").output == "README.md\nsrc/"
    assert shell.execute("ls -a").output == ".env\nREADME.md\nsrc/"
    assert shell.execute("ls src").output == "App.jsx\nindex.js\nstyles/"


def test_ls_long_format(shell):
    lines = shell.execute("ls -la src").output.splitlines()
    assert lines[0].startswith("-rw-r--r--  1 developer developer     33 ")
    assert lines[0].endswith(" App.jsx")
    assert lines[2].startswith("drwxr-xr-x  2 developer developer   4096 ")
    assert lines[2].endswith(" styles/")


def test_ls_missing(shell):
    result = shell.execute("ls nope")
    assert result.exit_code == 1
    assert result.output == "ls: cannot access 'nope': No such file or directory"


def test_tree(shell):
    output = shell.execute("tree src").output
    assert output.splitlines() == [
        "src",
        "├── App.jsx",
        "├── index.js",
        "└── styles/",
        "    └── main.css",
        "",
        "1 directories, 3 files",
    ]


def test_cat(shell):
    assert shell.execute("cat README.md").output == "# Demo\nRun npm start\n"
    result = shell.execute("cat src")
    assert result.exit_code == 1
    assert result.output == "cat: src: Is a directory"
    assert shell.execute("cat").exit_code == 2


def test_touch_existing_file_keeps_content(shell):
    shell.execute("touch README.md")
    assert shell.vfs.read_file("/README.md") == "# Demo\nRun npm start\n"
    result = shell.execute("touch nowhere/file.txt")
    assert result.output == "touch: cannot touch 'nowhere/file.txt': No such file or directory"


def test_mkdir_existing(shell):
    result = shell.execute("mkdir src")
    assert result.output == "mkdir: cannot create directory 'src': File exists"


def test_rm_variants(shell):
    shell.execute("mkdir empty")
    assert shell.execute("rm empty").exit_code == 0
    result = shell.execute("rm src")
    assert result.output == "rm: cannot remove 'src': Directory not empty"
    assert shell.execute("rm -f ghost.txt").exit_code == 0
    missing = shell.execute("rm ghost.txt")
    assert missing.output == "rm: cannot remove 'ghost.txt': No such file or directory"
    assert shell.execute("rm -rf src").exit_code == 0
    assert not shell.vfs.exists("/src/index.js")


def test_cp_file_and_directory(shell):
    shell.execute("mkdir backup")
    shell.execute("cp README.md backup")
    assert shell.vfs.read_file("/backup/README.md") == "# Demo\nRun npm start\n"
    refused = shell.execute("cp src copy")
    assert refused.output == "cp: -r not specified; omitting directory 'src'"
    shell.execute("cp -r src copy")
    assert shell.vfs.read_file("/copy/styles/main.css") == "body {}\n"
    missing = shell.execute("cp ghost.txt x")
    assert missing.output == "cp: cannot stat 'ghost.txt': No such file or directory"


def test_mv_directory_into_itself(shell):
    result = shell.execute("mv src src/styles")
    assert result.exit_code == 1
    assert shell.vfs.is_directory("/src")


def test_grep(shell):
    result = shell.execute("grep App src/index.js")
    assert result.output == "1:import App from './App'\n2:render(App)"
    multi = shell.execute("grep -i DEMO README.md src/App.jsx")
    assert multi.output == "README.md:1:# Demo"
    none = shell.execute("grep zzz README.md")
    assert none.output == "No matches found for 'zzz'"
    assert none.exit_code == 0
    assert shell.execute("grep zzz").exit_code == 2


def test_find(shell):
    everything = shell.execute("find").output.splitlines()
    assert everything[0] == "/"
    assert "/src/styles/main.css" in everything
    assert shell.execute("find styles").output == "/src/styles\n/src/styles/main.css"
    assert shell.execute("find -name *.js").output == "/src/index.js"
    assert shell.execute("find -type d").output == "/\n/src\n/src/styles"
    shell.execute("cd src")
    assert shell.execute("find css").output == "/src/styles/main.css"


def test_head_tail_wc(shell):
    shell.vfs.write_file("/lines.txt", "\n".join(f"line {i}" for i in range(1, 21)))
    assert shell.execute("head -n 2 lines.txt").output == "line 1\nline 2\n"
    assert shell.execute("tail -n 1 lines.txt").output == "line 20"
    assert shell.execute("head -c 5 lines.txt").output == "line "
    wc = shell.execute("wc -l README.md").output
    assert wc == "      2 README.md"


def test_echo(shell):
    assert shell.execute("echo hello   world").output == "hello world"


def test_env_and_export(shell):
    shell.execute("export NODE_ENV=development")
    env = shell.execute("env").output.splitlines()
    assert "NODE_ENV=development" in env
    assert "USER=developer" in env
    assert "SHELL=/bin/bash" in env
    bad = shell.execute("export 1BAD=x")
    assert bad.exit_code == 1
    shell.execute("unset NODE_ENV")
    assert "NODE_ENV" not in shell.env


def test_history_command(shell):
    shell.execute("pwd")
    shell.execute("ls")
    assert shell.execute("history").output == "1  pwd\n2  ls"
    assert shell.execute("history 1").output == "3  history"
    shell.execute("history -c")
    assert len(shell.state.history) == 1


def test_clear(shell):
    assert shell.execute("clear").output == "\x1b[2J\x1b[H"


def test_alias_management(shell):
    shell.execute('alias serve-dev="npm run dev"')
    assert "alias serve-dev='npm run dev'" in shell.execute("alias").output
    assert "Server running" in shell.execute("serve-dev").output
    shell.execute("unalias serve-dev")
    assert shell.execute("serve-dev").exit_code == 127
    assert shell.execute("unalias nope").exit_code == 1


def test_whoami_and_which(shell):
    assert shell.execute("whoami").output == "developer"
    assert shell.execute("which ls").output == "/usr/bin/ls"
    assert shell.execute("which ll").output == "ll: aliased to ls -la"
    assert shell.execute("which nothing").exit_code == 1


def test_stat(shell):
    out = shell.execute("stat README.md").output
    assert "File: /README.md" in out
    assert "Type: regular file" in out
    assert "Type: directory" in shell.execute("stat src").output
    assert shell.execute("stat ghost").exit_code == 1


def test_help(shell):
    text = shell.execute("help").output
    assert text.startswith("Available commands:")
    assert "Change directory" in text
    assert "ll" in text.split("Shortcuts:")[1]
    assert shell.execute("help cd").output == "cd [path]\n    Change directory"
    assert shell.execute("help nope").exit_code == 1


def test_cp_mv_report_type_conflicts(shell):
    shell.execute("mkdir -p backup/README.md")
    copied = shell.execute("cp README.md backup")
    assert copied.exit_code == 1
    assert copied.output == (
        "cp: cannot overwrite directory '/backup/README.md' with non-directory"
    )
    moved = shell.execute("mv README.md backup")
    assert moved.output == "mv: cannot overwrite directory '/backup/README.md' with non-directory"
    assert shell.vfs.is_file("/README.md")
    clash = shell.execute("mv src README.md")
    assert clash.output == "mv: cannot overwrite non-directory '/README.md' with directory 'src'"
    assert shell.vfs.is_directory("/src")
    shell.execute("mkdir -p dest/styles/keep")
    nested = shell.execute("mv src/styles dest")
    assert nested.output == "mv: cannot move 'src/styles' to '/dest/styles': Directory not empty"
