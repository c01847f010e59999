import json

import pytest

from vshell import ProjectNode, VirtualShell


@pytest.fixture
def shell() -> VirtualShell:
    manifest = {
        "name": "demo",
        "version": "0.2.0",
        "scripts": {"dev": "vite", "lint": "eslint ."},
        "dependencies": {"react": "^18.2.0"},
        "devDependencies": {"vite": "~4.4.0"},
    }
    sh = VirtualShell()
    sh.start(
        [
            ProjectNode.file("package.json", json.dumps(manifest)),
            ProjectNode.file("index.js", "console.log(1)\n"),
            ProjectNode.file("main.py", "print(1)\n"),
            ProjectNode.file("requirements.txt", "requests\n# comment\nrich==13.0\n"),
            ProjectNode.folder("public"),
        ]
    )
    return sh


def test_npm_install(shell):
    assert shell.execute("npm install").output == (
        "Installing dependencies...\n✓ Dependencies installed successfully!"
    )
    assert shell.execute("npm i react vue").output == (
        "Installing react, vue...\n✓ Packages installed successfully!"
    )


def test_npm_canned_subcommands(shell):
    assert shell.execute("npm test").output == "Running tests...\n✓ All tests passed!"
    assert "http://localhost:3000" in shell.execute("npm start").output
    assert shell.execute("npm build").output.endswith("Build completed successfully!")
    assert shell.execute("npm version").output == "npm: 9.0.0\nnode: 18.0.0"


def test_npm_run_uses_package_json(shell):
    listing = shell.execute("npm run").output
    assert listing == "Available scripts:\n  dev: vite\n  lint: eslint ."
    assert "http://localhost:3000" in shell.execute("npm run dev").output
    assert shell.execute("npm run lint").output.startswith("> lint\n> eslint .")
    missing = shell.execute("npm run deploy")
    assert missing.output == 'Error: Missing script: "deploy"'
    assert missing.exit_code == 1


def test_npm_run_defaults_without_manifest(shell):
    shell.execute("rm package.json")
    assert "preview: vite preview" in shell.execute("npm run").output
    assert "http://localhost:4173" in shell.execute("npm run preview").output


def test_npm_list(shell):
    assert shell.execute("npm ls").output == (
        "demo@0.2.0 /\n├── react@18.2.0\n└── vite@4.4.0"
    )


def test_unknown_subcommand_shows_help_and_succeeds(shell):
    result = shell.execute("npm frobnicate")
    assert result.exit_code == 0
    assert "'frobnicate' is not a npm command" in result.output
    assert "npm install [package...]" in result.output


def test_yarn_and_pnpm_share_the_handler(shell):
    assert shell.execute("yarn --version").output == "1.22.19"
    assert shell.execute("pnpm version").output.startswith("pnpm: 8.6.0")
    assert "yarn install [package...]" in shell.execute("yarn").output


def test_npx(shell):
    assert "create-vite" in shell.execute("npx create-vite my-app").output
    assert shell.execute("npx").exit_code == 2


def test_node(shell):
    assert shell.execute("node").output.startswith("Node.js v18.0.0")
    assert shell.execute("node -v").output == "v18.0.0"
    assert shell.execute("node index.js").output == (
        "Executing index.js...\n✓ Script executed successfully!"
    )
    missing = shell.execute("node gone.js")
    assert missing.output == "Error: Cannot find module 'gone.js'"
    assert missing.exit_code == 1


def test_python(shell):
    assert shell.execute("python3 --version").output == "Python 3.11.4"
    assert "Executing main.py" in shell.execute("python main.py").output
    missing = shell.execute("python3 nope.py")
    assert missing.exit_code == 2
    assert missing.output.startswith("python3: can't open file '/nope.py'")


def test_pip(shell):
    assert shell.execute("pip install flask").output == (
        "Collecting flask\nSuccessfully installed flask"
    )
    from_file = shell.execute("pip install -r requirements.txt").output
    assert from_file.endswith("Successfully installed requests rich==13.0")
    assert shell.execute("pip install").exit_code == 2
    assert shell.execute("pip --version").output.startswith("pip 23.1.2")


def test_serve(shell):
    assert shell.execute("serve public -l 8080").output == (
        "Serving /public...\n✓ Server running on http://localhost:8080"
    )
    assert shell.execute("serve nowhere").exit_code == 1


def test_git(shell):
    status = shell.execute("git status").output
    assert status.startswith("On branch main")
    assert "\tpackage.json" in status
    assert "\tpublic/" in status
    commit = shell.execute('git commit -m "initial import"').output
    assert commit.startswith("[main ")
    assert "initial import" in commit
    assert shell.execute("git pull").output == "Already up to date."
    assert shell.execute("git clone https://example.com/repo.git").output.startswith(
        "Cloning into 'repo'..."
    )
    unknown = shell.execute("git frob")
    assert unknown.exit_code == 0
    assert "usage: git" in unknown.output


def test_curl_and_wget_do_not_touch_vfs(shell):
    revision = shell.vfs.revision
    body = json.loads(shell.execute("curl -X post https://api.example.com/items").output)
    assert body["method"] == "POST"
    assert body["host"] == "api.example.com"
    assert body["path"] == "/items"
    assert "200 OK" in shell.execute("curl -I example.com").output
    assert "'file.zip' saved" in shell.execute("wget https://example.com/file.zip").output
    assert shell.vfs.revision == revision
    assert shell.execute("curl").exit_code == 2
