import logging

from vshell import ProjectNode, dump_tree, export_tree, import_tree, load_tree


def sample_tree() -> list[ProjectNode]:
    return [
        ProjectNode.folder(
            "src",
            [
                ProjectNode.file("index.js", "console.log('hi')\n", id="n-1"),
                ProjectNode.folder("components", [ProjectNode.file("App.jsx", "", id="n-2")]),
            ],
            id="f-src",
        ),
        ProjectNode.file("README.md", "# demo\n", id="n-3", mime_type="text/markdown"),
        ProjectNode.folder("empty"),
    ]


def test_import_builds_directories_and_files():
    vfs = import_tree(sample_tree())
    assert vfs.directories == {"/", "/src", "/src/components", "/empty"}
    assert vfs.read_file("/src/index.js") == "console.log('hi')\n"
    assert vfs.files["/README.md"].mime_type == "text/markdown"
    assert vfs.files["/src/components/App.jsx"].node_id == "n-2"
    vfs.check_invariants()


def test_export_attaches_children_in_sorted_order():
    roots = export_tree(import_tree(sample_tree()))
    assert [node.name for node in roots] == ["README.md", "empty", "src"]
    src = roots[2]
    assert src.id == "/src"
    assert [child.name for child in src.children] == ["components", "index.js"]
    assert src.children[1].id == "n-1"
    assert roots[1].children == []


def test_round_trip_is_a_fixpoint():
    first = export_tree(import_tree(sample_tree()))
    second = export_tree(import_tree(first))
    assert second == first


def test_reimport_keeps_surviving_cwd():
    vfs = import_tree(sample_tree())
    vfs.change_directory("/src/components")
    import_tree(sample_tree(), vfs)
    assert vfs.cwd == "/src/components"
    import_tree([ProjectNode.file("only.txt")], vfs)
    assert vfs.cwd == "/"


def test_colliding_and_invalid_nodes_are_skipped(caplog):
    tree = [
        ProjectNode.file("dup", "file wins"),
        ProjectNode.folder("dup", [ProjectNode.file("lost.txt")]),
        ProjectNode.file("bad/name"),
    ]
    with caplog.at_level(logging.WARNING, logger="vshell.sync"):
        vfs = import_tree(tree)
    assert vfs.read_file("/dup") == "file wins"
    assert "/dup/lost.txt" not in vfs.files
    assert len(caplog.records) == 2
    vfs.check_invariants()


def test_json_uses_editor_field_names():
    payload = dump_tree([ProjectNode.file("a.md", "x", mime_type="text/markdown")])
    assert '"mimeType": "text/markdown"' in payload
    assert "children" not in payload
    nodes = load_tree(payload)
    assert nodes[0].mime_type == "text/markdown"
