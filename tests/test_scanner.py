from pathlib import Path

import pytest

from dendron_importer.scanner import ScanError, TreeScanner, scan_tree


def test_scan_is_depth_first_with_directories_first(make_tree) -> None:
    root = make_tree(
        {
            "b.md": "b",
            "a/z.md": "z",
            "a/inner/deep.md": "deep",
            "c/x.png": b"\x89PNG",
        }
    )
    entries = scan_tree(root)
    assert [entry.relative_path for entry in entries] == [
        "a",
        "a/inner",
        "a/inner/deep.md",
        "a/z.md",
        "b.md",
        "c",
        "c/x.png",
    ]
    directories = {entry.relative_path for entry in entries if entry.is_directory}
    assert directories == {"a", "a/inner", "c"}
    deep = next(entry for entry in entries if entry.name == "deep.md")
    assert deep.location == root / "a" / "inner" / "deep.md"


def test_scan_skips_hidden_and_ignored(make_tree) -> None:
    root = make_tree(
        {
            ".obsidian/app.json": "{}",
            ".hidden.md": "secret",
            "node_modules/pkg/readme.md": "dep",
            "notes/.trash/old.md": "old",
            "notes/keep.md": "keep",
        }
    )
    paths = [entry.relative_path for entry in scan_tree(root)]
    assert paths == ["notes", "notes/keep.md"]


def test_scan_custom_ignored_dirs(make_tree) -> None:
    root = make_tree({"templates/t.md": "t", "n.md": "n"})
    paths = [entry.relative_path for entry in scan_tree(root, ignored_dirs=["templates"])]
    assert paths == ["n.md"]


def test_unreadable_subdirectory_is_warned_and_skipped(make_tree, monkeypatch: pytest.MonkeyPatch) -> None:
    root = make_tree({"broken/lost.md": "x", "ok/fine.md": "y", "top.md": "z"})
    original = TreeScanner._list

    def flaky_list(self: TreeScanner, directory: Path, base: str):
        if base == "broken":
            raise PermissionError("denied")
        return original(self, directory, base)

    monkeypatch.setattr(TreeScanner, "_list", flaky_list)
    scanner = TreeScanner(root)
    paths = [entry.relative_path for entry in scanner.scan()]
    assert paths == ["broken", "ok", "ok/fine.md", "top.md"]
    assert len(scanner.warnings) == 1
    assert "broken" in scanner.warnings[0]
    assert "denied" in scanner.warnings[0]


def test_missing_root_raises_scan_error(tmp_path: Path) -> None:
    with pytest.raises(ScanError):
        scan_tree(tmp_path / "does-not-exist")


def test_scan_is_lazy(make_tree) -> None:
    root = make_tree({"a.md": "a", "b.md": "b"})
    iterator = TreeScanner(root).scan()
    first = next(iterator)
    assert first.relative_path == "a.md"
    assert [entry.relative_path for entry in iterator] == ["b.md"]
