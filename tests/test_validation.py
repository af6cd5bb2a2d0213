from pathlib import Path

import pytest

from dendron_importer.validation import (
    analyze_vault,
    has_markdown_files,
    has_vault_config,
    validate_source_vault,
)


def test_vault_config_marker_is_enough(make_tree) -> None:
    root = make_tree({".obsidian/app.json": "{}", "image.png": b"\x00"})
    result = validate_source_vault(root)
    assert result.is_likely_valid
    assert result.stats.has_vault_config
    assert result.stats.markdown_files == 0


def test_markdown_within_depth_is_valid(make_tree) -> None:
    root = make_tree({"one/two/note.md": "x"})
    assert has_markdown_files(root)
    assert validate_source_vault(root).is_likely_valid


def test_markdown_too_deep_is_not_counted(make_tree) -> None:
    root = make_tree({"one/two/three/note.md": "x"})
    assert not has_markdown_files(root)
    result = validate_source_vault(root)
    assert not result.is_likely_valid
    assert result.stats.markdown_files == 1


def test_hidden_directories_are_not_searched(make_tree) -> None:
    root = make_tree({".trash/note.md": "x", "a.txt": "y"})
    assert not has_markdown_files(root)
    assert not has_vault_config(root)


def test_analyze_vault_counts(make_tree) -> None:
    root = make_tree(
        {
            "a.md": "a",
            "docs/b.md": "b",
            "docs/img/c.png": b"\x00",
            "docs/deep/er/d.md": "d",
            ".obsidian/workspace.json": "{}",
        }
    )
    stats = analyze_vault(root)
    assert stats.markdown_files == 3
    assert stats.total_files == 4
    assert stats.folders == 4
    assert stats.has_vault_config


def test_missing_directory_is_not_valid(tmp_path: Path) -> None:
    result = validate_source_vault(tmp_path / "nope")
    assert not result.is_likely_valid
    assert result.stats.total_files == 0


def test_describe_mentions_counts(make_tree) -> None:
    root = make_tree({"a.md": "a"})
    text = validate_source_vault(root).describe()
    assert "Markdown Files: 1" in text
    assert "Obsidian Config: Not found" in text


def test_symlinked_directories_are_not_followed(tmp_path: Path, make_tree) -> None:
    elsewhere = make_tree({"note.md": "x"}, name="elsewhere")
    root = tmp_path / "vault"
    root.mkdir()
    try:
        (root / "linked").symlink_to(elsewhere, target_is_directory=True)
    except OSError:
        pytest.skip("symlinks not supported")
    assert not has_markdown_files(root)
    assert not validate_source_vault(root).is_likely_valid
