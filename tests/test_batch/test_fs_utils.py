"""Tests for filesystem helpers."""

from __future__ import annotations

from pathlib import Path

import pytest
from bru_to_oc.batch.fs_utils import (
    delete_file,
    has_bru_extension,
    has_yaml_extension,
    is_collection_bru,
    is_folder_bru,
    read_bytes,
    resolve_output_path,
    resolve_reverse_path,
    walk_files,
    write_text,
)
from bru_to_oc.errors import FileIOError, IoErrorKind


class TestPredicates:
    """Tests for extension and settings-file checks."""

    def test_extensions(self) -> None:
        """Extensions compare case-insensitively."""
        assert has_bru_extension(Path("a.bru"))
        assert has_bru_extension(Path("a.BRU"))
        assert not has_bru_extension(Path("a.yml"))
        assert has_yaml_extension(Path("a.yml"))
        assert has_yaml_extension(Path("a.yaml"))
        assert not has_yaml_extension(Path("a.json"))

    def test_settings_files(self) -> None:
        """folder.bru and collection.bru are recognised by name."""
        assert is_folder_bru(Path("x/folder.bru"))
        assert is_collection_bru(Path("collection.bru"))
        assert not is_folder_bru(Path("folders.bru"))


class TestResolveOutputPath:
    """Tests for output path naming."""

    def test_next_to_input(self) -> None:
        """Without an output directory the suffix is swapped in place."""
        assert resolve_output_path(Path("api/get.bru")) == Path("api/get.yml")

    def test_mirrors_relative_path(self) -> None:
        """The path under base_dir is mirrored under output_dir."""
        result = resolve_output_path(Path("api/users/get.bru"), Path("out"), Path("api"))
        assert result == Path("out/users/get.yml")

    def test_outside_base_dir(self) -> None:
        """Files outside base_dir keep only their name."""
        result = resolve_output_path(Path("other/get.bru"), Path("out"), Path("api"))
        assert result == Path("out/get.yml")

    def test_reverse(self) -> None:
        """The reverse path uses the .bru suffix."""
        assert resolve_reverse_path(Path("api/get.yaml")) == Path("api/get.bru")


class TestWalkFiles:
    """Tests for walk_files."""

    @pytest.fixture
    def tree(self, tmp_path: Path) -> Path:
        """Build a small tree with a hidden directory."""
        (tmp_path / "sub").mkdir()
        (tmp_path / ".git").mkdir()
        for name in ("b.bru", "a.bru", "c.yml", "sub/d.bru", ".git/e.bru"):
            (tmp_path / name).write_text("x")
        return tmp_path

    def test_flat(self, tree: Path) -> None:
        """Non-recursive walks list the top level only, sorted."""
        assert [p.name for p in walk_files(tree, [".bru"])] == ["a.bru", "b.bru"]

    def test_recursive_skips_hidden(self, tree: Path) -> None:
        """Recursive walks descend but skip hidden directories."""
        found = [p.relative_to(tree).as_posix() for p in walk_files(tree, [".bru"], recursive=True)]
        assert found == ["a.bru", "b.bru", "sub/d.bru"]

    def test_suffixes(self, tree: Path) -> None:
        """Only the requested suffixes are listed."""
        assert [p.name for p in walk_files(tree, [".yml", ".yaml"])] == ["c.yml"]


class TestFileIO:
    """Tests for read, write and delete."""

    def test_read_missing(self, tmp_path: Path) -> None:
        """A missing file maps to FileNotFound."""
        with pytest.raises(FileIOError) as exc_info:
            read_bytes(tmp_path / "nope.bru")
        assert exc_info.value.kind is IoErrorKind.FILE_NOT_FOUND

    def test_read_directory(self, tmp_path: Path) -> None:
        """Reading a directory maps to InvalidPath."""
        with pytest.raises(FileIOError) as exc_info:
            read_bytes(tmp_path)
        assert exc_info.value.kind is IoErrorKind.INVALID_PATH

    def test_write_creates_parents(self, tmp_path: Path) -> None:
        """Parent directories are created."""
        target = tmp_path / "a" / "b" / "c.yml"
        write_text(target, "x: 1\n")
        assert target.read_text(encoding="utf-8") == "x: 1\n"

    def test_write_under_file_fails(self, tmp_path: Path) -> None:
        """A parent that is a file cannot be created."""
        blocker = tmp_path / "blocker"
        blocker.write_text("x")
        with pytest.raises(FileIOError) as exc_info:
            write_text(blocker / "c.yml", "x")
        assert exc_info.value.kind is IoErrorKind.DIRECTORY_CREATION_FAILED

    def test_delete(self, tmp_path: Path) -> None:
        """delete_file removes the file and reports missing ones."""
        target = tmp_path / "a.bru"
        target.write_text("x")
        delete_file(target)
        assert not target.exists()
        with pytest.raises(FileIOError):
            delete_file(target)
