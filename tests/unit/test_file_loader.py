from pathlib import Path

import pytest

from manuscript_worker.extraction.file_loader import FileLoader


class TestLoadReturnsBytes:
    def test_relative_ref_resolved_against_root(self, tmp_path: Path) -> None:
        loader = FileLoader(files_root=tmp_path)
        (tmp_path / "10").mkdir()
        (tmp_path / "10" / "paper.pdf").write_bytes(b"%PDF test content")

        assert loader.load("10/paper.pdf") == b"%PDF test content"

    def test_absolute_ref_ignores_root(self, tmp_path: Path) -> None:
        path = tmp_path / "paper.txt"
        path.write_bytes(b"text")
        loader = FileLoader(files_root=Path("/elsewhere"))

        assert loader.load(str(path)) == b"text"

    def test_default_root_is_cwd(self) -> None:
        assert FileLoader().resolve("paper.pdf") == Path(".") / "paper.pdf"


class TestLoadRaisesWhenFileMissing:
    def test_raises_file_not_found(self, tmp_path: Path) -> None:
        loader = FileLoader(files_root=tmp_path)
        with pytest.raises(FileNotFoundError, match="missing.pdf"):
            loader.load("missing.pdf")

    def test_directory_is_not_a_file(self, tmp_path: Path) -> None:
        (tmp_path / "folder.pdf").mkdir()
        with pytest.raises(FileNotFoundError):
            FileLoader(files_root=tmp_path).load("folder.pdf")
