from pathlib import Path


class FileLoader:
    """Resolves a document reference to a filesystem path and reads its bytes.

    Relative references are resolved against *files_root*.
    """

    def __init__(self, files_root: Path | None = None) -> None:
        self._files_root = files_root if files_root is not None else Path(".")

    def load(self, source_ref: str) -> bytes:
        """Read document bytes from disk.

        Raises:
            FileNotFoundError: if the file does not exist at resolved path.
        """
        path = self.resolve(source_ref)
        if not path.is_file():
            raise FileNotFoundError(f"File not found: {path}")
        return path.read_bytes()

    def resolve(self, source_ref: str) -> Path:
        path = Path(source_ref)
        return path if path.is_absolute() else self._files_root / path
