# logrelay/writer.py
import threading
from pathlib import Path
from typing import Union


class PersistenceError(Exception):
    """The log entry could not be appended. Always fatal to the request."""

    def __init__(self, path: str, cause: Exception):
        super().__init__(f"cannot append to {path}: {cause}")
        self.path = path


class LogFileWriter:
    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._lock = threading.Lock()

    def append(self, entry: str) -> None:
        """
        Append one rendered entry. The entry is encoded before the file is
        touched, then written with a single write and flushed, under a lock so
        concurrent requests never interleave partial lines.
        """
        try:
            raw = entry.encode("utf-8")
        except UnicodeEncodeError as e:
            raise PersistenceError(str(self.path), e) from e

        try:
            with self._lock:
                with self.path.open("ab") as f:
                    f.write(raw)
                    f.flush()
        except OSError as e:
            raise PersistenceError(str(self.path), e) from e
