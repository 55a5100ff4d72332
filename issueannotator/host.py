"""
Host capabilities the pipeline depends on.

The annotator and resolver only see these interfaces: a vault to read and
write documents, a notifier for transient user notices, and a settings store.
The implementations here back them with the local filesystem and the console.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, Tuple, Union

from .logger import get_logger

PathLike = Union[str, Path]


class Notifier(Protocol):
    def notify(self, message: str, duration_ms: int) -> None:
        ...


class Vault(Protocol):
    def read(self, file: Path) -> str:
        ...

    def modify(self, file: Path, text: str) -> None:
        ...

    def get_active_file(self) -> Optional[Path]:
        ...

    def create(self, path: PathLike, text: str) -> Path:
        ...

    def get_abstract_file_by_path(self, path: PathLike) -> Optional[Path]:
        ...


class SettingsStore(Protocol):
    def load_data(self) -> Dict[str, Any]:
        ...

    def save_data(self, data: Dict[str, Any]) -> None:
        ...


class ConsoleNotifier:
    """Print notices to stdout and mirror them into the log."""

    def notify(self, message: str, duration_ms: int) -> None:
        print(f"[notice] {message}")
        get_logger().info("Notice", message=message, duration_ms=duration_ms)


class RecordingNotifier:
    """Keep notices in memory, in the order they were raised."""

    def __init__(self):
        self.notices: List[Tuple[str, int]] = []

    def notify(self, message: str, duration_ms: int) -> None:
        self.notices.append((message, duration_ms))

    @property
    def messages(self) -> List[str]:
        return [m for m, _ in self.notices]


class FileVault:
    """A directory of notes with at most one active file."""

    def __init__(self, root: PathLike = ".", active: Optional[PathLike] = None):
        self.root = Path(root)
        self.active = self._resolve(active) if active is not None else None

    def _resolve(self, path: PathLike) -> Path:
        p = Path(path)
        return p if p.is_absolute() else self.root / p

    def read(self, file: Path) -> str:
        with Path(file).open("r", encoding="utf-8", newline="") as f:
            return f.read()

    def modify(self, file: Path, text: str) -> None:
        with Path(file).open("w", encoding="utf-8", newline="") as f:
            f.write(text)

    def get_active_file(self) -> Optional[Path]:
        if self.active is None or not self.active.is_file():
            return None
        return self.active

    def create(self, path: PathLike, text: str) -> Path:
        """Create a new note; refuses to overwrite an existing one."""
        target = self._resolve(path)
        if target.exists():
            raise FileExistsError(f"File already exists: {target}")
        target.parent.mkdir(parents=True, exist_ok=True)
        with target.open("x", encoding="utf-8") as f:
            f.write(text)
        return target

    def get_abstract_file_by_path(self, path: PathLike) -> Optional[Path]:
        target = self._resolve(path)
        return target if target.exists() else None


class JsonSettingsStore:
    """Settings persisted as a JSON object on disk."""

    def __init__(self, path: PathLike):
        self.path = Path(path)

    def load_data(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as f:
                content = f.read().strip()
                if not content:
                    return {}
                data = json.loads(content)
        except (json.JSONDecodeError, UnicodeDecodeError, IOError) as e:
            get_logger().warning("Ignoring unreadable settings file", path=str(self.path), error=str(e))
            return {}
        return data if isinstance(data, dict) else {}

    def save_data(self, data: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
