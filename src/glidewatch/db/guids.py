"""Persisted set of feed GUIDs that were already announced.

The file is a JSON array. Reads are forgiving (a missing or damaged file
means "nothing seen yet"), writes are atomic: the new content goes to a
temporary file in the same directory which then replaces the old one.
"""

from __future__ import annotations

import json
import logging
import os
import shutil
import tempfile
from pathlib import Path


logger = logging.getLogger("guids")

NEW_FILE_MODE = 0o644


class GuidStoreError(RuntimeError):
    pass


class GuidStore:
    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = Path(path)

    def load(self) -> set[str]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            logger.info("GUIDs file missing, starting empty: path=%s", self.path)
            return set()
        except (OSError, ValueError):
            logger.warning("GUIDs file unreadable, starting empty: path=%s", self.path, exc_info=True)
            return set()

        if not isinstance(data, list) or not all(isinstance(item, str) for item in data):
            logger.warning("GUIDs file has unexpected content, starting empty: path=%s", self.path)
            return set()

        guids = set(data)
        logger.debug("GUIDs loaded: path=%s count=%s", self.path, len(guids))
        return guids

    def save(self, guids: set[str]) -> None:
        directory = self.path.parent
        tmp_name: str | None = None
        try:
            directory.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=directory,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                delete=False,
            ) as f:
                tmp_name = f.name
                json.dump(sorted(guids), f, indent=2)
                f.flush()
                os.fsync(f.fileno())
            # Temporary files are created 0600.
            if self.path.exists():
                shutil.copymode(self.path, tmp_name)
            else:
                os.chmod(tmp_name, NEW_FILE_MODE)
            os.replace(tmp_name, self.path)
        except OSError as exc:
            if tmp_name is not None:
                _remove_quietly(tmp_name)
            raise GuidStoreError(f"Could not write GUIDs to {self.path}") from exc
        logger.debug("GUIDs saved: path=%s count=%s", self.path, len(guids))


def _remove_quietly(path: str) -> None:
    try:
        os.unlink(path)
    except FileNotFoundError:
        pass
    except OSError:
        logger.debug("Temporary GUIDs file cleanup failed: path=%s", path, exc_info=True)
