"""
Small JSON key-value files for device-local preferences.

Backs the first-run seeding flag and the login session. Each file holds a
single JSON object; writes replace the whole file through a temporary
sibling so a crash never leaves a half-written document behind.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Union

from gamehaven.core.exceptions import SessionStoreError

logger = logging.getLogger(__name__)


class PreferenceFile:
    """
    JSON-object file with get/set/clear semantics.

    Attributes:
        path: Location of the JSON document
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def read_all(self) -> Dict[str, Any]:
        """
        Load every stored key.

        Returns:
            The stored mapping, or an empty dict when the file is missing
            or does not hold a JSON object

        Raises:
            SessionStoreError: If the file exists but can't be read
        """
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as e:
            raise SessionStoreError(f"Cannot read {self.path}: {e}") from e

        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning(f"Ignoring unparsable preference file {self.path}")
            return {}

        if not isinstance(data, dict):
            logger.warning(f"Ignoring non-object preference file {self.path}")
            return {}
        return data

    def replace(self, data: Dict[str, Any]) -> None:
        """
        Overwrite the file with ``data``.

        Raises:
            SessionStoreError: If the file can't be written
        """
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(data, default=str), encoding="utf-8")
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise SessionStoreError(f"Cannot write {self.path}: {e}") from e

    def get(self, key: str, default: Any = None) -> Any:
        return self.read_all().get(key, default)

    def set(self, key: str, value: Any) -> None:
        data = self.read_all()
        data[key] = value
        self.replace(data)

    def clear(self) -> None:
        """Remove every key (the file is deleted)."""
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            raise SessionStoreError(f"Cannot clear {self.path}: {e}") from e
