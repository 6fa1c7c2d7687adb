"""Read-only property table served by the System service.

The table is built once and handed to the application at construction time,
so handlers never reach into process-global state and tests can serve any
table they like.
"""

import getpass
import os
import platform
import sys
from typing import Any, Dict, Iterator, Mapping, Optional

import structlog

from libs.common.config import SystemConfig, load_properties_file

logger = structlog.get_logger("system_service.properties")


def to_property_value(value: Any) -> str:
    """Render a value the way property tables store it."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def runtime_properties() -> Dict[str, str]:
    """Facts about the running interpreter and host."""
    try:
        user_name = getpass.getuser()
    except (KeyError, OSError):
        user_name = ""

    return {
        "os.name": platform.system(),
        "os.arch": platform.machine(),
        "os.version": platform.release(),
        "python.version": platform.python_version(),
        "python.implementation": platform.python_implementation(),
        "user.dir": os.getcwd(),
        "user.home": os.path.expanduser("~"),
        "user.name": user_name,
        "file.separator": os.sep,
        "path.separator": os.pathsep,
        "line.separator": os.linesep,
        "file.encoding": sys.getfilesystemencoding(),
    }


class PropertyTable(Mapping[str, str]):
    """Immutable mapping of property keys to string values."""

    def __init__(self, entries: Optional[Mapping[str, Any]] = None):
        self._entries: Dict[str, str] = {
            str(key): to_property_value(value) for key, value in (entries or {}).items()
        }

    def __getitem__(self, key: str) -> str:
        return self._entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"PropertyTable({len(self._entries)} entries)"

    def lookup(self, key: str) -> Optional[str]:
        """Exact-match lookup; ``None`` when the key is absent."""
        return self._entries.get(key)

    def as_dict(self) -> Dict[str, str]:
        return dict(self._entries)

    @classmethod
    def from_config(
        cls,
        config: SystemConfig,
        overrides: Optional[Mapping[str, Any]] = None,
    ) -> "PropertyTable":
        """Build the table a running server exposes.

        Later sources win: runtime facts, then server identity from config,
        then the optional properties file, then ``overrides``.
        """
        entries: Dict[str, Any] = runtime_properties()
        entries["wlp.server.name"] = config.sp_server_name
        entries["wlp.user.dir.isDefault"] = config.sp_user_dir_is_default

        if config.sp_properties_file:
            file_entries = load_properties_file(config.sp_properties_file)
            if not file_entries:
                logger.warning("Properties file empty or missing", path=config.sp_properties_file)
            entries.update(file_entries)

        entries.update(overrides or {})
        table = cls(entries)
        logger.info("Property table built", entries=len(table))
        return table
