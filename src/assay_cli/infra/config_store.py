"""Infrastructure: JSON config file at a per-user location.

Rules
-----
* The whole document is rewritten on every save — no partial updates.
* Owner-only permissions (``0600``) on non-Windows platforms; failures
  to set them are ignored.
* No locking: concurrent CLI invocations race and the last writer wins.
"""

from __future__ import annotations

import json
import logging
import os
import platform
from collections.abc import Mapping
from pathlib import Path

from assay_cli.core.models import Config
from assay_cli.exceptions import ConfigParseError, ConfigWriteError

log = logging.getLogger(__name__)

CONFIG_DIR_ENV_VAR = "ASSAY_CONFIG_DIR"
CONFIG_FILENAME = "config.json"
CONFIG_DIRNAME = "assay"


def get_config_dir(environ: Mapping[str, str] | None = None) -> Path:
    """Resolve the config directory.

    ``$ASSAY_CONFIG_DIR`` wins; otherwise ``%APPDATA%\\assay`` (falling
    back to ``%LOCALAPPDATA%``) on Windows and ``~/.assay`` elsewhere.
    """
    env = environ if environ is not None else os.environ
    override = env.get(CONFIG_DIR_ENV_VAR)
    if override:
        return Path(override)

    if platform.system().lower() == "windows":
        base = env.get("APPDATA") or env.get("LOCALAPPDATA") or ""
        return Path(base) / CONFIG_DIRNAME

    return Path.home() / f".{CONFIG_DIRNAME}"


class ConfigStore:
    """Load and save :class:`Config` as ``<config dir>/config.json``.

    Satisfies :class:`~assay_cli.core.protocols.ConfigRepository`
    structurally.
    """

    def __init__(
        self,
        config_dir: Path | None = None,
        *,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self._config_dir = config_dir if config_dir is not None else get_config_dir(environ)

    @property
    def config_dir(self) -> Path:
        return self._config_dir

    @property
    def config_path(self) -> Path:
        return self._config_dir / CONFIG_FILENAME

    def load(self) -> Config:
        """Return the stored config, or defaults when the file is absent.

        Raises
        ------
        ConfigParseError
            When the file cannot be read or is not a JSON object.
        """
        path = self.config_path
        if not path.exists():
            return Config()

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise ConfigParseError(
                f"Failed to load config: {exc}",
                hint=f"Fix or delete {path} and run 'assay auth login' again.",
            ) from exc

        if not isinstance(data, dict):
            raise ConfigParseError(
                f"Failed to load config: {path} does not contain a JSON object.",
                hint=f"Fix or delete {path} and run 'assay auth login' again.",
            )
        return Config.from_dict(data)

    def save(self, config: Config) -> None:
        """Write *config* as pretty-printed JSON.

        Raises
        ------
        ConfigWriteError
            When the directory cannot be created or the file written.
        """
        path = self.config_path
        try:
            self._config_dir.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(config.to_dict(), indent=2), encoding="utf-8")
        except OSError as exc:
            raise ConfigWriteError(
                f"Failed to save config: {exc}",
                hint=f"Check that {self._config_dir} is writable.",
            ) from exc

        if platform.system().lower() != "windows":
            try:
                path.chmod(0o600)
            except OSError as exc:
                log.debug("Could not restrict permissions on %s: %s", path, exc)
