import logging
import os
from dataclasses import dataclass

import keyring
import yaml

from settings_schema import SettingsSchema, validate_settings

APP_VERSION = "1.0.0"


class YamlConfig:
    """Load and save settings to a YAML file with optional encryption."""

    SENSITIVE_KEYS = {
        "google_client_id",
    }

    def __init__(self, path: str = "settings.yaml") -> None:
        self.path = path
        self.encrypt = os.environ.get("ENCRYPT_SETTINGS") == "1"
        self.service = "replog"

    def _reveal_secrets(self, data: dict) -> dict:
        for key in self.SENSITIVE_KEYS & data.keys():
            secret = keyring.get_password(self.service, key)
            if secret is None:
                del data[key]
            else:
                data[key] = secret
        return data

    def _stash_secrets(self, data: dict) -> dict:
        out = dict(data)
        for key in self.SENSITIVE_KEYS:
            if isinstance(out.get(key), str):
                keyring.set_password(self.service, key, out[key])
                out[key] = True
        return out

    def load(self) -> dict:
        if not os.path.exists(self.path):
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        return self._reveal_secrets(data) if self.encrypt else data

    def save(self, data: dict) -> None:
        out = self._stash_secrets(data) if self.encrypt else dict(data)
        with open(self.path, "w", encoding="utf-8") as f:
            yaml.safe_dump(out, f)


@dataclass
class StoreConfig:
    """Resolved settings used to build a store session."""

    db_path: str = "replog.db"
    legacy_path: str = "replog_legacy.db"
    documents_dir: str = "~/Documents"
    native_platform: bool = False
    export_prefix: str = "replog-backup"
    export_extension: str = "json"
    export_dir: str = "."
    language: str = "en"
    log_level: str = "INFO"
    google_client_id: str | None = None

    @classmethod
    def load(cls, path: str = "settings.yaml") -> "StoreConfig":
        """Merge the YAML file with defaults and environment overrides."""
        data = YamlConfig(path).load()
        validate_settings(data)
        settings = SettingsSchema(**data)
        cfg = cls(
            db_path=settings.db_path,
            legacy_path=settings.legacy_path,
            documents_dir=settings.documents_dir,
            native_platform=settings.native_platform,
            export_prefix=settings.export_prefix,
            export_extension=settings.export_extension,
            export_dir=settings.export_dir,
            language=settings.language,
            log_level=settings.log_level,
            google_client_id=(
                settings.google_client_id
                if isinstance(settings.google_client_id, str)
                else None
            ),
        )
        if os.environ.get("REPLOG_DB"):
            cfg.db_path = os.environ["REPLOG_DB"]
        return cfg

    @property
    def documents_path(self) -> str:
        return os.path.expanduser(self.documents_dir)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
