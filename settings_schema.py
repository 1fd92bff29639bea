from typing import Literal, Optional

from pydantic import BaseModel, ValidationError


class SettingsSchema(BaseModel):
    db_path: str = "replog.db"
    legacy_path: str = "replog_legacy.db"
    documents_dir: str = "~/Documents"
    native_platform: bool = False
    export_prefix: str = "replog-backup"
    export_extension: str = "json"
    export_dir: str = "."
    language: Literal["en", "pt-BR"] = "en"
    log_level: str = "INFO"
    google_client_id: Optional[str | bool] = None


def validate_settings(data: dict) -> None:
    try:
        SettingsSchema(**data)
    except ValidationError as e:
        raise ValueError(str(e))
