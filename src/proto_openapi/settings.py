"""OpenAPI settings file.

Optional YAML file whose values take precedence over the ones declared in
the .proto file options:

    info:
      title: Users API
      version: 1.2.0
    servers:
      - url: https://api.example.com
        description: production
"""

from pathlib import Path

import yaml
from pydantic import BaseModel, ValidationError, field_validator

from proto_openapi.errors import SettingsError

SETTINGS_ENV_VAR = "PROTO_OPENAPI_SETTINGS"


class SettingsInfo(BaseModel):
    title: str = ""
    version: str = ""

    @field_validator("version", mode="before")
    @classmethod
    def version_as_text(cls, v):
        # YAML reads 1.2 as a float
        return "" if v is None else str(v)


class SettingsServer(BaseModel):
    url: str
    description: str = ""


class Settings(BaseModel):
    info: SettingsInfo = SettingsInfo()
    servers: list[SettingsServer] = []


def load_settings(file_path: Path) -> Settings:
    try:
        data = yaml.safe_load(file_path.read_text(encoding="utf-8")) or {}
        return Settings.model_validate(data)
    except (yaml.YAMLError, ValidationError) as e:
        raise SettingsError(f"{file_path}: {e}", subject=str(file_path)) from e
