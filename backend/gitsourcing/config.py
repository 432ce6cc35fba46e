"""Application settings.

Loaded from an optional YAML file, then overridden by environment variables
(a ``.env`` next to the backend directory is read first). Every setting has a
default suitable for local development.
"""

import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

DEFAULT_CONFIG_FILE = "gitsourcing.yml"

# setting name -> environment variable
_ENV_VARS = {
    "storage_root": "GITSOURCING_STORAGE_ROOT",
    "git_binary": "GITSOURCING_GIT_BINARY",
    "git_author_name": "GITSOURCING_GIT_AUTHOR_NAME",
    "git_author_email": "GITSOURCING_GIT_AUTHOR_EMAIL",
    "log_level": "GITSOURCING_LOG_LEVEL",
    "cors_origins": "GITSOURCING_CORS_ORIGINS",
}


class Settings(BaseModel):
    storage_root: Path = Path("storage")
    git_binary: str = "git"
    git_author_name: str = "gitsourcing"
    git_author_email: str = "gitsourcing@localhost"
    log_level: str = "INFO"
    cors_origins: list[str] = Field(default_factory=lambda: ["http://localhost:5173"])

    @classmethod
    def load(
        cls,
        config_file: Path | str | None = None,
        environ: dict[str, str] | None = None,
    ) -> "Settings":
        """Build settings from the YAML file (if any) and the environment.

        ``config_file`` defaults to $GITSOURCING_CONFIG, then ./gitsourcing.yml
        when it exists. An explicitly named file that is missing is an error.
        """
        env = os.environ if environ is None else environ
        values: dict[str, Any] = {}

        path = config_file or env.get("GITSOURCING_CONFIG")
        if path is not None:
            values.update(_read_yaml(Path(path)))
        elif Path(DEFAULT_CONFIG_FILE).is_file():
            values.update(_read_yaml(Path(DEFAULT_CONFIG_FILE)))

        for field_name, var in _ENV_VARS.items():
            raw = env.get(var)
            if raw is None:
                continue
            if field_name == "cors_origins":
                values[field_name] = [o.strip() for o in raw.split(",") if o.strip()]
            else:
                values[field_name] = raw

        return cls.model_validate(values)


def load_env_file() -> None:
    """Load backend/.env into the process environment (existing vars win)."""
    load_dotenv(Path(__file__).resolve().parent.parent / ".env")


def _read_yaml(path: Path) -> dict[str, Any]:
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping")
    return data
