from pathlib import Path

from pydantic import NonNegativeInt
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Command line defaults, overridable through ST_NAMECHECK_* variables or .env."""
    model_config = SettingsConfigDict(env_prefix="ST_NAMECHECK_", env_file=".env", extra="ignore")

    locale: str = "ru_RU"
    databases: list[Path] = [Path("streets.txt")]
    spell_distance: NonNegativeInt = 1
    dump_dir: Path = Path(".")
    dump_format: str = "text"


settings = Settings()
