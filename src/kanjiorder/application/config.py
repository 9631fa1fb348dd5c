from pathlib import Path
from typing import Annotated, Any

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    NoDecode,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from kanjiorder.application.ordering import validate_priority
from kanjiorder.domain.constants import CONFIG_FILES, DEFAULT_HOST, DEFAULT_PORT, DEFAULT_PRIORITY


class AppConfig(BaseSettings):
    """
    Configuration model for kanjiorder.
    Supports loading from:
    1. Environment variables (KANJIORDER_*)
    2. Config file (~/.config/kanjiorder/config.toml)
    3. Manual overrides (CLI)
    """

    model_config = SettingsConfigDict(
        env_prefix="KANJIORDER_",
        extra="ignore",
    )

    # Inputs
    corpus_path: Path | None = None
    terms_path: Path | None = None

    # Ordering
    priority: Annotated[list[str], NoDecode] = Field(default_factory=lambda: list(DEFAULT_PRIORITY))
    popular_only: bool = True

    # Server
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT

    verbose: int = 0

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        from pydantic_settings import TomlConfigSettingsSource

        toml_file = None
        for name in CONFIG_FILES:
            f = Path.home() / name
            if f.exists():
                toml_file = f
                break

        if toml_file:
            return (
                init_settings,
                env_settings,
                TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
            )
        return (
            init_settings,
            env_settings,
        )

    @field_validator("corpus_path", "terms_path", mode="before")
    @classmethod
    def resolve_path(cls, v: Any) -> Path | None:
        if v is None or v == "":
            return None
        return Path(v).expanduser().resolve()

    @field_validator("priority", mode="before")
    @classmethod
    def split_priority(cls, v: Any) -> Any:
        # KANJIORDER_PRIORITY="grade_level,frequency"
        if isinstance(v, str):
            return [p.strip() for p in v.split(",") if p.strip()]
        return v

    @field_validator("priority")
    @classmethod
    def check_priority(cls, v: list[str]) -> list[str]:
        return list(validate_priority(v))


def resolve_config(cli_overrides: dict[str, Any] | None = None) -> AppConfig:
    """
    Multi-layered configuration resolution.
    1. Defaults in AppConfig
    2. ~/.config/kanjiorder/config.toml (if exists)
    3. Environment variables (KANJIORDER_*)
    4. cli_overrides (passed from Typer), None values ignored
    """
    overrides = {k: v for k, v in (cli_overrides or {}).items() if v is not None}
    return AppConfig(**overrides)
