"""Settings resolution with named profile support."""

import os
from collections.abc import Mapping
from functools import lru_cache
from pathlib import Path

import tomlkit
import typer
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

CONFIG_PATH = Path.home() / ".config" / "glp" / "config.toml"


class GlpSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="GLP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    default_profile: str | None = None
    gitlab_url: str = "https://gitlab.com/api/v4"
    project_id: str | None = None  # used when update-issue gets no --project
    log_level: str = "WARNING"

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # profile values arrive as init kwargs; GLP_* env vars and .env win over them
        return env_settings, dotenv_settings, init_settings, file_secret_settings


@lru_cache(maxsize=1)
def _load_toml() -> tomlkit.TOMLDocument:
    """Load ~/.config/glp/config.toml, returning empty document if missing."""
    if not CONFIG_PATH.exists():
        return tomlkit.document()
    with CONFIG_PATH.open() as fh:
        return tomlkit.load(fh)


def _list_profiles(config: Mapping) -> list[str]:
    # tomlkit Table implements MutableMapping but not dict, so check Mapping
    return [k for k, v in config.items() if isinstance(v, Mapping)]


def get_settings(profile: str | None = None) -> GlpSettings:
    """Resolve the active profile and return a fully populated GlpSettings.

    Precedence for the profile name (highest to lowest):
    1. profile argument (--profile CLI flag)
    2. GLP_DEFAULT_PROFILE env var
    3. default_profile key in ~/.config/glp/config.toml
    4. First profile defined in ~/.config/glp/config.toml

    Values from the profile block are defaults; GLP_* env vars and .env win over them.
    default_profile on the result is the resolved default, whichever profile is active.
    """
    toml_config = _load_toml()

    default = (
        os.environ.get("GLP_DEFAULT_PROFILE")
        or toml_config.get("default_profile")
        or ((_profiles := _list_profiles(toml_config)) and _profiles[0] or None)
    )
    active = profile or default

    profile_defaults: dict = {}
    if active:
        if active in toml_config and isinstance(toml_config[active], Mapping):
            profile_defaults = dict(toml_config[active])
        else:
            profiles = _list_profiles(toml_config)
            typer.echo(f"Profile '{active}' not found in {CONFIG_PATH}. Available: {profiles or '(none)'}")
            raise typer.Exit(1)

    settings = GlpSettings(**profile_defaults)
    # report the default profile as resolved, not only the env var
    return settings.model_copy(update={"default_profile": str(default) if default else None})
