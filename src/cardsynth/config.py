"""Engine configuration via environment variables and .env file."""

from pathlib import Path
from typing import Annotated

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode
from pydantic_settings.sources import DotEnvSettingsSource, PydanticBaseSettingsSource

# Path to .env file (patch in tests to use tmp_path / ".env")
_ENV_FILE: Path = Path(".env")

DEFAULT_PALETTE = [
    "#4fa3ff",
    "#6ccf7f",
    "#f5a623",
    "#f76d6d",
    "#b084ff",
    "#32c5d2",
    "#f58bd8",
    "#ffd166",
]


class Settings(BaseSettings):
    model_config = {
        "env_prefix": "CARDSYNTH_",
        "env_file_encoding": "utf-8",
    }

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Load .env from _ENV_FILE (patchable in tests)
        return (
            init_settings,
            env_settings,
            DotEnvSettingsSource(
                settings_cls,
                env_file=_ENV_FILE,
                env_file_encoding="utf-8",
            ),
            file_secret_settings,
        )

    # Logging
    log_level: str = "info"

    # Sparkline display cap after downsampling
    sparkline_max_points: int = 48

    # Progress ring packing (px)
    ring_size: int = 200
    ring_gap: int = 6
    ring_padding: int = 8

    # Native graph series colors
    # Env: CARDSYNTH_PALETTE="#4fa3ff,#6ccf7f"
    palette: Annotated[list[str], NoDecode] = DEFAULT_PALETTE

    @field_validator("palette", mode="before")
    @classmethod
    def parse_palette(cls, v: object) -> list[str]:
        """Parse comma-separated string or list; empty input keeps the default."""
        if isinstance(v, str):
            colors = [s.strip() for s in v.split(",") if s.strip()]
        elif isinstance(v, list):
            colors = [s for s in v if s]
        else:
            colors = []
        return colors or list(DEFAULT_PALETTE)

    @field_validator("sparkline_max_points")
    @classmethod
    def check_max_points(cls, v: int) -> int:
        if v < 4:
            raise ValueError("sparkline_max_points must be at least 4")
        return v


def load_config() -> Settings:
    """Load configuration from .env and environment (env overrides .env)."""
    return Settings()


settings = Settings()
