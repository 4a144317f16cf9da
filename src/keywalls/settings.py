"""Environment-based configuration via pydantic-settings."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Generation settings, configurable via KEYWALLS_* env vars."""

    model_config = {"env_prefix": "KEYWALLS_"}

    log_level: str = "INFO"
    max_triangles: int = 500_000  # warn above this many triangles in a base
    stl_ascii: bool = False  # write human-readable STL from scripts
