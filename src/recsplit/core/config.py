from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, Dict, Any
from pathlib import Path


class Settings(BaseSettings):
    # Split configuration
    RECSPLIT_CHUNK_SIZE: str = "4M"  # Read/write unit; the buffer is twice this
    RECSPLIT_OUTPUT_DIR: str = "."  # Where pieces are created
    RECSPLIT_FORMAT: str = "fasta"  # Record grammar used to find boundaries

    # Workspace paths
    RECSPLIT_WORKDIR: str = "var"  # Tool-managed artifacts (event logs)

    # Observability & UI
    RECSPLIT_EVENTS: bool = False  # Write NDJSON events under <workdir>/logs
    LOG_FORMAT: str = "auto"  # json|plain|auto
    LOG_LEVEL: str = "info"  # debug|info|warning|error
    PROGRESS: bool = True  # Show rich banners on a TTY
    QUIET_PRETTY: bool = False  # Suppress banners but keep piece lines
    NO_COLOR: bool = False  # Disable colored output

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @classmethod
    def load_config(cls, config_file: Optional[str] = None) -> "Settings":
        """Load settings with config file -> env -> CLI precedence."""
        config_data: Dict[str, Any] = {}

        # Find config file
        if config_file:
            config_path = Path(config_file)
        else:
            # Auto-discover .recsplit.{yaml,yml,toml}
            for ext in ["yaml", "yml", "toml"]:
                config_path = Path(f".recsplit.{ext}")
                if config_path.exists():
                    break
            else:
                config_path = None

        # Load config file if found
        if config_path and config_path.exists():
            if config_path.suffix in [".yaml", ".yml"]:
                import yaml  # type: ignore[import-untyped]

                with open(config_path) as f:
                    config_data = yaml.safe_load(f) or {}
            elif config_path.suffix == ".toml":
                import tomllib

                with open(config_path, "rb") as f:
                    config_data = tomllib.load(f)

        # Environment variables override the file; BaseSettings gives init
        # kwargs the highest priority, so drop keys the environment sets.
        overridden = cls()
        for key in list(config_data):
            if key in overridden.model_fields_set:
                config_data.pop(key)

        return cls(**config_data)


# Default settings - will be replaced by load_config() during CLI startup
SETTINGS = Settings()
