"""Configuration management for the swagger-odm compiler."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import List, Optional, Union

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


# =============================================================================
# Compiler Configuration
# =============================================================================


class CompilerConfig(BaseModel):
    """Schema compiler configuration."""

    # Extension block key for Swagger >= 2 documents
    extension_key: str = "x-swagger-mongoose"
    # Extension block key for Swagger 1.x documents (or no version at all)
    legacy_extension_key: str = "_mongoose"
    reserved_fields: List[str] = Field(default_factory=lambda: ["_id", "__v"])
    # Guard indirect cycles (A -> B -> A) with a reference descriptor
    detect_cycles: bool = False
    # Validator module paths are resolved against this directory (cwd if unset)
    validators_base_dir: Optional[str] = None


# =============================================================================
# Backend Configuration
# =============================================================================


class MemoryBackendConfig(BaseModel):
    """In-memory schema backend configuration."""

    replace_models: bool = True


class MongoBackendConfig(BaseModel):
    """MongoDB schema backend configuration."""

    uri: str = "mongodb://localhost:27017"
    database: str = "swagger_odm"
    server_selection_timeout_ms: int = 5000
    create_indexes: bool = True
    apply_validation: bool = False


class BackendConfig(BaseModel):
    """Schema backend configuration."""

    backend: str = "memory"  # "memory" | "mongo"
    memory: MemoryBackendConfig = Field(default_factory=MemoryBackendConfig)
    mongo: MongoBackendConfig = Field(default_factory=MongoBackendConfig)


# =============================================================================
# Main Configuration
# =============================================================================


class SwaggerODMConfig(BaseSettings):
    """Main swagger-odm configuration."""

    log_level: LogLevel = LogLevel.INFO

    compiler: CompilerConfig = Field(default_factory=CompilerConfig)
    backend: BackendConfig = Field(default_factory=BackendConfig)

    model_config = {
        "env_prefix": "SWAGGER_ODM_",
        "env_file": ".env",
        "env_nested_delimiter": "__",
        "extra": "ignore",
    }

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "SwaggerODMConfig":
        """Load configuration from a YAML file."""
        import yaml

        with open(path, "r") as f:
            data = yaml.safe_load(f)
        return cls(**data) if data else cls()

    def to_yaml(self, path: Union[str, Path]) -> None:
        """Save configuration to a YAML file."""
        import yaml

        with open(path, "w") as f:
            yaml.dump(
                self.model_dump(mode="json"),
                f,
                default_flow_style=False,
                sort_keys=False,
            )


def load_config(path: Optional[Union[str, Path]] = None) -> SwaggerODMConfig:
    """
    Load configuration from file or create default.

    Args:
        path: Optional path to YAML config file

    Returns:
        SwaggerODMConfig instance
    """
    if path:
        return SwaggerODMConfig.from_yaml(path)
    return SwaggerODMConfig()
