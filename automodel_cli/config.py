"""Configuration management for automodel-cli."""

import os
from pathlib import Path
from pydantic_settings import BaseSettings
from pydantic import BaseModel, Field, field_validator
from typing import Any, Dict, List, Optional


def _find_env_file() -> Optional[str]:
    """Find .env file in multiple locations.

    Search order:
    1. Current working directory
    2. ~/.automodel-cli/.env
    3. Package directory (where this file is located)
    """
    # Current directory
    if os.path.exists(".env"):
        return ".env"

    # User config directory
    user_env = Path.home() / ".automodel-cli" / ".env"
    if user_env.exists():
        return str(user_env)

    # Package directory
    package_dir = Path(__file__).parent.parent
    package_env = package_dir / ".env"
    if package_env.exists():
        return str(package_env)

    return None


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database connection
    db_dialect: Optional[str] = Field(
        default=None,
        description="Database engine (sqlite, postgres, mysql, mssql, duckdb)"
    )
    db_host: str = Field(
        default="localhost",
        description="Database server host"
    )
    db_port: Optional[int] = Field(
        default=None,
        description="Database server port (engine default when unset)"
    )
    db_name: Optional[str] = Field(
        default=None,
        description="Database name"
    )
    db_user: Optional[str] = Field(
        default=None,
        description="Database user"
    )
    db_password: Optional[str] = Field(
        default=None,
        description="Database password"
    )
    db_path: Optional[str] = Field(
        default=None,
        description="Database file for sqlite and duckdb"
    )
    db_schema: Optional[str] = Field(
        default=None,
        description="Schema to introspect (postgres: public, duckdb: main)"
    )

    # Model generation defaults
    output_directory: str = Field(
        default="./models",
        description="Directory generated models are written to"
    )
    indentation: int = Field(
        default=1,
        description="Indentation units per nesting level"
    )
    spaces: bool = Field(
        default=False,
        description="Indent with spaces instead of tabs"
    )
    freeze_table_name: bool = Field(
        default=True,
        description="Emit freezeTableName in the model options"
    )
    global_name: str = Field(
        default="Sequelize",
        description="Identifier of the imported Sequelize module"
    )
    local_name: str = Field(
        default="sequelize",
        description="Identifier of the Sequelize instance used for fn/literal defaults"
    )
    file_extension: str = Field(
        default=".js",
        description="Extension of generated model files"
    )

    # Run history
    history_enabled: bool = Field(
        default=True,
        description="Record each generate run in the local run history"
    )
    history_db_path: Optional[str] = Field(
        default=None,
        description="Run history file (default: ~/.automodel-cli/history.db)"
    )
    history_retention_days: int = Field(
        default=30,
        description="Days a run stays in the history"
    )

    class Config:
        env_file = _find_env_file()
        env_file_encoding = "utf-8"


class GeneratorOptions(BaseModel):
    """Options controlling how descriptors are rendered and written."""

    directory: str = "./models"
    indentation: int = Field(default=1, ge=0)
    spaces: bool = False
    tables: Optional[List[str]] = None
    additional: Dict[str, Any] = Field(default_factory=dict)
    freeze_table_name: bool = True
    global_name: str = "Sequelize"
    local_name: str = "sequelize"
    extension: str = ".js"

    @field_validator("extension")
    @classmethod
    def _leading_dot(cls, value: str) -> str:
        if value and not value.startswith("."):
            return f".{value}"
        return value

    @property
    def indent_unit(self) -> str:
        """Whitespace for one nesting level."""
        return (" " if self.spaces else "\t") * self.indentation

    @classmethod
    def from_settings(cls, settings: Settings, **overrides: Any) -> "GeneratorOptions":
        """Build options from settings, letting non-None overrides win."""
        values: Dict[str, Any] = {
            "directory": settings.output_directory,
            "indentation": settings.indentation,
            "spaces": settings.spaces,
            "freeze_table_name": settings.freeze_table_name,
            "global_name": settings.global_name,
            "local_name": settings.local_name,
            "extension": settings.file_extension,
        }
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)


# Global settings instance
settings = Settings()
