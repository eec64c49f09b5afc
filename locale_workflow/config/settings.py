"""
Centralized Configuration System for locale-workflow

Type-safe configuration built on Pydantic Settings. Every component reads
its options from here instead of scattered environment lookups.

Features:
- Environment variable binding with defaults
- Hierarchical configuration structure
- Test-friendly configuration isolation (see reload_settings)
"""

import json
import os
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Application environment types"""
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TEST = "test"


class WorkflowSettings(BaseSettings):
    """Locale workflow configuration"""

    model_config = SettingsConfigDict(
        env_prefix="WORKFLOW_",
        env_file=".env" if not os.getenv("DOCKER_CONTAINER") else None,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    locales: Optional[List[Dict[str, Any]]] = Field(
        default=None,
        description="Nested locale tree (JSON). Empty means a single 'default' locale"
    )
    default_locale: str = Field(
        default="default",
        description="Locale used when a request carries no locale hint"
    )
    prefixes: Union[bool, Dict[str, Optional[str]]] = Field(
        default=False,
        description="true to derive /<locale> prefixes, or an explicit locale -> prefix mapping"
    )
    hostnames: Dict[str, str] = Field(
        default_factory=dict,
        description="Locale -> hostname mapping for cross-domain locales"
    )
    include_types: Optional[List[str]] = Field(
        default=None,
        description="If set, only these doc types participate in workflow"
    )
    exclude_types: List[str] = Field(
        default_factory=list,
        description="Doc types excluded from workflow in addition to the base exclusions"
    )
    exclude_properties: List[str] = Field(
        default_factory=list,
        description="Doc properties never propagated across locales, in addition to the base list"
    )
    page_types: List[str] = Field(
        default_factory=list,
        description="Doc types treated as pages even before they have a slug"
    )

    @field_validator("locales", mode="before")
    @classmethod
    def parse_locales(cls, v):
        if isinstance(v, str):
            v = v.strip()
            if not v:
                return None
            return json.loads(v)
        return v


class DatabaseSettings(BaseSettings):
    """Database configuration settings"""

    model_config = SettingsConfigDict(
        env_file=".env" if not os.getenv("DOCKER_CONTAINER") else None,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    postgres_host: str = Field(
        default="localhost",
        description="PostgreSQL host"
    )
    postgres_port: int = Field(
        default=5432,
        description="PostgreSQL port"
    )
    postgres_user: str = Field(
        default="workflow",
        description="PostgreSQL username"
    )
    postgres_password: str = Field(
        default="workflow",
        description="PostgreSQL password"
    )
    postgres_db: str = Field(
        default="workflow",
        description="PostgreSQL database name"
    )
    ledger_schema: str = Field(
        default="workflow",
        description="Schema holding the permanent commit ledger"
    )
    ledger_pool_min: int = Field(
        default=1,
        description="Minimum ledger connection pool size"
    )
    ledger_pool_max: int = Field(
        default=5,
        description="Maximum ledger connection pool size"
    )

    @property
    def postgres_url(self) -> str:
        """Construct PostgreSQL connection URL"""
        return f"postgresql://{self.postgres_user}:{self.postgres_password}@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"


class CacheSettings(BaseSettings):
    """Redis cache settings (cross-domain session tokens)"""

    model_config = SettingsConfigDict(
        env_file=".env" if not os.getenv("DOCKER_CONTAINER") else None,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    redis_host: str = Field(
        default="localhost",
        description="Redis host"
    )
    redis_port: int = Field(
        default=6379,
        description="Redis port"
    )
    redis_password: Optional[str] = Field(
        default=None,
        description="Redis password"
    )
    redis_db: int = Field(
        default=0,
        description="Redis database index"
    )
    session_bridge_namespace: str = Field(
        default="workflow-cross-domain-session-cache",
        description="Key namespace for cross-domain session tokens"
    )
    session_bridge_ttl: int = Field(
        default=60,
        description="Cross-domain session token TTL in seconds"
    )

    @property
    def redis_url(self) -> str:
        """Construct Redis URL"""
        if not self.redis_password:
            return f"redis://{self.redis_host}:{self.redis_port}/{self.redis_db}"
        return f"redis://:{self.redis_password}@{self.redis_host}:{self.redis_port}/{self.redis_db}"


class ApplicationSettings(BaseSettings):
    """Main application settings - aggregates all other settings"""

    model_config = SettingsConfigDict(
        env_file=".env" if not os.getenv("DOCKER_CONTAINER") else None,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment"
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        description="Root log level"
    )

    # Nested settings
    workflow: WorkflowSettings = WorkflowSettings()
    database: DatabaseSettings = DatabaseSettings()
    cache: CacheSettings = CacheSettings()

    @property
    def is_production(self) -> bool:
        """Check if running in production mode"""
        return self.environment == Environment.PRODUCTION

    @property
    def is_test(self) -> bool:
        """Check if running in test mode"""
        return self.environment == Environment.TEST


settings = ApplicationSettings()


def get_settings() -> ApplicationSettings:
    """
    Get the global settings instance

    Usable with FastAPI's Depends() for dependency injection.

    Returns:
        ApplicationSettings: The global settings instance
    """
    return settings


def reload_settings() -> ApplicationSettings:
    """
    Reload settings from environment (useful for testing)

    Nested sections are rebuilt too, since their defaults are bound when
    the class is defined.

    Returns:
        ApplicationSettings: New settings instance with reloaded values
    """
    global settings
    settings = ApplicationSettings(
        workflow=WorkflowSettings(),
        database=DatabaseSettings(),
        cache=CacheSettings(),
    )
    return settings
