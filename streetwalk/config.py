"""
Configuration settings for the street importer
"""

from dataclasses import dataclass, field
from typing import List, Optional
import os

from dotenv import load_dotenv
from loguru import logger


@dataclass
class APIConfig:
    """API endpoints and configuration"""
    # Overpass API (OSM)
    # Options: overpass-api.de (main), lz4.overpass-api.de, z.overpass-api.de
    overpass_url: str = "https://overpass-api.de/api/interpreter"
    overpass_timeout: int = 180  # [timeout:...] directive embedded in the query

    # Request settings
    request_timeout: float = 200.0  # Client-side deadline, independent of the directive
    max_retries: int = 4
    retry_delay: float = 2.0
    retry_max_delay: float = 60.0
    retry_jitter: float = 1.0
    min_request_interval: float = 1.0

    # User agent for API requests
    user_agent: str = "streetwalk-importer/1.0"


@dataclass
class StoreConfig:
    """Database configuration"""
    database_url: str = field(
        default_factory=lambda: os.environ.get("STREETWALK_DATABASE_URL", "sqlite:///streetwalk.db")
    )
    echo: bool = False


@dataclass
class NamingConfig:
    """Street naming and road type selection"""
    # Tag preference order: generic name, then localized variants used around Valencia
    name_tags: List[str] = field(default_factory=lambda: [
        "name",
        "name:ca",
        "name:val",
        "name:es",
        "official_name",
    ])

    # Roadway types to import (exclude service paths, tracks, footways, etc.)
    # Empty list means any highway type
    highway_types: List[str] = field(default_factory=lambda: [
        "residential",
        "primary",
        "secondary",
        "tertiary",
        "unclassified",
        "living_street",
        "trunk",
        "trunk_link",
        "motorway",
        "motorway_link",
    ])


@dataclass
class PipelineConfig:
    """Pipeline configuration"""
    default_boundary: str = "Torrent, Valencia"

    # Worker threads used to reconcile street groups (1 = sequential)
    max_workers: int = 1

    # Raw Overpass responses are cached here when set
    cache_dir: Optional[str] = field(
        default_factory=lambda: os.environ.get("STREETWALK_CACHE_DIR") or None
    )

    api: APIConfig = field(default_factory=APIConfig)
    store: StoreConfig = field(default_factory=StoreConfig)
    naming: NamingConfig = field(default_factory=NamingConfig)


# Global config instance
config = PipelineConfig()


def get_config() -> PipelineConfig:
    """Get global configuration"""
    return config


def load_env_files(*paths: str) -> List[str]:
    """
    Load KEY=value files into the environment, earliest path first.
    Variables already set are never overridden. Missing files are skipped.

    Returns:
        Paths that were found and loaded
    """
    loaded = []
    for env_path in paths:
        if os.path.isfile(env_path):
            load_dotenv(env_path, override=False)  # Don't override existing env vars
            logger.debug(f"Loaded .env file from {env_path}")
            loaded.append(env_path)
    return loaded


def validate_config(config: PipelineConfig) -> None:
    """
    Validate that all required configuration values are set.
    Raises ValueError if any required value is missing or invalid.
    """
    errors = []

    if config.max_workers is None or config.max_workers < 1:
        errors.append(f"max_workers must be at least 1, got {config.max_workers}")

    if config.api is None:
        errors.append("api configuration is required but not set")
    else:
        if not config.api.overpass_url:
            errors.append("api.overpass_url is required but not set")
        if config.api.overpass_timeout <= 0:
            errors.append(f"api.overpass_timeout must be positive, got {config.api.overpass_timeout}")
        if config.api.request_timeout <= 0:
            errors.append(f"api.request_timeout must be positive, got {config.api.request_timeout}")
        if config.api.max_retries < 1:
            errors.append(f"api.max_retries must be at least 1, got {config.api.max_retries}")
        if config.api.retry_delay < 0 or config.api.retry_jitter < 0:
            errors.append("api.retry_delay and api.retry_jitter must not be negative")

    if config.store is None or not config.store.database_url:
        errors.append("store.database_url is required but not set")

    if config.naming is None or not config.naming.name_tags:
        errors.append("naming.name_tags must list at least one tag")

    if errors:
        error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        raise ValueError(error_msg)
