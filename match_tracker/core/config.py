"""
Zentrale Konfiguration für den Club Match Tracker
Basiert auf Pydantic Settings mit Environment Variable Support
"""

from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application Settings mit Environment Variable Support"""

    # Source site (basquetcatala.cat)
    club_id: int = 150  # AE Badalonès
    base_url: str = "https://www.basquetcatala.cat"
    stats_api_base: str = (
        "https://msstats.optimalwayconsulting.com/v1/fcbq/getJsonWithMatchStats/"
    )
    current_season: str = "2025"  # Temporada 2025-2026
    # Case-folded substrings that attribute a match card to the club
    attribution_keywords: list[str] = ["badalon", "corbacho"]
    # Generic keyword used for display profiles of unknown teams
    club_keyword: str = "badalones"
    team_icon: str = "🏀"

    # Crawling
    request_timeout_seconds: float = 10.0
    user_agent: str = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"
    max_result_pages: int = 10
    ancestor_walk_depth: int = 7
    min_team_name_length: int = 3
    # Politeness: minimum seconds since the previous request
    team_delay_seconds: float = 2.0
    competition_delay_seconds: float = 1.5
    page_delay_seconds: float = 1.0

    # Storage
    state_file_path: str = "./data/db.json"
    history_limit: int = 100

    # Scheduling
    scheduler_timezone: str = "Europe/Madrid"
    enable_scheduler: bool = True
    bootstrap_on_empty: bool = True

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 3001
    cors_origins: list[str] = ["*"]

    # Monitoring
    log_level: str = "INFO"
    log_format: str = "console"  # console | json
    log_file_path: Optional[str] = "./logs"
    enable_metrics: bool = True

    # Application
    run_mode: str = "full_service"  # Modes: full_service, api_only, collection_once
    environment: str = "development"  # Environment: development, staging, production

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


# Global Settings Instance
settings = Settings()
