"""Application settings loader from YAML configuration."""
import yaml
from pathlib import Path
from typing import List
from dataclasses import dataclass

DEFAULT_SETTINGS_PATH = Path(__file__).resolve().parent.parent / "resources" / "config.yaml"


@dataclass
class AppSettings:
    """Application-wide settings loaded from config.yaml."""
    
    # App info
    app_name: str
    app_version: str
    
    # Logging
    log_level: str
    log_max_file_size_mb: int
    log_backup_count: int
    
    # LLM
    llm_model_name: str
    llm_timeout_seconds: int
    
    # Extraction
    default_prompt: str
    accepted_media_types: List[str]
    suggested_categories: List[str]
    
    # Insights
    insights_max_transactions: int
    insights_language: str
    insights_count: int
    
    # Paths (relative to the data directory)
    logs_dir: str
    database_file: str
    config_file: str
    
    @classmethod
    def load(cls, config_path: Path = None) -> "AppSettings":
        """Load settings from YAML file."""
        if config_path is None:
            config_path = DEFAULT_SETTINGS_PATH
        
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")
        
        with open(config_path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
        
        return cls(
            app_name=config["app"]["name"],
            app_version=str(config["app"]["version"]),
            log_level=config["logging"]["level"],
            log_max_file_size_mb=config["logging"]["max_file_size_mb"],
            log_backup_count=config["logging"]["backup_count"],
            llm_model_name=config["llm"]["model_name"],
            llm_timeout_seconds=config["llm"]["timeout_seconds"],
            default_prompt=config["extraction"]["default_prompt"],
            accepted_media_types=list(config["extraction"]["accepted_media_types"]),
            suggested_categories=list(config["extraction"]["suggested_categories"]),
            insights_max_transactions=config["insights"]["max_transactions"],
            insights_language=config["insights"]["language"],
            insights_count=config["insights"]["insight_count"],
            logs_dir=config["paths"]["logs_dir"],
            database_file=config["paths"]["database_file"],
            config_file=config["paths"]["config_file"]
        )


# Global settings instance
_settings: AppSettings = None


def get_settings() -> AppSettings:
    """Get or create global settings instance."""
    global _settings
    if _settings is None:
        _settings = AppSettings.load()
    return _settings
