"""Runtime configuration assembled from the environment and a local JSON file."""
import json
import os
from dataclasses import dataclass, asdict, field
from pathlib import Path
from typing import Optional

from .settings import get_settings
from uangku.utils.exceptions import ConfigError
from uangku.utils.logger import default_home

# Never persisted to the JSON file.
SECRET_FIELDS = ("gemini_api_key",)
TEXT_FIELDS = ("model_name", "log_level", "session_id", "data_dir")


@dataclass
class Config:
    """System configuration."""
    gemini_api_key: str = ""
    model_name: str = field(default_factory=lambda: get_settings().llm_model_name)
    timeout_seconds: int = field(default_factory=lambda: get_settings().llm_timeout_seconds)
    log_level: str = field(default_factory=lambda: get_settings().log_level)
    session_id: str = "default"
    data_dir: Optional[str] = None

    @property
    def has_credentials(self) -> bool:
        return bool(self.gemini_api_key and self.gemini_api_key.strip())


class ConfigManager:
    """Builds the runtime Config from config.json overlaid with environment variables."""
    
    def __init__(self, config_dir: Optional[Path] = None):
        self.config_dir = Path(config_dir) if config_dir else default_home()
        self.config_file = self.config_dir / get_settings().config_file
        self.config_dir.mkdir(parents=True, exist_ok=True)
    
    def load_config(self) -> Config:
        """Load configuration from file, then apply environment overrides."""
        values = {}
        if self.config_file.exists():
            try:
                with open(self.config_file, "r", encoding="utf-8") as f:
                    values = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                raise ConfigError(f"Failed to load configuration: {e}") from e
            if not isinstance(values, dict):
                raise ConfigError("Configuration file must contain a JSON object")
        
        for secret in SECRET_FIELDS:
            values.pop(secret, None)
        
        env_overrides = {
            "gemini_api_key": os.getenv("GEMINI_API_KEY"),
            "model_name": os.getenv("UANGKU_MODEL"),
            "session_id": os.getenv("UANGKU_SESSION"),
            "log_level": os.getenv("UANGKU_LOG_LEVEL"),
        }
        values.update({key: value for key, value in env_overrides.items() if value})
        if not values.get("data_dir"):
            values["data_dir"] = str(self.config_dir)
        
        known = Config.__dataclass_fields__.keys()
        values = {key: value for key, value in values.items() if key in known}
        return Config(**self._coerce_values(values))
    
    @staticmethod
    def _coerce_values(values: dict) -> dict:
        """Check field types from the file, turning numeric strings into ints."""
        if "timeout_seconds" in values:
            timeout = values["timeout_seconds"]
            if isinstance(timeout, bool):
                raise ConfigError(f"Invalid timeout_seconds: {timeout!r}")
            try:
                values["timeout_seconds"] = int(timeout)
            except (TypeError, ValueError) as e:
                raise ConfigError(f"Invalid timeout_seconds: {timeout!r}") from e
        
        for key in TEXT_FIELDS:
            if values.get(key) is not None and not isinstance(values[key], str):
                raise ConfigError(f"Invalid {key}: expected text, got {values[key]!r}")
        return values
    
    def save_config(self, config: Config) -> None:
        """Save non-secret configuration values."""
        data = asdict(config)
        for secret in SECRET_FIELDS:
            data.pop(secret, None)
        try:
            with open(self.config_file, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
        except OSError as e:
            raise ConfigError(f"Failed to save configuration: {e}") from e
    
    def validate_config(self, config: Config, require_credentials: bool = True) -> tuple[bool, str]:
        """Validate configuration values.

        Commands that never reach the model pass require_credentials=False.
        """
        if require_credentials and not config.has_credentials:
            return False, "Gemini API key is required (set GEMINI_API_KEY)"
        
        if not config.model_name:
            return False, "Model name is required"
        
        if config.timeout_seconds < 1:
            return False, "Timeout must be at least 1 second"
        
        if not config.session_id:
            return False, "Session ID is required"
        
        return True, "Configuration is valid"
