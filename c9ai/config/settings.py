"""Configuration for C9 AI

Two layers:
- packaged YAML defaults (defaults.yaml), optionally overridden by
  ~/.c9ai/settings.yaml
- the user config file ~/.c9ai/config.json holding the default model
"""

import os
import json
import yaml
import logging
from datetime import datetime
from pathlib import Path
from typing import Dict, Any, Optional

PACKAGE_CONFIG_DIR = Path(__file__).parent
VALID_MODELS = ["claude", "gemini", "local"]


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_settings(override_path: Optional[Path] = None) -> Dict[str, Any]:
    """Load packaged defaults merged with the user's settings.yaml (if any)"""
    with open(PACKAGE_CONFIG_DIR / "defaults.yaml", 'r') as f:
        settings = yaml.safe_load(f) or {}

    if override_path is not None and override_path.exists():
        try:
            with open(override_path, 'r') as f:
                override = yaml.safe_load(f) or {}
            settings = _deep_merge(settings, override)
            logging.info(f"Loaded settings override from {override_path}")
        except Exception as e:
            logging.error(f"Error loading settings override {override_path}: {e}")

    return settings


def default_home() -> Path:
    return Path(os.getenv("C9AI_HOME") or (Path.home() / ".c9ai"))


class Config:
    """User configuration and directory layout under the config home"""

    def __init__(self, home: Optional[Path] = None):
        self.config_dir = Path(home) if home is not None else default_home()
        self.config_file = self.config_dir / "config.json"
        self.scripts_dir = self.config_dir / "scripts"
        self.models_dir = self.config_dir / "models"
        self.logs_dir = self.config_dir / "logs"
        self.tools_file = self.config_dir / "tools.json"
        self.app_mappings_file = self.config_dir / "app_mappings.json"
        self.knowledge_file = self.config_dir / "knowledge_base.json"

        for directory in (self.config_dir, self.scripts_dir, self.models_dir, self.logs_dir):
            directory.mkdir(parents=True, exist_ok=True)

        self.settings = load_settings(self.config_dir / "settings.yaml")
        self._config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """Load config.json, falling back to defaults"""
        default_config = {
            "defaultModel": self.settings.get("defaults", {}).get("model", "claude"),
            "lastUpdated": datetime.now().isoformat(),
        }

        if not self.config_file.exists():
            return default_config

        try:
            with open(self.config_file, 'r') as f:
                saved_config = json.load(f)
            return {**default_config, **saved_config}
        except Exception as e:
            logging.error(f"Error loading config: {e}")
            return default_config

    def _save_config(self):
        try:
            with open(self.config_file, 'w') as f:
                json.dump(self._config, f, indent=2)
        except Exception as e:
            logging.error(f"Error saving config: {e}")

    @property
    def current_model(self) -> str:
        return self._config.get("defaultModel", "claude")

    def set_model(self, model: str):
        """Persist a new default model"""
        if model not in VALID_MODELS:
            raise ValueError(f"Invalid model '{model}'. Choose from: {', '.join(VALID_MODELS)}")
        self._config["defaultModel"] = model
        self._config["lastUpdated"] = datetime.now().isoformat()
        self._save_config()
        logging.info(f"Default model set to {model}")

    def get(self, key: str, default: Any = None) -> Any:
        """Get a runtime setting using dot notation (e.g. 'inference.timeout')"""
        value = self.settings
        for k in key.split('.'):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value

    def model_catalog(self) -> Dict[str, Dict[str, Any]]:
        return self.settings.get("local_models", {})


# Global instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get global Config instance"""
    global _config
    if _config is None:
        _config = Config()
    return _config
