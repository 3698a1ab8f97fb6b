from .settings import Config, get_config, load_settings

__all__ = ["Config", "get_config", "load_settings"]
