from bootcamp_directory.utils.config.env import Settings, settings, get_settings

__all__ = ["Settings", "settings", "get_settings"]
