from emoji_mapper.core.config import Settings, get_settings, load_settings

__all__ = ["Settings", "get_settings", "load_settings"]
