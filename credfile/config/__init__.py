"""
Config Module - Black Box Interface

Purpose: Resolve where the users file lives and how it is served
Interface: ConfigProvider.get_store_config()
Hidden: Config sources, environment parsing, settings file format
"""

from .provider import ConfigProvider, EnvConfigProvider, StoreConfig, YamlConfigProvider

__all__ = ["ConfigProvider", "EnvConfigProvider", "YamlConfigProvider", "StoreConfig"]
