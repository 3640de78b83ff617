"""
Модуль конфигурации реестра сертификатов.
"""

from .settings import get_settings, load_settings_from_file, setup_logging, Settings

__version__ = "1.0.0"

__all__ = ['get_settings', 'load_settings_from_file', 'setup_logging', 'Settings']
