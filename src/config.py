# src/config.py
import os
import copy
import yaml
from pathlib import Path
from typing import Dict, Any, Optional
import logging
import sys
from dotenv import load_dotenv

load_dotenv()

ENV_PREFIX = "ARGONAUTS_"

DEFAULT_SETTINGS: Dict[str, Any] = {
    'dataset': {
        'source': 'static/data/argo_profiles.json',
    },
    'chat': {
        'webhook_url': 'http://localhost:5678/webhook/argonauts-chat',
        'timeout': 30,
        'greeting': 'Hello! How can I help you today?',
        'fallback_reply': "Sorry, I couldn't reach the assistant right now. Please try again.",
    },
    'map': {
        'default_center': [0.0, 0.0],
        'default_zoom': 2,
        'focus_zoom': 6,
        'marker_radius': 5,
        'marker_color': 'red',
        'highlight_color': 'blue',
    },
    'visualization': {
        'default_theme': 'plotly_white',
        'plot_height': 450,
    },
    'logging': {
        'level': 'INFO',
        'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        'file': 'logs/argonauts.log',
    },
}


class Config:
    """Configuration manager for the Argonauts float explorer"""

    def __init__(self, config_path: Optional[str] = None):
        self.config_path = Path(config_path) if config_path else self._find_config_file()
        self.settings = self._load_settings()
        self._logging_configured = False

    def _find_config_file(self) -> Optional[Path]:
        """Find the configuration file in various locations"""
        possible_paths = [
            Path('config/settings.yaml'),
            Path('../config/settings.yaml'),
            Path(__file__).resolve().parent.parent / 'config' / 'settings.yaml',
            Path('./settings.yaml')
        ]

        for path in possible_paths:
            if path.exists():
                return path

        return None

    def _load_settings(self) -> Dict[str, Any]:
        """Load settings from YAML file on top of the built-in defaults"""
        settings = copy.deepcopy(DEFAULT_SETTINGS)
        if self.config_path is None:
            return settings

        try:
            with open(self.config_path, 'r') as f:
                loaded = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logging.error(f"Error loading config {self.config_path}: {e}")
            return settings

        self._merge(settings, loaded)
        return settings

    @staticmethod
    def _merge(base: Dict[str, Any], override: Dict[str, Any]):
        for key, value in override.items():
            if isinstance(value, dict) and isinstance(base.get(key), dict):
                Config._merge(base[key], value)
            else:
                base[key] = value

    def load_config(self, config_path: str):
        """Reload settings from an explicit file"""
        self.config_path = Path(config_path)
        self.settings = self._load_settings()

    def setup_logging(self, force: bool = False):
        """Setup root logging from the `logging` section"""
        if self._logging_configured and not force:
            return

        log_level = str(self.get('logging.level', 'INFO')).upper()
        log_format = self.get('logging.format', '%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        log_file = self.get('logging.file')

        formatter = logging.Formatter(log_format)
        handlers = [logging.StreamHandler(sys.stdout)]

        if log_file:
            Path(log_file).parent.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.FileHandler(log_file, encoding='utf-8'))

        root_logger = logging.getLogger()
        root_logger.setLevel(getattr(logging, log_level, logging.INFO))
        for handler in handlers:
            handler.setFormatter(formatter)
            root_logger.addHandler(handler)

        self._logging_configured = True

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value using dot notation"""
        # Environment variable override
        env_key = f"{ENV_PREFIX}{key.replace('.', '_').upper()}"
        if env_key in os.environ:
            return os.environ[env_key]

        keys = key.split('.')
        value = self.settings

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def set(self, key: str, value: Any):
        """Set configuration value using dot notation"""
        keys = key.split('.')
        node = self.settings
        for k in keys[:-1]:
            node = node.setdefault(k, {})
        node[keys[-1]] = value

    def get_dataset_source(self) -> str:
        return str(self.get('dataset.source'))

    def get_chat_webhook_url(self) -> str:
        return str(self.get('chat.webhook_url'))

# Global configuration instance
config = Config()
