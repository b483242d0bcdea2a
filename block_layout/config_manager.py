"""
Configuration management for the layout engine.

This module handles saving and loading engine thresholds
(LayoutEngineConfig) as JSON strings.
"""

import json
from datetime import datetime
from typing import Tuple

from models import LayoutEngineConfig


class LayoutConfigManager:
    """Manages saving and loading of layout engine configurations"""

    @staticmethod
    def save_config(config: LayoutEngineConfig, name: str) -> str:
        """Save engine configuration to JSON string"""
        config_data = {
            "name": name,
            "config": config.to_dict(),
            "saved_at": datetime.now().isoformat(),
        }
        return json.dumps(config_data, indent=2)

    @staticmethod
    def load_config(config_json: str) -> Tuple[LayoutEngineConfig, str]:
        """Load engine configuration from JSON string"""
        config_data = json.loads(config_json)

        config = LayoutEngineConfig.from_dict(config_data.get("config", {}))
        name = config_data.get("name", "")

        return config, name
