import json
from pathlib import Path
from typing import Dict, Any


class Settings:

    def __init__(self, config_path: str = None):
        self.output_format = "jpeg"
        self.output_quality = 90
        self.thumbnail_quality = 80

        self.min_width = 800
        self.min_height = 600
        self.max_file_size = 50 * 1024 * 1024
        self.min_aspect_ratio = 0.5
        self.max_aspect_ratio = 4.0

        self.cylindrical_brightness = 1.1
        self.cylindrical_saturation = 1.2
        self.cylindrical_background = [50, 50, 50]

        self.default_layout = "horizontal"
        self.default_overlap = 0.1
        self.default_quality = 90

        self.image_backend = "auto"
        self.show_progress = True

        if config_path and Path(config_path).exists():
            self.load_from_file(config_path)

    def load_from_file(self, config_path: str):
        with open(config_path, 'r') as f:
            config_data = json.load(f)

        for key, value in config_data.items():
            if hasattr(self, key):
                setattr(self, key, value)

    def save_to_file(self, config_path: str):
        with open(config_path, 'w') as f:
            json.dump(self.get_config_dict(), f, indent=2)

    def get_config_dict(self) -> Dict[str, Any]:
        return {key: value for key, value in self.__dict__.items()
                if not key.startswith('_')}
