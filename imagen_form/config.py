"""
Configuration management for Imagen Form.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
import yaml


GLOBAL_CONFIG_DIR = Path.home() / ".imagen_form"
GLOBAL_CONFIG_FILE = GLOBAL_CONFIG_DIR / "config.yaml"

DEFAULT_PROMPT = "A young man wearing a white tracksuit, standing outdoors in a lush forest."


@dataclass
class APIKeys:
    """API key configuration."""

    google: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "APIKeys":
        return cls(google=data.get("google", ""))

    @classmethod
    def from_env(cls) -> "APIKeys":
        """Load API keys from environment variables.

        ``API_KEY`` wins over ``GOOGLE_API_KEY`` when both are set.
        """
        return cls(google=os.getenv("API_KEY", "") or os.getenv("GOOGLE_API_KEY", ""))

    def merge_env(self) -> "APIKeys":
        """Merge with environment variables (env takes precedence)."""
        env_keys = APIKeys.from_env()
        return APIKeys(google=env_keys.google or self.google)


@dataclass
class Defaults:
    """Default settings."""

    initial_prompt: str = DEFAULT_PROMPT
    output_dir: str = "generated_images"
    inline_preview: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> "Defaults":
        return cls(
            initial_prompt=data.get("initial_prompt", DEFAULT_PROMPT),
            output_dir=data.get("output_dir", "generated_images"),
            inline_preview=data.get("inline_preview", False),
        )


@dataclass
class Config:
    """Complete configuration."""

    api_keys: APIKeys = field(default_factory=APIKeys)
    defaults: Defaults = field(default_factory=Defaults)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Config":
        """Load configuration from file and environment."""
        config_path = config_path or GLOBAL_CONFIG_FILE

        config = cls()

        if config_path.exists():
            with open(config_path) as f:
                data = yaml.safe_load(f) or {}
                config.api_keys = APIKeys.from_dict(data.get("api_keys") or {})
                config.defaults = Defaults.from_dict(data.get("defaults") or {})

        # Environment variables take precedence
        config.api_keys = config.api_keys.merge_env()

        return config

    def save(self, config_path: Optional[Path] = None) -> None:
        """Save configuration to file."""
        config_path = config_path or GLOBAL_CONFIG_FILE
        config_path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            "api_keys": {
                "google": self.api_keys.google,
            },
            "defaults": {
                "initial_prompt": self.defaults.initial_prompt,
                "output_dir": self.defaults.output_dir,
                "inline_preview": self.defaults.inline_preview,
            },
        }

        with open(config_path, "w") as f:
            yaml.dump(data, f, default_flow_style=False)

    def validate(self) -> list[str]:
        """Validate configuration and return list of issues."""
        issues = []

        if not self.api_keys.google:
            issues.append("Google API key not configured (API_KEY or GOOGLE_API_KEY)")

        return issues

    @property
    def output_dir(self) -> Path:
        return Path(self.defaults.output_dir).expanduser()
