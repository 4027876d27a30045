"""YAML configuration loading."""

from pathlib import Path
from typing import Any

import yaml


DEFAULTS: dict[str, Any] = {
    "scanner": {
        "timeout": 15,
        "max_redirects": 5,
        "user_agent": "AppGuard Security Scanner",
        "delay_between_requests": 0,
    },
    "crawl": {"max_pages": 10, "max_pages_cap": None},
    "checks": {
        "security_headers": True, "cookies": True, "xss": True, "csrf": True,
        "sqli": True, "outdated": True, "credentials": True, "cors": True,
        "info_disclosure": True,
    },
    "logging": {"level": "WARNING"},
}


def default_config() -> dict[str, Any]:
    return {section: dict(values) for section, values in DEFAULTS.items()}


def load_config(path: str | Path = "config.yaml") -> dict[str, Any]:
    """Load YAML config merged over defaults. Returns defaults if the file is missing."""
    config = default_config()
    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        return config

    for key, value in data.items():
        if isinstance(value, dict) and isinstance(config.get(key), dict):
            config[key].update(value)
        else:
            config[key] = value
    return config
