"""
Configuration and bundled data loading.
"""

import copy
import functools
import os

import yaml


DATA_DIR = os.path.join(os.path.dirname(__file__), "data")

DEFAULT_CONFIG = {
    "claude": {
        "model": "claude-sonnet-4-5",
        "api_key_env": "ANTHROPIC_API_KEY",
        "max_tokens": 8000,
        "timeout": 120,
        "max_retries": 2,
        "temperature": {
            "draft": 0.3,
            "feedback": 0.4,
            "repair": 0.0,
            "refine": 0.2,
        },
    },
    "generation": {
        "knowledge_char_budget": 6000,
        "progress_interval": 4.0,
        "quality_retry": True,
        "refine": True,
    },
    "output": {
        "folder": "output",
        "format": "json",
    },
}


def _deep_merge(base, override):
    merged = copy.deepcopy(base)
    for key, value in (override or {}).items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(path="config.yaml"):
    """
    Load configuration from a YAML file over the built-in defaults.

    Raises:
        FileNotFoundError: if the file does not exist
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "r") as f:
        config = yaml.safe_load(f) or {}

    return _deep_merge(DEFAULT_CONFIG, config)


def default_config():
    return copy.deepcopy(DEFAULT_CONFIG)


@functools.lru_cache(maxsize=None)
def _load_data_file(name):
    with open(os.path.join(DATA_DIR, name), "r") as f:
        return yaml.safe_load(f) or {}


def load_data_file(name):
    """Load a bundled YAML data file. Callers get their own copy."""
    return copy.deepcopy(_load_data_file(name))
