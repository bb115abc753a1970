#!/usr/bin/env python3

import os
import json
import tomllib
from pathlib import Path

import logging
import sys

logger = logging.getLogger("pluginpub")

CONFIG_FILENAMES = ['config.json', 'config.toml', 'config.yaml', 'config.yml']


def configure_logging(level="INFO", fmt="%(levelname)s: %(message)s"):
    """Route pluginpub logging to stderr so stdout stays clean for data."""
    logging.basicConfig(
        level=level,
        format=fmt,
        handlers=[
            logging.StreamHandler(sys.stderr)  # Default to stderr
        ],
        force=True,
    )


def get_config_dir():
    """Directory holding settings, the token store and the working clone."""
    return Path.home() / '.config' / 'pluginpub'


def get_config_path():
    """Get the path to the settings file.

    Checks in order:
    1. PLUGINPUB_CONFIG environment variable
    2. ~/.config/pluginpub/config.{json,toml,yaml,yml}
    """
    if 'PLUGINPUB_CONFIG' in os.environ:
        path = Path(os.environ['PLUGINPUB_CONFIG'])
        if path.exists():
            return path

    config_dir = get_config_dir()
    for filename in CONFIG_FILENAMES:
        path = config_dir / filename
        if path.exists():
            return path

    # If no file exists, return default path
    return config_dir / 'config.json'


def get_default_config():
    """Get default configuration."""
    config_dir = get_config_dir()
    return {
        "github": {
            "client_id": "Ov23liLg5G9eD70HMXay",
            "scope": "user repo",
            "user_agent": "pluginpub-cli",
            "api_url": "https://api.github.com",
            "oauth_url": "https://github.com",
            "central_owner": "ZToolsCenter",
            "central_repo": "ZTools-plugins",
            "base_branch": "main",
            "default_poll_interval": 10,
            "slow_down_step": 5,
            "fork_poll_attempts": 10,
            "fork_poll_delay": 2,
            "timeout_seconds": 30,
        },
        "paths": {
            "config_dir": str(config_dir),
            "token_file": str(config_dir / 'cli-config.json'),
            "work_dir": str(config_dir / 'ZTools-plugins'),
        },
        "logging": {
            "level": "INFO",
            "format": "%(levelname)s: %(message)s"
        },
    }


def load_config():
    """Load configuration from file."""
    config_path = get_config_path()

    # Start with default config
    config = get_default_config()

    # Load from file if it exists
    if config_path.exists():
        try:
            if config_path.suffix.lower() in ['.toml']:
                with open(config_path, 'rb') as f:
                    file_config = tomllib.load(f)
            elif config_path.suffix.lower() in ['.yaml', '.yml']:
                import yaml
                with open(config_path, 'r') as f:
                    file_config = yaml.safe_load(f) or {}
            else:
                # Default to JSON format
                with open(config_path, 'r') as f:
                    file_config = json.load(f)

            # Merge file config with defaults
            config = merge_configs(config, file_config)
        except Exception as e:
            logger.error(f"Error loading config from {config_path}: {e}")

    # Apply environment variable overrides
    config = apply_env_overrides(config)

    return config


def merge_configs(base_config, override_config):
    """
    Recursively merge two configuration dictionaries.

    Args:
        base_config (dict): Base configuration
        override_config (dict): Configuration to merge/override with

    Returns:
        dict: Merged configuration
    """
    merged = base_config.copy()

    for key, value in override_config.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            # Recursively merge nested dictionaries
            merged[key] = merge_configs(merged[key], value)
        else:
            # Override or add new key
            merged[key] = value

    return merged


def apply_env_overrides(config):
    """
    Apply environment variable overrides to configuration.
    Environment variables follow the pattern: PLUGINPUB_SECTION_KEY
    For example: PLUGINPUB_GITHUB_BASE_BRANCH=develop
    """
    env_prefix = "PLUGINPUB_"

    for env_key, value in os.environ.items():
        if not env_key.startswith(env_prefix) or env_key == "PLUGINPUB_CONFIG":
            continue

        key_parts = env_key[len(env_prefix):].lower().split('_')

        # Convert value
        if value.lower() in ('true', 'yes', 'on'):
            typed_value = True
        elif value.lower() in ('false', 'no', 'off'):
            typed_value = False
        elif value.isdigit():
            typed_value = int(value)
        else:
            typed_value = value

        current_level = config
        i = 0
        while i < len(key_parts):
            # Find the longest key in current_level that is a prefix of the remaining key_parts
            best_match_len = 0
            matched_key = None

            for config_key in current_level.keys():
                config_key_parts = config_key.split('_')
                if key_parts[i: i + len(config_key_parts)] == config_key_parts:
                    if len(config_key_parts) > best_match_len:
                        best_match_len = len(config_key_parts)
                        matched_key = config_key

            if not matched_key:
                break

            if i + best_match_len == len(key_parts):
                current_level[matched_key] = typed_value
                break

            if isinstance(current_level[matched_key], dict):
                current_level = current_level[matched_key]
                i += best_match_len
            else:
                break

    return config
