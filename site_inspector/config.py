"""Configuration loading from CLI args, env vars, and optional YAML file."""

import logging
import os
from dataclasses import dataclass

import yaml

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class Config:
    wp_binary: str = "wp"
    wp_path: str | None = None
    wp_timeout: float = 120.0
    content_dir: str | None = None
    wpscan_url: str = "https://wpscan.com/api/v3/wordpresses"
    wpscan_api_token: str | None = None
    http_timeout: float = 10.0
    log_level: str = "WARNING"


def load_yaml_config(path: str | None) -> dict:
    """Load settings from a YAML file. Returns empty dict if no path."""
    if not path:
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        logger.info("Loaded YAML config from %s", path)
        return data
    except FileNotFoundError:
        logger.warning("Config file %s not found, using defaults", path)
        return {}


def _pick(env_name: str, yaml_value, default):
    value = os.environ.get(env_name)
    if value is not None and value != "":
        return value
    if yaml_value is not None:
        return yaml_value
    return default


def load_config(cli_args, yaml_data: dict) -> Config:
    """Build Config from defaults < YAML < env vars < CLI flags."""
    wp = yaml_data.get("wp") or {}
    wpscan = yaml_data.get("wpscan") or {}

    wp_path = _pick("WP_PATH", wp.get("path"), Config.wp_path)
    if getattr(cli_args, "path", None):
        wp_path = cli_args.path

    log_level = str(_pick("LOG_LEVEL", yaml_data.get("log_level"), Config.log_level)).upper()
    if log_level not in LOG_LEVELS:
        logger.warning("Unknown log level %s, using %s", log_level, Config.log_level)
        log_level = Config.log_level
    if getattr(cli_args, "debug", False):
        log_level = "DEBUG"

    return Config(
        wp_binary=_pick("WP_CLI_BIN", wp.get("binary"), Config.wp_binary),
        wp_path=wp_path,
        wp_timeout=float(_pick("WP_CLI_TIMEOUT", wp.get("timeout"), Config.wp_timeout)),
        content_dir=_pick("WP_CONTENT_DIR", yaml_data.get("content_dir"), Config.content_dir),
        wpscan_url=_pick("WPSCAN_API_URL", wpscan.get("url"), Config.wpscan_url),
        wpscan_api_token=_pick("WPSCAN_API_TOKEN", wpscan.get("api_token"), Config.wpscan_api_token),
        http_timeout=float(_pick("HTTP_TIMEOUT", wpscan.get("timeout"), Config.http_timeout)),
        log_level=log_level,
    )
