"""
Runtime configuration loading.

Precedence (highest first): CLI flags, YAML file (--config), environment
variables (a .env file in the working directory is loaded first), defaults.
"""

import os
from argparse import Namespace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from dotenv import load_dotenv
from pydantic import ValidationError

from infra.errors import ConfigurationError
from .schemas import PipelineConfig, resolve_env_vars


ENV_VARS = {
    'UNSPLASH_API_KEY': ('unsplash', 'api_key'),
    'GEMINI_API_KEY': ('gemini', 'api_key'),
    'GEMINI_MODEL': ('gemini', 'model'),
    'GHOST_ADMIN_API_KEY': ('ghost', 'admin_api_key'),
    'GHOST_URL': ('ghost', 'url'),
}

# argparse dest -> (section, key)
CLI_FIELDS = {
    'unsplash_api_key': ('unsplash', 'api_key'),
    'collection_id': ('unsplash', 'collection_id'),
    'count': ('unsplash', 'count'),
    'gemini_api_key': ('gemini', 'api_key'),
    'gemini_model': ('gemini', 'model'),
    'temperature': ('gemini', 'temperature'),
    'delay': ('gemini', 'delay'),
    'ghost_api_key': ('ghost', 'admin_api_key'),
    'ghost_url': ('ghost', 'url'),
    'ghost_type': ('ghost', 'content_type'),
    'ghost_status': ('ghost', 'status'),
    'ghost_author': ('ghost', 'author_id'),
    'dry_run': ('ghost', 'dry_run'),
    'dir': ('paths', 'work_dir'),
    'output': ('paths', 'listing'),
    'json': ('paths', 'enriched'),
    'report': ('paths', 'report'),
    'log_dir': ('paths', 'log_dir'),
}

SKIP_FLAGS = {
    'skip_download': 'fetch',
    'skip_content': 'generate',
    'skip_ghost': 'publish',
}


def _deep_merge(base: dict, updates: dict) -> None:
    """
    Deep merge updates into base dict (mutates base).
    """
    for key, value in updates.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value


def _resolve_tree(data):
    if isinstance(data, dict):
        return {k: _resolve_tree(v) for k, v in data.items()}
    if isinstance(data, list):
        return [_resolve_tree(v) for v in data]
    return resolve_env_vars(data)


def _set(data: dict, section: str, key: str, value: Any) -> None:
    data.setdefault(section, {})[key] = value


def load_yaml_config(path: Path) -> Dict[str, Any]:
    path = Path(path).expanduser()
    if not path.exists():
        raise ConfigurationError(f"Config file not found: {path}")

    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping")

    return _resolve_tree(data)


def env_overrides(environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    environ = os.environ if environ is None else environ
    data: Dict[str, Any] = {}
    for var, (section, key) in ENV_VARS.items():
        value = environ.get(var)
        if value:
            _set(data, section, key, value)
    return data


def cli_overrides(args: Namespace) -> Dict[str, Any]:
    """Only flags the user actually gave (non-None) override lower layers."""
    data: Dict[str, Any] = {}
    for dest, (section, key) in CLI_FIELDS.items():
        value = getattr(args, dest, None)
        if value is not None:
            _set(data, section, key, value)

    if getattr(args, 'verbose', None):
        data['verbose'] = True

    skip = [stage for flag, stage in SKIP_FLAGS.items() if getattr(args, flag, False)]
    if skip:
        data['skip'] = skip

    return data


def load_pipeline_config(
    args: Optional[Namespace] = None,
    config_path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
    use_dotenv: bool = True
) -> PipelineConfig:
    if use_dotenv and environ is None:
        load_dotenv()

    config_path = config_path or (getattr(args, 'config', None) if args else None)

    data: Dict[str, Any] = {}
    _deep_merge(data, env_overrides(environ))

    yaml_skip = []
    if config_path:
        yaml_data = load_yaml_config(config_path)
        yaml_skip = list(yaml_data.get('skip') or [])
        _deep_merge(data, yaml_data)

    if args is not None:
        cli_data = cli_overrides(args)
        if 'skip' in cli_data:
            cli_data['skip'] = yaml_skip + cli_data['skip']
        _deep_merge(data, cli_data)

    try:
        return PipelineConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(_format_validation_error(e)) from e


def _format_validation_error(error: ValidationError) -> str:
    problems = []
    for err in error.errors():
        location = ".".join(str(part) for part in err.get('loc', ()))
        message = err.get('msg', 'invalid value')
        problems.append(f"{location}: {message}" if location else message)
    return "Invalid configuration: " + "; ".join(problems)
