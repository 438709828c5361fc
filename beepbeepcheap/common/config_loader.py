"""
Configuration Loader

Loads YAML configuration files for the store registry, extraction rules,
identity word lists and runtime settings.
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List

import yaml

# Environment variables that override config/settings.yaml
_ENV_OVERRIDES = {
    'BEEPBEEPCHEAP_RENDER_TIMEOUT': ('render', 'timeout_seconds', float),
    'BEEPBEEPCHEAP_RENDERER': ('render', 'renderer', str),
    'BEEPBEEPCHEAP_CHECK_DELAY': ('batch', 'delay_seconds', float),
}


def _get_config_dir() -> Path:
    """Get the config directory path."""
    # Try the directory shipped inside the package first
    package_dir = Path(__file__).parent.parent
    config_dir = package_dir / 'config'

    if config_dir.exists():
        return config_dir

    # Try current working directory
    cwd_config = Path.cwd() / 'config'
    if cwd_config.exists():
        return cwd_config

    raise FileNotFoundError(
        f"Config directory not found. Tried: {config_dir}, {cwd_config}"
    )


@lru_cache(maxsize=None)
def _read_config(filename: str) -> Dict[str, Any]:
    config_path = _get_config_dir() / filename

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        return yaml.safe_load(f) or {}


def load_config(filename: str) -> Dict[str, Any]:
    """
    Load a YAML configuration file.

    Files are parsed once per process; callers get their own shallow copy.

    Args:
        filename: Name of the config file (e.g., 'stores.yaml')

    Returns:
        Parsed YAML content as dictionary

    Raises:
        FileNotFoundError: If config file doesn't exist
    """
    return dict(_read_config(filename))


def load_store_profiles() -> List[Dict[str, Any]]:
    """
    Load the store registry entries.

    Returns:
        List of raw store records

    Example:
        [
            {'label': 'Amazon', 'hosts': ['amazon'], 'price_selectors': [...]},
            {'label': 'H&M', 'hosts': ['hm.com'], ...},
            ...
        ]
    """
    config = load_config('stores.yaml')
    return list(config.get('stores', []))


def load_extraction_rules() -> Dict[str, Any]:
    """
    Load generic selectors and rejection lists used by the extraction cascade.

    Returns:
        Dictionary with keys such as 'generic_price_selectors',
        'invalid_name_phrases', 'title_suffixes', 'image_reject_keywords'
    """
    return load_config('extraction_rules.yaml')


def load_identity_words() -> Dict[str, List[str]]:
    """
    Load word lists for product identity extraction.

    Returns:
        Dictionary with 'generic_words' and 'variant_unit_stoplist'
    """
    config = load_config('identity.yaml')
    return {
        'generic_words': list(config.get('generic_words', [])),
        'variant_unit_stoplist': list(config.get('variant_unit_stoplist', [])),
    }


def load_settings() -> Dict[str, Dict[str, Any]]:
    """
    Load runtime settings with environment variable overrides.

    Returns:
        Dictionary of setting sections ('render', 'batch', 'matching')

    Example:
        {
            'render': {'renderer': 'browser', 'timeout_seconds': 45, ...},
            'batch': {'delay_seconds': 2.0},
            'matching': {'max_alternatives': 3},
        }
    """
    config = load_config('settings.yaml')
    settings = {section: dict(values or {}) for section, values in config.items()}

    for env_name, (section, key, cast) in _ENV_OVERRIDES.items():
        raw = os.environ.get(env_name)
        if raw:
            settings.setdefault(section, {})[key] = cast(raw)

    return settings
