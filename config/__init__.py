"""
Config package for Clinic Finder

Contains YAML configuration files:
- finder_settings.yaml: Dataset path, search options, geocoder and
  location settings, and the notice/disclosure text
"""

import copy
import math
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

# Path to config directory
CONFIG_DIR = Path(__file__).parent

DEFAULT_SETTINGS_FILE = 'finder_settings.yaml'

# Used for any key the YAML file leaves out
DEFAULT_SETTINGS: Dict[str, Any] = {
    'dataset_path': None,
    'distance_options': [5, 10, 25, 50, 100],
    'default_radius_miles': 5,
    'strict_radius': False,
    'service_options': ['Medical', 'Dental', 'Physical Therapy',
                        'Behavioral Health', 'Pharmacy'],
    'geocoder': {
        'base_url': 'https://nominatim.openstreetmap.org',
        'country_codes': 'us',
        'user_agent': 'ClinicFinder/0.1',
        'timeout_seconds': 10,
    },
    'location': {
        'enabled': True,
        'latitude': None,
        'longitude': None,
    },
    'notice': '',
    'disclosure': '',
}


def get_config_path(filename: str) -> str:
    """
    Get absolute path to a config file.

    Args:
        filename: Name of config file (e.g., 'finder_settings.yaml')

    Returns:
        Absolute path to the config file
    """
    return str(CONFIG_DIR / filename)


def _merge(defaults: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(defaults)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _check_location(location: Any, path: Path) -> None:
    """
    Validate the location section.

    Raises:
        ValueError: enabled is not true/false, or a position value is not a finite number
    """
    if not isinstance(location, dict):
        raise ValueError(f"location must be a mapping in {path}")

    if not isinstance(location.get('enabled'), bool):
        raise ValueError(f"location.enabled must be true or false in {path}")

    for key in ('latitude', 'longitude'):
        value = location.get(key)
        if value is None:
            continue
        if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
            raise ValueError(f"location.{key} must be a number in {path}: {value!r}")


def load_settings(yaml_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load finder settings from YAML, filling gaps from DEFAULT_SETTINGS.

    A relative dataset_path is resolved against the YAML file's folder.

    Args:
        yaml_path: Settings file. If None, uses finder_settings.yaml here.

    Returns:
        Settings dict

    Raises:
        FileNotFoundError: yaml_path given but missing
        ValueError: YAML top level is not a mapping, or the location section is malformed
    """
    path = Path(yaml_path).expanduser() if yaml_path else Path(get_config_path(DEFAULT_SETTINGS_FILE))

    if not path.exists():
        if yaml_path:
            raise FileNotFoundError(f"Settings file not found: {path}")
        return copy.deepcopy(DEFAULT_SETTINGS)

    with open(path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Settings file must contain a mapping: {path}")

    settings = _merge(DEFAULT_SETTINGS, data)
    if settings.get('location') is None:
        settings['location'] = copy.deepcopy(DEFAULT_SETTINGS['location'])
    _check_location(settings.get('location'), path)

    dataset_path = settings.get('dataset_path')
    if dataset_path and not Path(dataset_path).expanduser().is_absolute():
        settings['dataset_path'] = str(path.parent / dataset_path)

    return settings
