"""Configuration loading for the CLI."""

import glob
import json
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from dtsbundle_engine.models import BundleConfig

EOL_NAMES = {"lf": "\n", "crlf": "\r\n", "cr": "\r"}
GLOB_CHARACTERS = set("*?[")


def load_config_file(config_path: Optional[Path]) -> Dict[str, Any]:
    """Read bundle options from a JSON file. Keys are BundleConfig field names."""
    if config_path is None:
        return {}

    with open(config_path, "r", encoding="utf-8") as f:
        data = json.load(f)

    if not isinstance(data, dict):
        raise ValueError(f"{config_path} must contain a JSON object")

    # Relative base directories are relative to the config file, not the cwd
    base_dir = data.get("base_dir")
    if base_dir and not os.path.isabs(base_dir):
        data["base_dir"] = str(config_path.parent / base_dir)

    return data


def parse_eol(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return EOL_NAMES.get(value.lower(), value)


def expand_files(base_dir: str, patterns: List[str]) -> List[str]:
    """Expand glob patterns against ``base_dir``; plain paths are kept as given."""
    files: List[str] = []
    for pattern in patterns:
        if not GLOB_CHARACTERS.intersection(pattern):
            files.append(pattern)
            continue
        matches = sorted(glob.glob(os.path.join(base_dir, pattern), recursive=True))
        files.extend(match for match in matches if os.path.isfile(match))
    return files


def build_config(file_values: Dict[str, Any], overrides: Dict[str, Any]) -> BundleConfig:
    """Merge command-line overrides onto config file values and validate the result."""
    values = dict(file_values)
    values.update({key: value for key, value in overrides.items() if value not in (None, (), [])})
    values.setdefault("base_dir", os.getcwd())

    config = BundleConfig.model_validate(values)
    config.files = expand_files(config.base_dir, config.files)
    return config
