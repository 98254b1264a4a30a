from __future__ import annotations
from typing import Dict, Any

def dump_yaml(data: Dict[str, Any], path: str) -> None:
    try:
        import yaml
    except ImportError as e:
        raise ImportError("PyYAML is required to write YAML. Install with `pip install pyyaml`.") from e

    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(data, f, sort_keys=False, default_flow_style=False)


def load_yaml(path: str) -> Dict[str, Any]:
    try:
        import yaml
    except ImportError as e:
        raise ImportError("PyYAML is required to read YAML. Install with `pip install pyyaml`.") from e
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError("YAML root must be a mapping (dict).")
    return data
