"""
Seed loader utility for the portal.

Loads YAML seed datasets from the seeds/ directory shipped with the
package.
"""

from pathlib import Path
from typing import Any
import yaml


# Default seeds directory (inside the package)
SEEDS_DIR = Path(__file__).parent.parent / "seeds"


def load_seed(name: str, seeds_dir: Path | None = None) -> list[dict[str, Any]]:
    """
    Load a seed dataset by name.

    Args:
        name: Seed name without .yaml extension (e.g., "courses")
        seeds_dir: Optional custom seeds directory

    Returns:
        List of records stored under the top-level `records` key

    Raises:
        FileNotFoundError: If seed file doesn't exist
        yaml.YAMLError: If YAML parsing fails
    """
    dir_path = seeds_dir or SEEDS_DIR
    file_path = dir_path / f"{name}.yaml"

    if not file_path.exists():
        raise FileNotFoundError(f"Seed dataset not found: {file_path}")

    with open(file_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    return data.get("records", [])


def get_available_seeds(seeds_dir: Path | None = None) -> list[str]:
    """
    List all available seed datasets.

    Args:
        seeds_dir: Optional custom seeds directory

    Returns:
        List of seed names (without .yaml extension)
    """
    dir_path = seeds_dir or SEEDS_DIR
    if not dir_path.exists():
        return []
    return sorted(p.stem for p in dir_path.glob("*.yaml"))
