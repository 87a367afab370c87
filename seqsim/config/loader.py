"""Configuration file loading and parsing.

Loads and validates YAML configuration files using Pydantic schemas.
"""

import yaml
from pathlib import Path
from seqsim.config.schema import SimulationConfig


def load_config(config_path: str | Path) -> SimulationConfig:
    """Load and validate simulation configuration from YAML file.

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Validated SimulationConfig object

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If the file is empty or not a YAML mapping
        yaml.YAMLError: If YAML is malformed
        pydantic.ValidationError: If config doesn't match schema
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        raw_config = yaml.safe_load(f)

    if raw_config is None:
        raise ValueError(f"Config file is empty: {config_path}")
    if not isinstance(raw_config, dict):
        raise ValueError(
            f"Config file must contain a mapping, got {type(raw_config).__name__}: {config_path}"
        )

    return SimulationConfig(**raw_config)
