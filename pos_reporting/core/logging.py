"""Logging setup for the API process and the Lambda handler."""
from __future__ import annotations

import logging
import logging.config
from pathlib import Path

LOGGING_CONFIG_PATH = Path(__file__).resolve().parents[2] / "configs" / "logging.yaml"


def configure_logging(level: str = "INFO", *, config_path: Path | None = None) -> None:
    """Apply the YAML logging configuration, or a plain ``basicConfig`` at ``level``.

    The YAML file wins when it exists; ``level`` then only adjusts the
    ``pos_reporting`` logger so deployments can raise verbosity without
    editing the file.
    """
    path = config_path or LOGGING_CONFIG_PATH
    if path.exists():
        import yaml  # type: ignore[import-untyped]

        with path.open("r", encoding="utf-8") as config_file:
            logging.config.dictConfig(yaml.safe_load(config_file))
        logging.getLogger("pos_reporting").setLevel(level.upper())
    else:
        logging.basicConfig(
            level=level.upper(),
            format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        )


__all__ = ["LOGGING_CONFIG_PATH", "configure_logging"]
