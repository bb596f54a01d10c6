from __future__ import annotations

import os
from typing import Literal, Optional

import yaml
from pydantic import BaseModel

from .constants import DEFAULT_CONFIG_PATH


class LedgerConfig(BaseModel):
    """Where the local service loads its alias ledger snapshot from."""

    path: Optional[str] = None
    block_number: Optional[int] = None


class ServiceConfig(BaseModel):
    """Identity service configuration settings."""

    backend: Literal["local"] = "local"
    ledger: LedgerConfig = LedgerConfig()


class EnvelopeConfig(BaseModel):
    """Top-level configuration model."""

    service: ServiceConfig = ServiceConfig()


def load_config(path: Optional[str] = None) -> EnvelopeConfig:
    """Load configuration from YAML file.

    Args:
        path: Optional path to config file. Falls back to
            'signed_envelope.yaml' in the current directory.
    """

    config_path = path or DEFAULT_CONFIG_PATH
    if os.path.exists(config_path):
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
        return EnvelopeConfig(**data)
    return EnvelopeConfig()
