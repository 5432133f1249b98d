from __future__ import annotations

import os
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, Field


class OpaConfig(BaseModel):
    """Decision service endpoints and client limits."""

    policy_uri: str = "http://localhost:8181/v1/data/trino/allow"
    policy_batched_uri: Optional[str] = None
    max_concurrent_requests: int = Field(default=32, ge=1)
    request_timeout: float = Field(default=10.0, gt=0)
    log_requests: bool = False
    log_responses: bool = False


class TransportConfig(BaseModel):
    """Transport configuration settings."""

    backend: Literal["http", "inmemory"] = "http"


class TrinoOpaConfig(BaseModel):
    """Top-level configuration model."""

    opa: OpaConfig = OpaConfig()
    transport: TransportConfig = TransportConfig()
    engine_version: str = "unknown"


def load_config(path: Optional[str] = None) -> TrinoOpaConfig:
    """Load configuration from YAML file.

    Args:
        path: Optional path to config file. Falls back to TRINO_OPA_CONFIG env
            variable or 'config.yaml' in the current directory.
    """

    config_path = path or os.getenv("TRINO_OPA_CONFIG", "config.yaml")
    if os.path.exists(config_path):
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
        config = TrinoOpaConfig(**data)
    else:
        config = TrinoOpaConfig()

    env_policy_uri = os.getenv("TRINO_OPA_POLICY_URI")
    if env_policy_uri:
        config.opa.policy_uri = env_policy_uri
    env_batched_uri = os.getenv("TRINO_OPA_POLICY_BATCHED_URI")
    if env_batched_uri:
        config.opa.policy_batched_uri = env_batched_uri
    return config
