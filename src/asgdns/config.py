"""Handler configuration."""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .utils import ConfigurationError

RECORD_TYPES = ("A", "CNAME")
DEFAULT_REGION = "us-west-2"


@dataclass(frozen=True)
class HandlerConfig:
    """Configuration for the lifecycle DNS handler."""

    tag_key: str = "Route53"
    region: str = DEFAULT_REGION
    weight: int = 10
    default_ttl: int = 1
    default_record_type: str = "CNAME"
    launch_event: str = "autoscaling:EC2_INSTANCE_LAUNCH"
    terminate_event: str = "autoscaling:EC2_INSTANCE_TERMINATE"

    def __post_init__(self) -> None:
        if not self.tag_key:
            raise ConfigurationError("tag_key must not be empty")
        if self.default_record_type not in RECORD_TYPES:
            raise ConfigurationError(
                f"default_record_type must be one of {', '.join(RECORD_TYPES)}, "
                f"got '{self.default_record_type}'"
            )
        if self.weight < 0 or self.default_ttl < 0:
            raise ConfigurationError("weight and default_ttl must be non-negative")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "HandlerConfig":
        """Create a HandlerConfig from environment variables.

        Recognised variables are ``AWS_REGION``, ``DNS_TAG_KEY``,
        ``DNS_RECORD_WEIGHT``, ``DNS_DEFAULT_TTL`` and
        ``DNS_DEFAULT_RECORD_TYPE``. Unset or empty variables keep the defaults.
        """
        env = os.environ if environ is None else environ
        overrides = {}

        region = env.get("AWS_REGION", "").strip()
        if region:
            overrides["region"] = region

        tag_key = env.get("DNS_TAG_KEY", "").strip()
        if tag_key:
            overrides["tag_key"] = tag_key

        record_type = env.get("DNS_DEFAULT_RECORD_TYPE", "").strip()
        if record_type:
            overrides["default_record_type"] = record_type

        for name, field in (("DNS_RECORD_WEIGHT", "weight"), ("DNS_DEFAULT_TTL", "default_ttl")):
            raw = env.get(name, "").strip()
            if not raw:
                continue
            try:
                overrides[field] = int(raw)
            except ValueError:
                raise ConfigurationError(f"{name} must be an integer, got '{raw}'")

        return cls(**overrides)
