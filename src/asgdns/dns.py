"""Route53 record targets, tag parsing and the hosted zone gateway."""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional

import boto3
from botocore.client import BaseClient

from .config import HandlerConfig, RECORD_TYPES
from .utils import (
    AWSClientError,
    BOTO_ERRORS,
    DnsNotConfiguredError,
    TagValidationError,
)

UPSERT = "UPSERT"
DELETE = "DELETE"
LOG = logging.getLogger(__name__)


@dataclass(frozen=True)
class DnsTarget:
    """The record a scaling group asks to be maintained."""

    hosted_zone_id: str
    record_type: str
    record_name: str
    ttl: int

    @property
    def uses_dns_name(self) -> bool:
        """CNAME records point at DNS names, A records at IP addresses."""
        return self.record_type == "CNAME"


@dataclass(frozen=True)
class RecordChange:
    """A single weighted record set change."""

    action: str
    name: str
    record_type: str
    set_identifier: str
    weight: int
    ttl: int
    value: str

    def to_change(self) -> Dict[str, Any]:
        return {
            "Action": self.action,
            "ResourceRecordSet": {
                "Name": self.name,
                "Type": self.record_type,
                "SetIdentifier": self.set_identifier,
                "Weight": self.weight,
                "TTL": self.ttl,
                "ResourceRecords": [{"Value": self.value}],
            },
        }

    def to_change_batch(self, comment: Optional[str] = None) -> Dict[str, Any]:
        comment = comment or f"{self.action} {self.name} for {self.set_identifier}"
        return {"Comment": comment, "Changes": [self.to_change()]}


class DNSProviderError(AWSClientError):
    """Raised when Route53 operations fail."""


def parse_tag_value(value: Optional[str], config: Optional[HandlerConfig] = None) -> DnsTarget:
    """Parse a scaling group DNS tag into a DnsTarget.

    Accepted forms are ``zoneId:recordName``, ``zoneId:type:recordName`` and
    ``zoneId:type:recordName:ttl``. Missing type and ttl fall back to the
    configured defaults.

    Raises:
        DnsNotConfiguredError: the value is empty or exactly ``none``.
        TagValidationError: the value does not match any accepted form.
    """
    config = config or HandlerConfig()
    raw = (value or "").strip()
    if not raw or raw == "none":
        raise DnsNotConfiguredError(
            f"tag '{config.tag_key}' is empty or 'none'; DNS management disabled"
        )

    tokens = [token.strip() for token in raw.split(":")]
    if not 2 <= len(tokens) <= 4:
        raise TagValidationError(
            f"tag '{config.tag_key}' value '{raw}' has {len(tokens)} fields; expected "
            "'HostedZoneId:record-name', 'HostedZoneId:type:record-name' "
            "or 'HostedZoneId:type:record-name:ttl'"
        )

    record_type = config.default_record_type
    ttl = config.default_ttl
    if len(tokens) == 2:
        zone_id, record_name = tokens
    else:
        zone_id, record_type, record_name = tokens[:3]
        if record_type not in RECORD_TYPES:
            raise TagValidationError(
                f"tag '{config.tag_key}' value '{raw}' has invalid type '{record_type}'; "
                f"expected one of {', '.join(RECORD_TYPES)}"
            )
        if len(tokens) == 4:
            ttl = _parse_ttl(tokens[3], raw, config)

    if not zone_id:
        raise TagValidationError(f"tag '{config.tag_key}' value '{raw}' has an empty hosted zone id")
    if not record_name:
        raise TagValidationError(f"tag '{config.tag_key}' value '{raw}' has an empty record name")

    return DnsTarget(
        hosted_zone_id=zone_id,
        record_type=record_type,
        record_name=record_name,
        ttl=ttl,
    )


def _parse_ttl(token: str, raw: str, config: HandlerConfig) -> int:
    if not (token.isascii() and token.isdigit()):
        raise TagValidationError(
            f"tag '{config.tag_key}' value '{raw}' has invalid ttl '{token}'; "
            "expected a non-negative integer"
        )
    return int(token)


def format_tag_value(target: DnsTarget, config: Optional[HandlerConfig] = None) -> str:
    """Render a DnsTarget in the shortest tag form that parses back to it."""
    config = config or HandlerConfig()
    if target.ttl != config.default_ttl:
        return f"{target.hosted_zone_id}:{target.record_type}:{target.record_name}:{target.ttl}"
    if target.record_type != config.default_record_type:
        return f"{target.hosted_zone_id}:{target.record_type}:{target.record_name}"
    return f"{target.hosted_zone_id}:{target.record_name}"


_OCTAL_ESCAPE = re.compile(r"\\([0-7]{3})")


def _normalize_name(name: str) -> str:
    # Route53 lists characters outside [a-z0-9-_.] as \ddd octal escapes.
    name = _OCTAL_ESCAPE.sub(lambda m: chr(int(m.group(1), 8)), name)
    return name.rstrip(".").lower()


def _same_name(left: str, right: str) -> bool:
    return _normalize_name(left) == _normalize_name(right)


class Route53Zone:
    """Route53 hosted zone operations used by the lifecycle handler."""

    def __init__(self, zone_id: str, client: Optional[BaseClient] = None) -> None:
        self.zone_id = zone_id
        self.client = client or boto3.client("route53")

    def is_private(self) -> bool:
        """Return True when the hosted zone is a private (VPC) zone."""
        try:
            resp = self.client.get_hosted_zone(Id=self.zone_id)
        except BOTO_ERRORS as exc:
            LOG.error("Route53 get_hosted_zone failed for %s: %s", self.zone_id, exc)
            raise DNSProviderError.wrap("get_hosted_zone", exc) from exc
        return bool(resp.get("HostedZone", {}).get("Config", {}).get("PrivateZone", False))

    def find_record_value(self, name: str, record_type: str, set_identifier: str) -> Optional[str]:
        """Return the first value of a weighted record set, or None if absent."""
        try:
            resp = self.client.list_resource_record_sets(
                HostedZoneId=self.zone_id,
                StartRecordName=name,
                StartRecordType=record_type,
                StartRecordIdentifier=set_identifier,
                MaxItems="1",
            )
        except BOTO_ERRORS as exc:
            LOG.error("Route53 list_resource_record_sets failed for %s: %s", name, exc)
            raise DNSProviderError.wrap("list_resource_record_sets", exc) from exc

        record_sets = resp.get("ResourceRecordSets", [])
        if not record_sets:
            return None

        # Listing starts at the requested position, so the first set may be a neighbour.
        record = record_sets[0]
        if (
            not _same_name(record.get("Name", ""), name)
            or record.get("Type") != record_type
            or record.get("SetIdentifier") != set_identifier
        ):
            return None

        values = record.get("ResourceRecords", [])
        value = values[0].get("Value", "") if values else ""
        return value or None

    def apply(self, change: RecordChange, comment: Optional[str] = None) -> Dict[str, Any]:
        """Submit a single change and return the resulting ChangeInfo."""
        try:
            resp = self.client.change_resource_record_sets(
                HostedZoneId=self.zone_id,
                ChangeBatch=change.to_change_batch(comment),
            )
        except BOTO_ERRORS as exc:
            LOG.error(
                "Route53 %s of %s (%s) failed: %s",
                change.action,
                change.name,
                change.set_identifier,
                exc,
            )
            raise DNSProviderError.wrap("change_resource_record_sets", exc) from exc
        return resp.get("ChangeInfo", {})
