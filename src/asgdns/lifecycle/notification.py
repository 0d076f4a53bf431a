"""Parsing of Auto Scaling lifecycle notifications delivered over SNS."""
from __future__ import annotations

import enum
import json
from dataclasses import dataclass
from typing import Any, Dict, Optional

from asgdns.config import HandlerConfig
from asgdns.utils import NotificationParseError


class EventKind(enum.Enum):
    LAUNCH = "launch"
    TERMINATE = "terminate"
    OTHER = "other"


@dataclass(frozen=True)
class LifecycleNotification:
    """A single lifecycle message for one instance of a scaling group."""

    event: str
    kind: EventKind
    group_name: str
    instance_id: str
    cause: str = ""

    @property
    def is_actionable(self) -> bool:
        return self.kind is not EventKind.OTHER


def classify_event(event: str, config: HandlerConfig) -> EventKind:
    if event == config.launch_event:
        return EventKind.LAUNCH
    if event == config.terminate_event:
        return EventKind.TERMINATE
    return EventKind.OTHER


def _extract_message(envelope: Any) -> Dict[str, Any]:
    if not isinstance(envelope, dict):
        raise NotificationParseError("notification envelope is not an object")

    records = envelope.get("Records")
    if not isinstance(records, list) or len(records) != 1:
        count = len(records) if isinstance(records, list) else 0
        raise NotificationParseError(f"expected exactly one record in envelope, got {count}")

    sns = records[0].get("Sns") if isinstance(records[0], dict) else None
    body = sns.get("Message") if isinstance(sns, dict) else None
    if not isinstance(body, str):
        raise NotificationParseError("record does not contain an Sns.Message string")

    try:
        message = json.loads(body)
    except ValueError as exc:
        raise NotificationParseError(f"Sns.Message is not valid JSON: {exc}") from exc

    if not isinstance(message, dict):
        raise NotificationParseError("Sns.Message does not decode to an object")
    return message


def _required(message: Dict[str, Any], field: str) -> str:
    value = str(message.get(field) or "").strip()
    if not value:
        raise NotificationParseError(f"lifecycle message is missing '{field}'")
    return value


def parse_notification(
    envelope: Dict[str, Any],
    config: Optional[HandlerConfig] = None,
) -> LifecycleNotification:
    """Parse an SNS envelope into a LifecycleNotification.

    Group name and instance id are only required for launch and terminate
    events; other messages (for example ``autoscaling:TEST_NOTIFICATION``)
    are returned with whatever fields they carry so callers can skip them.
    """
    config = config or HandlerConfig()
    message = _extract_message(envelope)
    event = _required(message, "Event")
    kind = classify_event(event, config)

    if kind is EventKind.OTHER:
        group_name = str(message.get("AutoScalingGroupName") or "")
        instance_id = str(message.get("EC2InstanceId") or "")
    else:
        group_name = _required(message, "AutoScalingGroupName")
        instance_id = _required(message, "EC2InstanceId")

    return LifecycleNotification(
        event=event,
        kind=kind,
        group_name=group_name,
        instance_id=instance_id,
        cause=str(message.get("Cause") or ""),
    )


def wrap_message(message: Dict[str, Any]) -> Dict[str, Any]:
    """Wrap a bare lifecycle message in a one-record SNS envelope."""
    return {"Records": [{"EventSource": "aws:sns", "Sns": {"Message": json.dumps(message)}}]}
