"""Route53 update handler for Auto Scaling lifecycle notifications."""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, replace
from typing import Any, Dict, Optional, TYPE_CHECKING

from asgdns.config import HandlerConfig
from asgdns.dns import DELETE, UPSERT, DnsTarget, RecordChange, Route53Zone, parse_tag_value
from asgdns.lifecycle.notification import EventKind, LifecycleNotification, parse_notification
from asgdns.utils import (
    AWSClientError,
    AsgDnsError,
    BOTO_ERRORS,
    DnsNotConfiguredError,
    NotificationParseError,
    RecordNotFoundError,
    TagValidationError,
    client_error_code,
)

if TYPE_CHECKING:  # pragma: no cover
    from mypy_boto3_autoscaling.client import AutoScalingClient
    from mypy_boto3_ec2.client import EC2Client
    from mypy_boto3_route53.client import Route53Client
else:
    AutoScalingClient = Any
    EC2Client = Any
    Route53Client = Any

logger = logging.getLogger(__name__)

IGNORED = "ignored"
NOT_CONFIGURED = "not_configured"
INVALID = "invalid"
RECORD_NOT_FOUND = "record_not_found"
FAILED = "failed"
PLANNED = "planned"
SUBMITTED = "submitted"

INSTANCE_NOT_FOUND = "InvalidInstanceID.NotFound"


@dataclass(frozen=True)
class HandlerResult:
    """Outcome of one notification."""

    status: str
    message: str
    change: Optional[RecordChange] = None
    change_info: Optional[Dict[str, Any]] = None

    @property
    def ok(self) -> bool:
        return self.status not in {INVALID, FAILED}


@dataclass(frozen=True)
class _PipelineContext:
    notification: LifecycleNotification
    target: Optional[DnsTarget] = None
    private_zone: bool = False
    record_value: Optional[str] = None
    action: Optional[str] = None


def _log(level: int, message: str, **fields: Any) -> None:
    payload = {"message": message, **fields}
    logger.log(level, json.dumps(payload, sort_keys=True, default=str))


def _log_info(message: str, **fields: Any) -> None:
    _log(logging.INFO, message, **fields)


def _log_warning(message: str, **fields: Any) -> None:
    _log(logging.WARNING, message, **fields)


def _log_error(message: str, **fields: Any) -> None:
    _log(logging.ERROR, message, **fields)


def resolve_instance_address(
    response: Dict[str, Any],
    *,
    private: bool,
    use_dns_name: bool,
) -> Optional[str]:
    """Pick the address of an instance's primary interface from describe_instances.

    Private zones use the private DNS name or IP, public zones the public
    association. Returns None when the needed data is absent, which is the
    case for instances that are already shutting down.
    """
    interface: Dict[str, Any] = {}
    for reservation in (response.get("Reservations") or [])[:1]:
        for instance in (reservation.get("Instances") or [])[:1]:
            interface = next(iter(instance.get("NetworkInterfaces") or []), {})
    if not interface:
        return None

    if private:
        addresses = interface.get("PrivateIpAddresses") or []
        if not addresses:
            return None
        key = "PrivateDnsName" if use_dns_name else "PrivateIpAddress"
        value = addresses[0].get(key)
    else:
        association = interface.get("Association")
        if not association:
            return None
        key = "PublicDnsName" if use_dns_name else "PublicIp"
        value = association.get(key)

    return value or None


def _load_target(
    ctx: _PipelineContext,
    autoscaling_client: AutoScalingClient,
    config: HandlerConfig,
) -> _PipelineContext:
    group_name = ctx.notification.group_name
    try:
        response = autoscaling_client.describe_tags(
            Filters=[
                {"Name": "auto-scaling-group", "Values": [group_name]},
                {"Name": "key", "Values": [config.tag_key]},
            ],
            MaxRecords=1,
        )
    except BOTO_ERRORS as exc:
        raise AWSClientError.wrap("describe_tags", exc) from exc

    tags = response.get("Tags", [])
    if not tags:
        raise DnsNotConfiguredError(
            f"scaling group {group_name} does not define tag '{config.tag_key}'"
        )

    tag_value = tags[0].get("Value", "")
    _log_info("found DNS tag", group=group_name, tag_key=config.tag_key, tag_value=tag_value)
    return replace(ctx, target=parse_tag_value(tag_value, config))


def _inspect_zone(ctx: _PipelineContext, zone: Route53Zone) -> _PipelineContext:
    private = zone.is_private()
    _log_info("inspected hosted zone", hosted_zone_id=zone.zone_id, private=private)
    return replace(ctx, private_zone=private)


def _resolve_address(ctx: _PipelineContext, ec2_client: EC2Client) -> _PipelineContext:
    instance_id = ctx.notification.instance_id
    try:
        response = ec2_client.describe_instances(InstanceIds=[instance_id], DryRun=False)
    except BOTO_ERRORS as exc:
        if client_error_code(exc) != INSTANCE_NOT_FOUND:
            raise AWSClientError.wrap("describe_instances", exc) from exc
        # Already gone; treat like an instance without network data.
        _log_info("instance no longer exists", instance_id=instance_id)
        return ctx

    value = resolve_instance_address(
        response,
        private=ctx.private_zone,
        use_dns_name=ctx.target.uses_dns_name,
    )
    if value is None:
        return ctx

    action = UPSERT if ctx.notification.kind is EventKind.LAUNCH else DELETE
    return replace(ctx, record_value=value, action=action)


def _recover_existing_record(ctx: _PipelineContext, zone: Route53Zone) -> _PipelineContext:
    """Reuse the value of the instance's existing record and force a DELETE."""
    target = ctx.target
    instance_id = ctx.notification.instance_id
    if ctx.notification.kind is EventKind.LAUNCH:
        # Launch notifications normally carry a live instance; a missing
        # association here still removes the record.
        _log_warning(
            "launched instance has no network association; removing its record",
            instance_id=instance_id,
            record_name=target.record_name,
        )
    else:
        _log_info(
            "instance has no network association; reading existing record",
            instance_id=instance_id,
            record_name=target.record_name,
        )

    value = zone.find_record_value(target.record_name, target.record_type, instance_id)
    if value is None:
        raise RecordNotFoundError(
            f"no {target.record_type} record {target.record_name} with set identifier "
            f"{instance_id} in zone {target.hosted_zone_id}"
        )
    return replace(ctx, record_value=value, action=DELETE)


def _build_change(ctx: _PipelineContext, config: HandlerConfig) -> RecordChange:
    target = ctx.target
    return RecordChange(
        action=ctx.action,
        name=target.record_name,
        record_type=target.record_type,
        set_identifier=ctx.notification.instance_id,
        weight=config.weight,
        ttl=target.ttl,
        value=ctx.record_value,
    )


def _run_pipeline(
    notification: LifecycleNotification,
    *,
    autoscaling_client: AutoScalingClient,
    ec2_client: EC2Client,
    route53_client: Route53Client,
    config: HandlerConfig,
    dry_run: bool,
) -> HandlerResult:
    ctx = _PipelineContext(notification=notification)
    ctx = _load_target(ctx, autoscaling_client, config)

    zone = Route53Zone(ctx.target.hosted_zone_id, client=route53_client)
    ctx = _inspect_zone(ctx, zone)
    ctx = _resolve_address(ctx, ec2_client)
    if ctx.record_value is None:
        ctx = _recover_existing_record(ctx, zone)

    change = _build_change(ctx, config)
    _log_info("prepared Route53 change", dry_run=dry_run, change=change.to_change())
    if dry_run:
        return HandlerResult(PLANNED, f"{change.action} {change.name} not submitted", change=change)

    change_info = zone.apply(change)
    _log_info(
        "Route53 change submitted",
        action=change.action,
        record_name=change.name,
        instance_id=change.set_identifier,
        change_id=change_info.get("Id"),
        change_status=change_info.get("Status"),
    )
    return HandlerResult(
        SUBMITTED,
        f"{change.action} {change.name} submitted",
        change=change,
        change_info=change_info,
    )


def handle_notification(
    envelope: Dict[str, Any],
    *,
    autoscaling_client: AutoScalingClient,
    ec2_client: EC2Client,
    route53_client: Route53Client,
    config: Optional[HandlerConfig] = None,
    dry_run: bool = False,
) -> HandlerResult:
    """Keep a weighted Route53 record in step with one lifecycle notification.

    Launch events upsert a record pointing at the instance, terminate events
    delete it. Every failure is logged and reported in the returned result;
    nothing is raised to the caller.
    """
    config = config or HandlerConfig()

    try:
        notification = parse_notification(envelope, config)
    except NotificationParseError as exc:
        _log_error("unable to parse notification", error=str(exc))
        return HandlerResult(INVALID, str(exc))

    if not notification.is_actionable:
        _log_info(
            "ignoring notification",
            event=notification.event,
            group=notification.group_name,
        )
        return HandlerResult(IGNORED, f"ignored event {notification.event}")

    _log_info(
        "processing lifecycle notification",
        event=notification.event,
        group=notification.group_name,
        instance_id=notification.instance_id,
        cause=notification.cause,
        region=config.region,
    )

    fields = {"group": notification.group_name, "instance_id": notification.instance_id}
    try:
        return _run_pipeline(
            notification,
            autoscaling_client=autoscaling_client,
            ec2_client=ec2_client,
            route53_client=route53_client,
            config=config,
            dry_run=dry_run,
        )
    except DnsNotConfiguredError as exc:
        _log_warning("DNS not configured; skipping", error=str(exc), **fields)
        return HandlerResult(NOT_CONFIGURED, str(exc))
    except TagValidationError as exc:
        _log_error("invalid DNS tag", error=str(exc), **fields)
        return HandlerResult(INVALID, str(exc))
    except RecordNotFoundError as exc:
        _log_warning("no existing record to remove", error=str(exc), **fields)
        return HandlerResult(RECORD_NOT_FOUND, str(exc))
    except AWSClientError as exc:
        _log_error("AWS call failed", error=str(exc), error_code=exc.error_code, **fields)
        return HandlerResult(FAILED, str(exc))
    except AsgDnsError as exc:  # pragma: no cover
        _log_error("DNS update failed", error=str(exc), **fields)
        return HandlerResult(FAILED, str(exc))
