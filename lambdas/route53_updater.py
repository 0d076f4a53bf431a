"""Lambda wrapper for the lifecycle DNS handler (SNS subscriber)."""
from __future__ import annotations

import logging
import os

from asgdns import utils
from asgdns.config import HandlerConfig
from asgdns.lifecycle import dns as dns_lifecycle

_logger = logging.getLogger(__name__)
logging.getLogger().setLevel(os.environ.get("LOG_LEVEL", "INFO").upper())


def handler(event, context) -> None:
    config = HandlerConfig.from_env()
    _logger.info(
        "function=%s version=%s region=%s",
        getattr(context, "function_name", "unknown"),
        getattr(context, "function_version", "unknown"),
        config.region,
    )
    dns_lifecycle.handle_notification(
        event,
        autoscaling_client=utils.get_autoscaling_client(config.region),
        ec2_client=utils.get_ec2_client(config.region),
        route53_client=utils.get_route53_client(),
        config=config,
    )
