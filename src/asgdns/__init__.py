"""
asg-dns - keep Route53 weighted records in step with Auto Scaling groups.

This package provides the Lambda-side handler for Auto Scaling lifecycle
notifications and a command-line interface for checking tags and replaying
notifications.
"""

__version__ = "0.1.0"

# Import key components for easier access
from .config import HandlerConfig
from .dns import DnsTarget, RecordChange, Route53Zone, format_tag_value, parse_tag_value
from .lifecycle.dns import HandlerResult, handle_notification
from .cli import cli as asgdns_cli

main = asgdns_cli

__all__ = [
    "HandlerConfig",
    "DnsTarget",
    "RecordChange",
    "Route53Zone",
    "format_tag_value",
    "parse_tag_value",
    "HandlerResult",
    "handle_notification",
    "asgdns_cli",
    "main",
]
