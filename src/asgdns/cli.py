"""Command-line interface for asg-dns.

This module provides the Click-based CLI for checking DNS tags and replaying
lifecycle notifications outside Lambda.
"""
import json
import sys
from dataclasses import replace

import click
from typing import Optional

from . import utils
from .config import HandlerConfig
from .console_output import ConsoleOutput
from .dns import format_tag_value, parse_tag_value
from .lifecycle.dns import handle_notification
from .lifecycle.notification import wrap_message
from .utils import ConfigurationError, DnsNotConfiguredError, TagValidationError


def _build_config(tag_key: Optional[str] = None, region: Optional[str] = None) -> HandlerConfig:
    config = HandlerConfig.from_env()
    overrides = {}
    if tag_key:
        overrides['tag_key'] = tag_key
    if region:
        overrides['region'] = region
    return replace(config, **overrides)


@click.group()
@click.version_option()
@click.pass_context
def cli(ctx):
    """asg-dns - Route53 records for Auto Scaling lifecycle events."""
    ctx.ensure_object(dict)
    ctx.obj['console'] = ConsoleOutput()


@cli.command('check-tag')
@click.argument('value')
@click.option('--tag-key', help='Scaling group tag key (defaults to DNS_TAG_KEY or Route53)')
@click.pass_context
def check_tag(ctx, value: str, tag_key: Optional[str]):
    """Parse a DNS tag VALUE and show the record it describes."""
    console = ctx.obj['console']

    try:
        config = _build_config(tag_key=tag_key)
        target = parse_tag_value(value, config)
    except DnsNotConfiguredError as e:
        console.print_warning(str(e))
        return
    except (TagValidationError, ConfigurationError) as e:
        console.print_error(str(e))
        sys.exit(1)

    console.print_target(target, format_tag_value(target, config))


@cli.command()
@click.argument('event_file', type=click.File('r'))
@click.option('--region', help='AWS region for Auto Scaling and EC2 (defaults to AWS_REGION)')
@click.option('--tag-key', help='Scaling group tag key (defaults to DNS_TAG_KEY or Route53)')
@click.option('--dry-run', is_flag=True, help='Build the Route53 change without submitting it')
@click.pass_context
def replay(ctx, event_file, region: Optional[str], tag_key: Optional[str], dry_run: bool):
    """Replay a lifecycle notification stored in EVENT_FILE.

    EVENT_FILE holds either a full SNS envelope or a bare lifecycle message.
    """
    console = ctx.obj['console']

    try:
        payload = json.load(event_file)
    except ValueError as e:
        console.print_error(f"Failed to read {event_file.name}: {str(e)}")
        sys.exit(1)

    if isinstance(payload, dict) and 'Records' not in payload:
        payload = wrap_message(payload)

    try:
        config = _build_config(tag_key=tag_key, region=region)
        result = handle_notification(
            payload,
            autoscaling_client=utils.get_autoscaling_client(config.region),
            ec2_client=utils.get_ec2_client(config.region),
            route53_client=utils.get_route53_client(),
            config=config,
            dry_run=dry_run,
        )
    except Exception as e:
        console.print_error(f"Failed to replay notification: {str(e)}")
        sys.exit(1)

    if result.change is not None:
        console.print_change(result.change)

    if not result.ok:
        console.print_error(result.message)
        sys.exit(1)
    if result.change is None:
        console.print_warning(result.message)
    else:
        console.print_success(result.message)


def main():
    """Entry point for the CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
