"""Common utilities for the asg-dns handler."""
from __future__ import annotations

from typing import Optional

import boto3
from botocore.client import BaseClient
from botocore.exceptions import BotoCoreError, ClientError


def get_autoscaling_client(region: Optional[str] = None) -> BaseClient:
    """Get an Auto Scaling client scoped to ``region``."""
    return boto3.client('autoscaling', region_name=region)


def get_ec2_client(region: Optional[str] = None) -> BaseClient:
    """Get an EC2 client scoped to ``region``."""
    return boto3.client('ec2', region_name=region)


def get_route53_client() -> BaseClient:
    """Get a Route53 client. Route53 is a global service."""
    return boto3.client('route53')


def client_error_code(exc: Exception) -> Optional[str]:
    """Return the AWS error code carried by a botocore exception, if any."""
    if isinstance(exc, ClientError):
        return exc.response.get('Error', {}).get('Code')
    return None


class AsgDnsError(Exception):
    """Base exception for asg-dns operations."""
    pass


class ConfigurationError(AsgDnsError):
    """Raised when the handler configuration is invalid."""
    pass


class NotificationParseError(AsgDnsError):
    """Raised when a notification envelope is malformed."""
    pass


class DnsNotConfiguredError(AsgDnsError):
    """Raised when a scaling group does not opt in to DNS management."""
    pass


class TagValidationError(AsgDnsError):
    """Raised when the DNS tag value of a scaling group is malformed."""
    pass


class RecordNotFoundError(AsgDnsError):
    """Raised when no existing record set matches an instance."""
    pass


class AWSClientError(AsgDnsError):
    """Raised when an AWS API call fails."""
    def __init__(self, message: str, error_code: str = None, original_exception: Exception = None):
        self.error_code = error_code
        self.original_exception = original_exception
        super().__init__(message)

    @classmethod
    def wrap(cls, operation: str, exc: Exception) -> "AWSClientError":
        """Build an error for a failed ``operation`` from a botocore exception."""
        return cls(f"{operation} failed: {exc}", error_code=client_error_code(exc), original_exception=exc)


BOTO_ERRORS = (ClientError, BotoCoreError)
