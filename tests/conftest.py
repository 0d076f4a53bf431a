"""Pytest configuration and fixtures for asg-dns tests."""

import json
import os

import boto3
import pytest
from moto import mock_aws

LAUNCH = "autoscaling:EC2_INSTANCE_LAUNCH"
TERMINATE = "autoscaling:EC2_INSTANCE_TERMINATE"


@pytest.fixture(autouse=True)
def aws_credentials():
    """Mocked AWS Credentials for moto."""
    os.environ["AWS_ACCESS_KEY_ID"] = "testing"
    os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
    os.environ["AWS_SECURITY_TOKEN"] = "testing"
    os.environ["AWS_SESSION_TOKEN"] = "testing"
    os.environ["AWS_DEFAULT_REGION"] = "us-east-1"


@pytest.fixture
def mock_route53():
    """Mock Route53 client."""
    with mock_aws():
        yield boto3.client("route53", region_name="us-east-1")


@pytest.fixture
def sns_event():
    """Factory for SNS envelopes carrying an Auto Scaling lifecycle message."""

    def _build(event=LAUNCH, group="web-asg", instance_id="i-0123456789abcdef0", **extra):
        message = {
            "Event": event,
            "AutoScalingGroupName": group,
            "EC2InstanceId": instance_id,
            "Cause": "At 2026-10-19T10:00:00Z an instance was started in response to a difference between desired and actual capacity",
            **extra,
        }
        return {
            "Records": [
                {
                    "EventSource": "aws:sns",
                    "EventVersion": "1.0",
                    "Sns": {"Type": "Notification", "Message": json.dumps(message)},
                }
            ]
        }

    return _build
