"""Tests for the Route53 updater Lambda wrapper."""

from __future__ import annotations

import os
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from asgdns.config import HandlerConfig
from asgdns.utils import ConfigurationError
from lambdas.route53_updater import handler


class TestLambdaHandler:
    @patch("lambdas.route53_updater.dns_lifecycle.handle_notification")
    @patch("lambdas.route53_updater.utils.get_route53_client")
    @patch("lambdas.route53_updater.utils.get_ec2_client")
    @patch("lambdas.route53_updater.utils.get_autoscaling_client")
    def test_handler_delegates_to_lifecycle(
        self,
        mock_get_autoscaling,
        mock_get_ec2,
        mock_get_route53,
        mock_handle,
    ):
        autoscaling = MagicMock()
        ec2 = MagicMock()
        route53 = MagicMock()
        mock_get_autoscaling.return_value = autoscaling
        mock_get_ec2.return_value = ec2
        mock_get_route53.return_value = route53
        context = SimpleNamespace(function_name="asg-dns", function_version="$LATEST")

        event = {"Records": [{"Sns": {"Message": "{}"}}]}
        with patch.dict(os.environ, {"AWS_REGION": "eu-west-1", "DNS_TAG_KEY": "dns"}):
            assert handler(event, context) is None

        mock_get_autoscaling.assert_called_once_with("eu-west-1")
        mock_get_ec2.assert_called_once_with("eu-west-1")
        mock_get_route53.assert_called_once_with()
        mock_handle.assert_called_once_with(
            event,
            autoscaling_client=autoscaling,
            ec2_client=ec2,
            route53_client=route53,
            config=HandlerConfig(region="eu-west-1", tag_key="dns"),
        )

    @patch("lambdas.route53_updater.dns_lifecycle.handle_notification")
    @patch("lambdas.route53_updater.utils.get_route53_client")
    @patch("lambdas.route53_updater.utils.get_ec2_client")
    @patch("lambdas.route53_updater.utils.get_autoscaling_client")
    def test_handler_tolerates_missing_context(
        self,
        mock_get_autoscaling,
        mock_get_ec2,
        mock_get_route53,
        mock_handle,
    ):
        handler({"Records": []}, None)

        mock_handle.assert_called_once()

    @patch("lambdas.route53_updater.dns_lifecycle.handle_notification")
    def test_handler_raises_on_invalid_configuration(self, mock_handle):
        with patch.dict(os.environ, {"DNS_DEFAULT_TTL": "abc"}):
            with pytest.raises(ConfigurationError, match="DNS_DEFAULT_TTL"):
                handler({"Records": []}, None)

        mock_handle.assert_not_called()
