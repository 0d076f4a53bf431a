"""Unit tests for asgdns utils module."""

from botocore.exceptions import ClientError, EndpointConnectionError

from asgdns import utils


class TestClientFactories:
    def test_regional_clients_use_region(self):
        assert utils.get_autoscaling_client("eu-west-1").meta.region_name == "eu-west-1"
        assert utils.get_ec2_client("ap-southeast-2").meta.region_name == "ap-southeast-2"

    def test_route53_client(self):
        assert utils.get_route53_client().meta.service_model.service_name == "route53"


class TestAWSClientError:
    def test_wrap_client_error(self):
        exc = ClientError({"Error": {"Code": "Throttling", "Message": "slow down"}}, "DescribeTags")

        error = utils.AWSClientError.wrap("describe_tags", exc)

        assert isinstance(error, utils.AsgDnsError)
        assert error.error_code == "Throttling"
        assert error.original_exception is exc
        assert str(error).startswith("describe_tags failed: ")

    def test_wrap_botocore_error_has_no_code(self):
        exc = EndpointConnectionError(endpoint_url="https://ec2.example")

        error = utils.AWSClientError.wrap("describe_instances", exc)

        assert error.error_code is None
        assert "describe_instances failed" in str(error)
