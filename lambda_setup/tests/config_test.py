"""
Test LambdaSettings, the Lambda client factory and error helpers
"""
import unittest
from botocore.exceptions import ClientError, EndpointConnectionError
from lambda_setup.clients.lambda_client import create_lambda_client
from lambda_setup.utils.config import LambdaSettings, DEFAULT_HANDLER, DEFAULT_RUNTIME
from lambda_setup.utils.errors import RemoteCallError, ValidationError, describe_boto_error


class LambdaSettingsTest(unittest.TestCase):
    def test_from_env_defaults(self):
        settings = LambdaSettings.from_env({"LAMBDA_ACCOUNT_ID": "111122223333",
                                            "LAMBDA_DEFAULT_BUCKET": "artifacts"})
        self.assertEqual(settings.region, "us-east-1")
        self.assertEqual(settings.role_arn, "arn:aws:iam::111122223333:role/lambda-role")
        self.assertEqual(settings.runtime, DEFAULT_RUNTIME)
        self.assertEqual(settings.handler, DEFAULT_HANDLER)

    def test_from_env_overrides(self):
        settings = LambdaSettings.from_env({
            "LAMBDA_ACCOUNT_ID": "111122223333",
            "LAMBDA_DEFAULT_BUCKET": "artifacts",
            "AWS_DEFAULT_REGION": "eu-central-1",
            "AWS_REGION": "eu-west-1",
            "LAMBDA_ROLE_ARN": "arn:aws:iam::111122223333:role/custom",
            "LAMBDA_RUNTIME": "python3.12",
            "LAMBDA_HANDLER": "app.handler",
        })
        self.assertEqual(settings.region, "eu-west-1")
        self.assertEqual(settings.role_arn, "arn:aws:iam::111122223333:role/custom")
        self.assertEqual(settings.runtime, "python3.12")
        self.assertEqual(settings.handler, "app.handler")

    def test_from_env_requires_account_and_bucket(self):
        with self.assertRaises(ValidationError):
            LambdaSettings.from_env({"LAMBDA_DEFAULT_BUCKET": "artifacts"})
        with self.assertRaises(ValidationError):
            LambdaSettings.from_env({"LAMBDA_ACCOUNT_ID": "111122223333"})

    def test_settings_are_immutable(self):
        settings = LambdaSettings("111122223333", "artifacts", "arn:aws:iam::111122223333:role/r")
        with self.assertRaises(AttributeError):
            settings.region = "eu-west-1"

    def test_rejects_empty_fields(self):
        with self.assertRaises(ValidationError):
            LambdaSettings("111122223333", "artifacts", "")

    def test_create_lambda_client(self):
        settings = LambdaSettings("111122223333", "artifacts", "arn:aws:iam::111122223333:role/r",
                                  region="eu-west-1")
        client = create_lambda_client(settings)
        self.assertEqual(client.meta.region_name, "eu-west-1")
        self.assertEqual(client.meta.service_model.service_name, "lambda")


class ErrorHelpersTest(unittest.TestCase):
    def test_client_error_message_verbatim(self):
        error = ClientError({"Error": {"Code": "ResourceNotFoundException", "Message": "Function not found"}},
                            "DeleteFunction")
        self.assertEqual(describe_boto_error(error), ("Function not found", "ResourceNotFoundException"))

        remote = RemoteCallError.from_boto(error, "DeleteFunction")
        self.assertEqual(remote.message, "Function not found")
        self.assertEqual(remote.code, "ResourceNotFoundException")

    def test_botocore_error(self):
        error = EndpointConnectionError(endpoint_url="https://lambda.us-east-1.amazonaws.com")
        message, code = describe_boto_error(error)
        self.assertIn("lambda.us-east-1.amazonaws.com", message)
        self.assertIsNone(code)


if __name__ == "__main__":
    unittest.main()
