"""
Shared test setup: fake credentials, a moto-backed Lambda/S3/IAM account and
a stubbed Lambda client for asserting exact request shapes.
"""
import io
import json
import os
import unittest
import zipfile
import boto3
from botocore.config import Config
from botocore.response import StreamingBody
from botocore.stub import Stubber
from moto import mock_aws
from lambda_setup.utils.config import LambdaSettings

# Prevents accidental real AWS calls
os.environ["AWS_ACCESS_KEY_ID"] = "testing"
os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
os.environ["AWS_SESSION_TOKEN"] = "testing"
os.environ["AWS_DEFAULT_REGION"] = "us-east-1"

REGION = "us-east-1"
ACCOUNT_ID = "123456789012"  # moto's default account
BUCKET = "lambda-artifacts"
ROLE_ARN = f"arn:aws:iam::{ACCOUNT_ID}:role/lambda-role"

SETTINGS = LambdaSettings(account_id=ACCOUNT_ID,
                          default_bucket=BUCKET,
                          role_arn=ROLE_ARN,
                          region=REGION)

TRUST_POLICY = json.dumps({
    "Version": "2012-10-17",
    "Statement": [{
        "Effect": "Allow",
        "Principal": {"Service": "lambda.amazonaws.com"},
        "Action": "sts:AssumeRole"
    }]
})


def make_zip(filename: str = "index.js", source: str = "exports.handler = async (event) => event;\n") -> bytes:
    """Return an in-memory zip archive holding one source file"""
    zip_buffer = io.BytesIO()
    with zipfile.ZipFile(zip_buffer, "w", zipfile.ZIP_DEFLATED) as zipf:
        zipf.writestr(filename, source)
    zip_buffer.seek(0)
    return zip_buffer.read()


def streaming_body(data: bytes) -> StreamingBody:
    return StreamingBody(io.BytesIO(data), len(data))


class MotoLambdaTestCase(unittest.TestCase):
    """Starts moto, creates the execution role and uploads code.zip / layer.zip to BUCKET"""

    def setUp(self):
        self.mock = mock_aws()
        self.mock.start()
        self.addCleanup(self.mock.stop)

        self.lambda_client = boto3.client("lambda", region_name=REGION)
        self.s3_client = boto3.client("s3", region_name=REGION)
        iam_client = boto3.client("iam", region_name=REGION)
        iam_client.create_role(RoleName="lambda-role", AssumeRolePolicyDocument=TRUST_POLICY)

        self.s3_client.create_bucket(Bucket=BUCKET)
        self.s3_client.put_object(Bucket=BUCKET, Key="code.zip", Body=make_zip())
        self.s3_client.put_object(Bucket=BUCKET, Key="layer.zip",
                                  Body=make_zip("nodejs/utils.js", "module.exports = {};\n"))


class StubbedLambdaTestCase(unittest.TestCase):
    """Wraps a real Lambda client in botocore's Stubber; every queued call must be consumed

    Client-side parameter validation is off so requests reach the stub exactly as
    built (e.g. bucket "b1", below botocore's 3 character minimum).
    """

    def setUp(self):
        self.lambda_client = boto3.client("lambda", region_name=REGION,
                                          config=Config(parameter_validation=False))
        self.stubber = Stubber(self.lambda_client)
        self.stubber.activate()
        self.addCleanup(self.stubber.deactivate)

    def tearDown(self):
        self.stubber.assert_no_pending_responses()
