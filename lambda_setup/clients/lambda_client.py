"""
Builds the boto3 Lambda client the managers talk through.
"""
from typing import Optional
from botocore.client import BaseClient
from botocore.config import Config
from lambda_setup.utils.config import LambdaSettings
import boto3


def create_lambda_client(settings: LambdaSettings,
                         session: Optional[boto3.session.Session] = None,
                         config: Optional[Config] = None) -> BaseClient:
    """Create a Lambda client for the settings' region
    Docs:
        https://boto3.amazonaws.com/v1/documentation/api/latest/reference/core/session.html#boto3.session.Session.client
    Args:
        settings: supplies the region
        session: boto3 session holding credentials, defaults to a new session
        config: botocore Config, e.g. to set read_timeout for long invocations
    Return:
        a Lambda client; boto3 clients are safe to share across threads
    """
    session = session or boto3.session.Session()
    return session.client('lambda', region_name=settings.region, config=config)
