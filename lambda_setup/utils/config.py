"""
Account, region and deployment defaults shared by the Lambda managers.

Settings are immutable. To target another account, region or role, build a
new LambdaSettings and new managers from it.
"""
from dataclasses import dataclass
from typing import Mapping, Optional
from lambda_setup.utils.errors import ValidationError
import os

DEFAULT_REGION = 'us-east-1'
DEFAULT_RUNTIME = 'nodejs20.x'
DEFAULT_HANDLER = 'index.handler'
DEFAULT_ROLE_NAME = 'lambda-role'


@dataclass(frozen=True)
class LambdaSettings:
    account_id: str
    default_bucket: str
    role_arn: str
    region: str = DEFAULT_REGION
    runtime: str = DEFAULT_RUNTIME
    handler: str = DEFAULT_HANDLER

    def __post_init__(self):
        for name in ('account_id', 'default_bucket', 'role_arn', 'region', 'runtime', 'handler'):
            if not getattr(self, name):
                raise ValidationError(f'LambdaSettings.{name} must not be empty')

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'LambdaSettings':
        """Build settings from environment variables
        Args:
            environ: mapping to read from, defaults to os.environ
        Return:
            LambdaSettings; raises ValidationError when LAMBDA_ACCOUNT_ID or LAMBDA_DEFAULT_BUCKET is missing
        """
        env = os.environ if environ is None else environ

        account_id = env.get('LAMBDA_ACCOUNT_ID', '')
        default_bucket = env.get('LAMBDA_DEFAULT_BUCKET', '')
        if not account_id:
            raise ValidationError('LAMBDA_ACCOUNT_ID is not set')
        if not default_bucket:
            raise ValidationError('LAMBDA_DEFAULT_BUCKET is not set')

        region = env.get('AWS_REGION') or env.get('AWS_DEFAULT_REGION') or DEFAULT_REGION
        role_arn = env.get('LAMBDA_ROLE_ARN') or f'arn:aws:iam::{account_id}:role/{DEFAULT_ROLE_NAME}'

        return cls(account_id=account_id,
                   default_bucket=default_bucket,
                   role_arn=role_arn,
                   region=region,
                   runtime=env.get('LAMBDA_RUNTIME') or DEFAULT_RUNTIME,
                   handler=env.get('LAMBDA_HANDLER') or DEFAULT_HANDLER)
