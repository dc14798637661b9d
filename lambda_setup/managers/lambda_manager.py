"""
Implement all Lambda functionalities
"""
from typing import Dict, Optional, Any, Sequence
from botocore.client import BaseClient
from botocore.exceptions import BotoCoreError, ClientError, ParamValidationError
from lambda_setup.interfaces.lambda_interface import LambdaFunctionInterface, LambdaDeploymentInterface, LambdaInvocationInterface
from lambda_setup.models.function_models import (
    CodeSource,
    FunctionConfig,
    FunctionIdentity,
    FunctionSummary,
    InvocationResult,
    LayerReference,
    VersionHistory,
    VersionRecord,
)
from lambda_setup.utils.config import LambdaSettings
from lambda_setup.utils.errors import (
    DecodeFailure,
    FunctionFault,
    RemoteCallError,
    TransportFailure,
    ValidationError,
    describe_boto_error,
)
from lambda_setup.utils.logger import logger
import base64
import binascii
import json

AWS_ERRORS = (ClientError, BotoCoreError)


def _reject_constant(name: str):
    raise ValueError(f"'{name}' is not valid JSON")


def _without_metadata(response: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in response.items() if k != 'ResponseMetadata'}


class LambdaFunctionManager(LambdaFunctionInterface):
    def __init__(self, lambda_client: BaseClient, settings: LambdaSettings):
        """Initialize Lambda function resources
        Args:
            lambda_client: the Lambda client, used to make calls to AWS
            settings: account, region, role and bucket defaults
        """
        self.client = lambda_client
        self.settings = settings

    def _bucket(self, bucket: Optional[str]) -> str:
        return self.settings.default_bucket if bucket is None else bucket

    def create_function(self,
                        output_zip: str,
                        func_name: str,
                        bucket: Optional[str] = None,
                        description: Optional[str] = None,
                        layers: Optional[Sequence[Any]] = None,
                        publish: bool = False) -> Dict[str, Any]:
        """Create new Lambda function from a zip already stored in S3
        Docs:
            https://boto3.amazonaws.com/v1/documentation/api/latest/reference/services/lambda/client/create_function.html
        Args:
            output_zip: S3 key of the zip file, used as given
            func_name: the name of the new function
            bucket: the bucket holding the zip, defaults to settings.default_bucket
            description: optional human-readable description
            layers: LayerReference values (or (name, version) pairs), attached in the given order
            publish: publish version 1 together with the function
        Return:
            the function configuration returned by Lambda; raises RemoteCallError on failure
        """
        config = FunctionConfig(function_name=func_name,
                                code=CodeSource(self._bucket(bucket), output_zip),
                                runtime=self.settings.runtime,
                                handler=self.settings.handler,
                                role=self.settings.role_arn,
                                description=description,
                                publish=publish,
                                layers=tuple(LayerReference.coerce(layer) for layer in layers or ()))

        logger.info(f'[INFO] creating Lambda function "{func_name}" from "{output_zip}" in bucket "{config.code.bucket}"')
        try:
            response = self.client.create_function(**config.to_params(self.settings.region, self.settings.account_id))
        except ParamValidationError as e:
            raise ValidationError(str(e)) from e
        except AWS_ERRORS as e:
            logger.error(f'[FAIL] cannot create Lambda function "{func_name}" ({e})')
            raise RemoteCallError.from_boto(e, 'CreateFunction') from e
        logger.info(f'[SUCCESS] created Lambda function "{func_name}"')
        return _without_metadata(response)

    def update_function(self,
                        output_zip: str,
                        func_name: str,
                        bucket: Optional[str] = None,
                        publish: bool = False) -> Dict[str, Any]:
        """Point an existing function at new code in S3
        Docs:
            https://boto3.amazonaws.com/v1/documentation/api/latest/reference/services/lambda/client/update_function_code.html
        Args:
            output_zip: path of the zip; only its file name is used as the S3 key
            func_name: the function to update
            bucket: the bucket holding the zip, defaults to settings.default_bucket
            publish: publish a new version after updating
        Return:
            the updated function configuration; raises RemoteCallError on failure
        """
        identity = FunctionIdentity(func_name)
        code = CodeSource(self._bucket(bucket), output_zip).with_basename()

        logger.info(f'[INFO] updating Lambda function "{func_name}" with "{code.key}" from bucket "{code.bucket}"')
        try:
            response = self.client.update_function_code(**identity.to_params(),
                                                        **code.to_code(),
                                                        Publish=publish)
        except ParamValidationError as e:
            raise ValidationError(str(e)) from e
        except AWS_ERRORS as e:
            logger.error(f'[FAIL] cannot update Lambda function "{func_name}" ({e})')
            raise RemoteCallError.from_boto(e, 'UpdateFunctionCode') from e
        logger.info(f'[SUCCESS] updated Lambda function "{func_name}"')
        return _without_metadata(response)

    def delete_function(self,
                        func_name: str,
                        qualifier: Optional[str] = None) -> None:
        """Deletes an existing Lambda function, or one of its versions
        Docs:
            https://boto3.amazonaws.com/v1/documentation/api/latest/reference/services/lambda/client/delete_function.html
        Args:
            func_name: the name of the function to delete
            qualifier: version to delete; the whole function is deleted when omitted
        Return:
            None; raises RemoteCallError if the function or version does not exist
        """
        identity = FunctionIdentity(func_name, qualifier)
        target = f'"{func_name}" with the qualifier "{qualifier}"' if qualifier else f'"{func_name}"'

        logger.info(f'[INFO] deleting Lambda function {target}')
        try:
            self.client.delete_function(**identity.to_params())
        except ParamValidationError as e:
            raise ValidationError(str(e)) from e
        except AWS_ERRORS as e:
            logger.error(f'[FAIL] cannot delete Lambda function {target} ({e})')
            raise RemoteCallError.from_boto(e, 'DeleteFunction') from e
        logger.info(f'[SUCCESS] deleted Lambda function {target}')

    def list_functions(self) -> Optional[Dict[str, FunctionSummary]]:
        """Return a summary of every function, across all versions
        Docs:
            https://boto3.amazonaws.com/v1/documentation/api/latest/reference/services/lambda/paginator/ListFunctions.html

        Entries sharing a name overwrite each other in the order Lambda returns
        them, so the last listed version wins. Use list_versions to see all of them.
        Return:
            {function name: FunctionSummary}, or None if failure
        """
        logger.info('[INFO] getting a list of Lambda functions')
        function_list = {}
        try:
            paginator = self.client.get_paginator('list_functions')
            for page in paginator.paginate(FunctionVersion='ALL'):
                for func in page.get('Functions', []):
                    function_list[func['FunctionName']] = FunctionSummary.from_record(func)
        except AWS_ERRORS as e:
            logger.error(f'[FAIL] cannot retrieve Lambda functions ({e})')
            return None
        logger.info(f'[SUCCESS] retrieved {len(function_list)} Lambda functions')
        return function_list

    def list_versions(self, func_name: str) -> Optional[VersionHistory]:
        """Return every version of a function, $LATEST included
        Docs:
            https://boto3.amazonaws.com/v1/documentation/api/latest/reference/services/lambda/paginator/ListVersionsByFunction.html
        Args:
            func_name: the function name
        Return:
            VersionHistory in the order Lambda returned it, or None if failure
        """
        identity = FunctionIdentity(func_name)

        logger.info(f'[INFO] getting a list of versions of Lambda function "{func_name}"')
        versions = []
        try:
            paginator = self.client.get_paginator('list_versions_by_function')
            for page in paginator.paginate(**identity.to_params()):
                versions.extend(VersionRecord.from_record(v) for v in page.get('Versions', []))
        except ParamValidationError as e:
            raise ValidationError(str(e)) from e
        except AWS_ERRORS as e:
            logger.error(f'[FAIL] cannot retrieve versions of "{func_name}" ({e})')
            return None
        logger.info(f'[SUCCESS] retrieved {len(versions)} versions of "{func_name}"')
        return VersionHistory(func_name, tuple(versions))

class LambdaDeploymentManager(LambdaDeploymentInterface):
    def __init__(self, lambda_client: BaseClient, settings: LambdaSettings):
        """Initialize Lambda deployment resources
        Args:
            lambda_client: the Lambda client, used to make calls to AWS
            settings: supplies the default bucket
        """
        self.client = lambda_client
        self.settings = settings

    def publish_layer(self,
                      output_zip: str,
                      layer_name: str,
                      bucket: Optional[str] = None,
                      description: Optional[str] = None) -> Dict[str, Any]:
        """Publish a new layer version from a zip stored in S3

        Every call creates a new version, even for identical content.
        Docs:
            https://boto3.amazonaws.com/v1/documentation/api/latest/reference/services/lambda/client/publish_layer_version.html
        Args:
            output_zip: S3 key of the zip file
            layer_name: the layer name
            bucket: the bucket holding the zip, defaults to settings.default_bucket
            description: optional description of this layer version
        Return:
            the layer version record (includes 'Version' and 'LayerVersionArn'); raises RemoteCallError on failure
        """
        if not isinstance(layer_name, str) or not layer_name.strip():
            raise ValidationError('layer name must be a non-empty string')
        code = CodeSource(self.settings.default_bucket if bucket is None else bucket, output_zip)

        params = {'LayerName': layer_name, 'Content': code.to_code()}
        if description is not None:
            params['Description'] = description

        logger.info(f'[INFO] publishing layer "{layer_name}" from "{output_zip}" in bucket "{code.bucket}"')
        try:
            response = self.client.publish_layer_version(**params)
        except ParamValidationError as e:
            raise ValidationError(str(e)) from e
        except AWS_ERRORS as e:
            logger.error(f'[FAIL] cannot publish layer "{layer_name}" ({e})')
            raise RemoteCallError.from_boto(e, 'PublishLayerVersion') from e
        logger.info(f'[SUCCESS] published version {response.get("Version")} of layer "{layer_name}"')
        return _without_metadata(response)

    def publish_new_version(self,
                            func_name: str,
                            description: Optional[str] = None) -> str:
        """Publishes a new version of the Lambda function
        Docs:
            https://boto3.amazonaws.com/v1/documentation/api/latest/reference/services/lambda/client/publish_version.html
        Args:
            func_name: the function name
            description: brief description of changes made
        Return:
            the published version number as a string; raises RemoteCallError on failure
        """
        params = FunctionIdentity(func_name).to_params()
        if description is not None:
            params['Description'] = description

        try:
            response = self.client.publish_version(**params)
        except ParamValidationError as e:
            raise ValidationError(str(e)) from e
        except AWS_ERRORS as e:
            logger.error(f'[FAIL] cannot publish new version of "{func_name}" ({e})')
            raise RemoteCallError.from_boto(e, 'PublishVersion') from e
        logger.info(f'[SUCCESS] published version {response["Version"]} of "{func_name}"')
        return response['Version']

class LambdaInvocationManager(LambdaInvocationInterface):
    def __init__(self, lambda_client: BaseClient):
        """Initialize Invocation Shared Resources
        Args:
            lambda_client: the Lambda client, used to make calls to AWS
        """
        self.client = lambda_client

    def invoke_function(self,
                        func_name: str,
                        payload: Any = None,
                        version: Optional[str] = None) -> Any:
        """Invokes/calls Lambda function and waits for its result
        Args:
            func_name: the name of the Lambda function
            payload: JSON-serializable input for the function ({} when None)
            version: version or alias to run; $LATEST when omitted
        Returns:
            the decoded JSON result; raises an InvocationError subclass on failure
        """
        return self.invoke_with_logs(func_name, payload, version).payload

    def invoke_with_logs(self,
                         func_name: str,
                         payload: Any = None,
                         version: Optional[str] = None) -> InvocationResult:
        """Invoke synchronously and keep the tail of the execution log
        Docs:
            https://boto3.amazonaws.com/v1/documentation/api/latest/reference/services/lambda/client/invoke.html
        Args:
            func_name: the name of the Lambda function
            payload: JSON-serializable input for the function ({} when None)
            version: version or alias to pin the call to
        Returns:
            InvocationResult
        Raises:
            ValidationError: bad name or payload that cannot be serialized
            TransportFailure: the request failed before the function produced a result
            FunctionFault: the function raised; the response carried FunctionError
            DecodeFailure: the response was not UTF-8 JSON
        """
        identity = FunctionIdentity(func_name, version)
        try:
            payload_bytes = json.dumps({} if payload is None else payload, allow_nan=False).encode('utf-8')
        except (TypeError, ValueError) as e:
            raise ValidationError(f'payload for "{func_name}" is not JSON serializable ({e})') from e

        if version:
            logger.info(f'[INFO] invoking "{func_name}" with the qualifier "{version}"')
        else:
            logger.info(f'[INFO] invoking "{func_name}"')

        try:
            response = self.client.invoke(**identity.to_params(),
                                          Payload=payload_bytes,
                                          InvocationType='RequestResponse',
                                          LogType='Tail')
            raw_payload = response['Payload'].read()
        except ParamValidationError as e:
            raise ValidationError(str(e)) from e
        except AWS_ERRORS as e:
            message, code = describe_boto_error(e)
            logger.error(f'[FAIL] cannot invoke "{func_name}" ({e})')
            raise TransportFailure(message, func_name, code) from e

        if response.get('FunctionError'):
            raise self._function_fault(func_name, response['FunctionError'], raw_payload)

        try:
            result = json.loads(raw_payload.decode('utf-8'), parse_constant=_reject_constant)
        except ValueError as e:
            logger.error(f'[FAIL] cannot decode response of "{func_name}": {raw_payload!r} ({e})')
            raise DecodeFailure(f'cannot decode response of "{func_name}" ({e})', func_name, raw_payload) from e

        logger.info(f'[SUCCESS] invoked "{func_name}"')
        return InvocationResult(payload=result,
                                status_code=response.get('StatusCode', 0),
                                executed_version=response.get('ExecutedVersion'),
                                log_tail=self._decode_log(response.get('LogResult')))

    @staticmethod
    def _function_fault(func_name: str, function_error: str, raw_payload: bytes) -> FunctionFault:
        message = raw_payload.decode('utf-8', errors='replace')
        try:
            detail = json.loads(message)
        except ValueError:
            detail = None

        error_type = function_error
        if isinstance(detail, dict):
            message = detail.get('errorMessage', message)
            error_type = detail.get('errorType', function_error)
        logger.error(f'[FAIL] "{func_name}" raised {error_type}: {message}')
        return FunctionFault(message, func_name, error_type, detail)

    @staticmethod
    def _decode_log(log_result: Optional[str]) -> str:
        """LogResult holds the last 4 KB of the execution log, base64 encoded"""
        if not log_result:
            return ''
        try:
            return base64.b64decode(log_result).decode('utf-8', errors='replace')
        except (binascii.Error, ValueError) as e:
            logger.warning(f'[WARNING] cannot decode log tail ({e})')
            return ''
