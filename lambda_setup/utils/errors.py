"""
Errors raised by the Lambda managers.

Management calls (create, update, delete, publish) raise RemoteCallError.
Invocations raise a subclass of InvocationError so callers can tell a
transport problem from a fault inside the function or an unreadable response.
"""
from typing import Optional, Union
from botocore.exceptions import BotoCoreError, ClientError


class LambdaSetupError(Exception):
    """Base class for every error raised by lambda_setup"""


class ValidationError(LambdaSetupError):
    """Input rejected before any call to AWS, by lambda_setup or by botocore's own parameter checks"""


class RemoteCallError(LambdaSetupError):
    def __init__(self,
                 message: str,
                 operation: Optional[str] = None,
                 code: Optional[str] = None):
        """Lambda rejected or failed to complete a management call
        Args:
            message: the platform's error message, verbatim
            operation: the Lambda API operation that failed (e.g. 'CreateFunction')
            code: the AWS error code, if one was returned
        """
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.code = code

    @classmethod
    def from_boto(cls,
                  error: Union[ClientError, BotoCoreError],
                  operation: str) -> 'RemoteCallError':
        message, code = describe_boto_error(error)
        return cls(message, operation=operation, code=code)


class InvocationError(LambdaSetupError):
    def __init__(self, message: str, func_name: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.func_name = func_name


class TransportFailure(InvocationError):
    def __init__(self,
                 message: str,
                 func_name: Optional[str] = None,
                 code: Optional[str] = None):
        """The invoke request never produced a function result (network, throttling, missing function...)"""
        super().__init__(message, func_name)
        self.code = code


class FunctionFault(InvocationError):
    def __init__(self,
                 message: str,
                 func_name: Optional[str] = None,
                 error_type: Optional[str] = None,
                 detail: Optional[object] = None):
        """The function ran and reported an error (response carried FunctionError)
        Args:
            message: the errorMessage reported by the function, or the raw response text
            error_type: the errorType reported by the function ('Unhandled' if none)
            detail: the decoded error document, when it could be decoded
        """
        super().__init__(message, func_name)
        self.error_type = error_type
        self.detail = detail


class DecodeFailure(InvocationError):
    def __init__(self,
                 message: str,
                 func_name: Optional[str] = None,
                 raw: bytes = b''):
        """The response payload was not UTF-8 encoded JSON"""
        super().__init__(message, func_name)
        self.raw = raw


def describe_boto_error(error: Union[ClientError, BotoCoreError]):
    """Extract (message, code) from a botocore exception
    Return:
        the platform message verbatim and the error code (None for BotoCoreError)
    """
    if isinstance(error, ClientError):
        details = error.response.get('Error', {})
        return details.get('Message') or str(error), details.get('Code')
    return str(error), None
