"""
Defines interfaces for all AWS Lambda Functionalities.

Function Manager:
1. Create Function
2. Update Function Code
3. Delete Function
4. List Functions
5. List Function Versions

Deployment Manager:
1. Publish Layer Version
2. Publish New Version

Invocation:
1. Invoke Function
2. Invoke Function (with log tail)
"""
from typing import Protocol, Dict, Optional, Any, Sequence
from lambda_setup.models.function_models import FunctionSummary, VersionHistory, InvocationResult

class LambdaFunctionInterface(Protocol):
    def create_function(self,
                        output_zip: str,
                        func_name: str,
                        bucket: Optional[str] = None,
                        description: Optional[str] = None,
                        layers: Optional[Sequence[Any]] = None,
                        publish: bool = False) -> Dict[str, Any]:
        raise NotImplementedError

    def update_function(self,
                        output_zip: str,
                        func_name: str,
                        bucket: Optional[str] = None,
                        publish: bool = False) -> Dict[str, Any]:
        raise NotImplementedError

    def delete_function(self,
                        func_name: str,
                        qualifier: Optional[str] = None) -> None:
        raise NotImplementedError

    def list_functions(self) -> Optional[Dict[str, FunctionSummary]]:
        raise NotImplementedError

    def list_versions(self, func_name: str) -> Optional[VersionHistory]:
        raise NotImplementedError

class LambdaDeploymentInterface(Protocol):
    def publish_layer(self,
                      output_zip: str,
                      layer_name: str,
                      bucket: Optional[str] = None,
                      description: Optional[str] = None) -> Dict[str, Any]:
        raise NotImplementedError

    def publish_new_version(self,
                            func_name: str,
                            description: Optional[str] = None) -> str:
        raise NotImplementedError

class LambdaInvocationInterface(Protocol):
    def invoke_function(self,
                        func_name: str,
                        payload: Any = None,
                        version: Optional[str] = None) -> Any:
        raise NotImplementedError

    def invoke_with_logs(self,
                         func_name: str,
                         payload: Any = None,
                         version: Optional[str] = None) -> InvocationResult:
        raise NotImplementedError
