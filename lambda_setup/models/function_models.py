"""
Value types describing Lambda functions, their code and their layers.

Request builders here omit optional fields entirely instead of sending None or
empty values, since Lambda treats a missing Qualifier differently from an
empty one.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple
from lambda_setup.utils.errors import ValidationError
import posixpath


def _require(value: Any, label: str) -> None:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f'{label} must be a non-empty string')


@dataclass(frozen=True)
class FunctionIdentity:
    name: str
    qualifier: Optional[str] = None

    def __post_init__(self):
        _require(self.name, 'function name')
        if self.qualifier is not None:
            _require(self.qualifier, 'qualifier')

    def to_params(self) -> Dict[str, str]:
        params = {'FunctionName': self.name}
        if self.qualifier is not None:
            params['Qualifier'] = self.qualifier
        return params


@dataclass(frozen=True)
class CodeSource:
    bucket: str
    key: str

    def __post_init__(self):
        _require(self.bucket, 'bucket')
        _require(self.key, 'S3 key')

    def with_basename(self) -> 'CodeSource':
        """Return a copy whose key is the file name only ('dist/code.zip' -> 'code.zip')"""
        return CodeSource(self.bucket, posixpath.basename(self.key.replace('\\', '/')))

    def to_code(self) -> Dict[str, str]:
        return {'S3Bucket': self.bucket, 'S3Key': self.key}


def _as_version(value: Any) -> Any:
    if isinstance(value, str) and value.strip().isdecimal():
        return int(value)
    return value


@dataclass(frozen=True)
class LayerReference:
    layer_name: str
    layer_version: int

    def __post_init__(self):
        _require(self.layer_name, 'layer name')
        if isinstance(self.layer_version, bool) or not isinstance(self.layer_version, int) or self.layer_version < 1:
            raise ValidationError(f'layer version must be a positive integer, got {self.layer_version!r}')

    @classmethod
    def coerce(cls, value: Any) -> 'LayerReference':
        """Accept a LayerReference, a (name, version) pair or a {'layerName', 'layerVersion'} dict

        Versions given as strings of digits (e.g. from command-line options) are converted to int.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, dict):
            try:
                return cls(value['layerName'], _as_version(value['layerVersion']))
            except KeyError as e:
                raise ValidationError(f'layer reference is missing {e}') from e
        if isinstance(value, (tuple, list)) and len(value) == 2:
            return cls(value[0], _as_version(value[1]))
        raise ValidationError(f'cannot interpret {value!r} as a layer reference')

    def to_arn(self, region: str, account_id: str) -> str:
        return f'arn:aws:lambda:{region}:{account_id}:layer:{self.layer_name}:{self.layer_version}'


@dataclass(frozen=True)
class FunctionConfig:
    """Everything needed for one CreateFunction request; never stored"""
    function_name: str
    code: CodeSource
    runtime: str
    handler: str
    role: str
    description: Optional[str] = None
    publish: bool = False
    layers: Tuple[LayerReference, ...] = ()

    def __post_init__(self):
        _require(self.function_name, 'function name')

    def to_params(self, region: str, account_id: str) -> Dict[str, Any]:
        """Build create_function keyword arguments
        Args:
            region: region used in layer ARNs
            account_id: account that owns the layers
        Return:
            the request, without Description when absent and without Layers when empty
        """
        params = {
            'FunctionName': self.function_name,
            'Runtime': self.runtime,
            'Handler': self.handler,
            'Role': self.role,
            'Code': self.code.to_code(),
            'Publish': self.publish,
        }
        if self.description is not None:
            params['Description'] = self.description
        if self.layers:
            # Order matters: later layers override earlier ones at runtime
            params['Layers'] = [layer.to_arn(region, account_id) for layer in self.layers]
        return params


@dataclass(frozen=True)
class FunctionSummary:
    description: str
    version: str
    last_modified: str

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> 'FunctionSummary':
        return cls(description=record.get('Description', ''),
                   version=record.get('Version', ''),
                   last_modified=str(record.get('LastModified', '')))


@dataclass(frozen=True)
class VersionRecord:
    version: str
    description: str = ''
    last_modified: str = ''
    function_arn: str = ''
    code_sha256: str = ''

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> 'VersionRecord':
        return cls(version=record.get('Version', ''),
                   description=record.get('Description', ''),
                   last_modified=str(record.get('LastModified', '')),
                   function_arn=record.get('FunctionArn', ''),
                   code_sha256=record.get('CodeSha256', ''))


@dataclass(frozen=True)
class VersionHistory:
    function_name: str
    versions: Tuple[VersionRecord, ...] = ()

    def __iter__(self):
        return iter(self.versions)

    def __len__(self) -> int:
        return len(self.versions)

    def published(self) -> List[VersionRecord]:
        """Numbered versions only ($LATEST excluded), in the order Lambda returned them"""
        return [v for v in self.versions if v.version != '$LATEST']


@dataclass(frozen=True)
class InvocationResult:
    payload: Any
    status_code: int
    executed_version: Optional[str] = None
    log_tail: str = field(default='', repr=False)
