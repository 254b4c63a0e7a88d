from typing import Any

from botocore.client import BaseClient


# Type aliases for Python dictionaries
type LambdaEvent = dict[str, Any]
type LambdaContext = Any
type LambdaResponse = dict[str, Any]
type LambdaConfiguration = dict[str, Any]
type RecordMapping = dict[str, str]

# Type aliases for boto3 clients
type AppConfigDataClient = BaseClient
type S3Client = BaseClient
