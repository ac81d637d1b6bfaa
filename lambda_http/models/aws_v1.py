# lambda_http/models/aws_v1.py

"""
Pydantic models for AWS API Gateway v1 (REST API) proxy integration payloads.

Reference: https://docs.aws.amazon.com/apigateway/latest/developerguide/set-up-lambda-proxy-integrations.html#api-gateway-simple-proxy-for-lambda-input-format

APIGatewayProxyEvent is decoded from the invocation payload; APIGatewayProxyResponse
is the envelope handed back to the gateway.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _empty_if_null(value: Any) -> Any:
    # JSON null decodes like a missing field.
    if value is None:
        return {}
    if isinstance(value, dict):
        return {k: ("" if v is None else v) for k, v in value.items()}
    return value


class ApiGatewayIdentity(BaseModel):
    """API Gateway Identity object."""

    sourceIp: str = ""
    userAgent: Optional[str] = None

    model_config = ConfigDict(frozen=True, extra="allow")


class ApiGatewayRequestContext(BaseModel):
    """API Gateway Request Context object."""

    identity: ApiGatewayIdentity = Field(default_factory=ApiGatewayIdentity)
    requestId: str = ""
    stage: str = ""
    path: Optional[str] = None
    protocol: Optional[str] = None

    model_config = ConfigDict(frozen=True, extra="allow")

    @field_validator("identity", mode="before")
    @classmethod
    def _identity_null(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("requestId", "stage", mode="before")
    @classmethod
    def _str_null(cls, value: Any) -> Any:
        return "" if value is None else value


class APIGatewayProxyEvent(BaseModel):
    """
    AWS API Gateway Proxy Integration (v1) Event Structure

    Decoded once per invocation and never mutated afterwards. Missing fields
    take their zero value so that minimal events such as
    {"httpMethod": "GET", "path": "/"} are accepted.
    """

    resource: str = ""
    path: str = ""
    httpMethod: str = ""
    headers: Dict[str, str] = Field(default_factory=dict)
    multiValueHeaders: Dict[str, List[str]] = Field(default_factory=dict)
    queryStringParameters: Dict[str, str] = Field(default_factory=dict)
    multiValueQueryStringParameters: Dict[str, List[str]] = Field(default_factory=dict)
    pathParameters: Dict[str, str] = Field(default_factory=dict)
    stageVariables: Dict[str, str] = Field(default_factory=dict)
    requestContext: ApiGatewayRequestContext = Field(default_factory=ApiGatewayRequestContext)
    body: str = ""
    isBase64Encoded: bool = False

    model_config = ConfigDict(frozen=True, extra="ignore")

    @field_validator(
        "headers",
        "queryStringParameters",
        "pathParameters",
        "stageVariables",
        mode="before",
    )
    @classmethod
    def _maps(cls, value: Any) -> Any:
        return _empty_if_null(value)

    @field_validator("multiValueHeaders", "multiValueQueryStringParameters", mode="before")
    @classmethod
    def _multi_maps(cls, value: Any) -> Any:
        if value is None:
            return {}
        if isinstance(value, dict):
            return {k: ([] if v is None else v) for k, v in value.items()}
        return value

    @field_validator("requestContext", mode="before")
    @classmethod
    def _context_null(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("resource", "path", "httpMethod", "body", mode="before")
    @classmethod
    def _str_null(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("isBase64Encoded", mode="before")
    @classmethod
    def _bool_null(cls, value: Any) -> Any:
        return False if value is None else value

    @property
    def stage(self) -> str:
        return self.requestContext.stage

    @property
    def host(self) -> str:
        """Value of the Host header, matched case-insensitively."""
        if "Host" in self.headers:
            return self.headers["Host"]
        for name, value in self.headers.items():
            if name.lower() == "host":
                return value
        return ""


class APIGatewayProxyResponse(BaseModel):
    """
    AWS API Gateway Proxy Integration (v1) Response Structure

    The body is always base64 text. Use model_dump_json(exclude_none=True)
    so that multiValueHeaders is only emitted when populated.
    """

    statusCode: int
    headers: Dict[str, str] = Field(default_factory=dict)
    multiValueHeaders: Optional[Dict[str, List[str]]] = None
    body: str = ""
    isBase64Encoded: bool = True
