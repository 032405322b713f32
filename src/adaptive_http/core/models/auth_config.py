from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, HttpUrl, SecretStr


class AuthConfigModel(BaseModel):
    """Auth configuration as supplied by the calling feature.

    `type` selects the auth decorator, `properties` carries its settings.
    The property map is validated by the decorator itself when applied.
    """

    type: str
    properties: Dict[str, Any] = Field(default_factory=dict)

    model_config = {"frozen": True}


class BasicAuthProperties(BaseModel):
    username: str
    password: SecretStr


class ApiKeyProperties(BaseModel):
    api_key: SecretStr = Field(alias="apiKey")
    header_name: str = Field(alias="headerName", min_length=1)


class BearerTokenProperties(BaseModel):
    token: SecretStr


class ClientCredentialProperties(BaseModel):
    consumer_key: str = Field(alias="consumerKey")
    consumer_secret: SecretStr = Field(alias="consumerSecret")
    token_endpoint: HttpUrl = Field(
        alias="tokenEndpoint",
        description="OAuth2 token endpoint used for the client credentials grant",
    )
    scopes: Optional[str] = Field(
        default=None,
        description="Space separated scopes requested with the token",
    )
