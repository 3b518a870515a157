"""CORS configuration settings."""

from pydantic import BaseModel, Field, field_validator, model_validator

from edge_ipinfo.core.validators import parse_comma_separated
from edge_ipinfo.cors.policy import (
    DEFAULT_HEADERS,
    DEFAULT_MAX_AGE,
    DEFAULT_METHODS,
    AnyOrigin,
    CORSPolicy,
    OriginPolicy,
    parse_origin_policy,
)


class CORSSettings(BaseModel):
    """CORS-specific configuration settings.

    ``origins`` accepts ``"*"`` (any origin), ``":origin"`` (reflect the
    caller), a single exact origin, or a list of exact origins. Enabling
    credentials together with ``"*"`` is rejected when the settings load.
    """

    origins: list[str] = Field(
        default_factory=lambda: ["https://example.com", "https://example.net"],
        description="Allowed origins: '*', ':origin', one origin or an allowlist",
    )

    credentials: bool = Field(
        default=False,
        description="Send Access-Control-Allow-Credentials: true for concrete origins",
    )

    methods: list[str] = Field(
        default_factory=lambda: list(DEFAULT_METHODS),
        description="Allowed HTTP methods, also the global method gate",
    )

    headers: list[str] = Field(
        default_factory=lambda: list(DEFAULT_HEADERS),
        description="Request headers a preflight may ask for",
    )

    expose_headers: list[str] = Field(
        default_factory=list,
        description="Response headers exposed to browser scripts",
    )

    max_age: int | None = Field(
        default=DEFAULT_MAX_AGE,
        description="Preflight cache lifetime in seconds (86400 when unset)",
        ge=0,
    )

    @field_validator("origins", "headers", "expose_headers", mode="before")
    @classmethod
    def split_list_values(cls, v: str | list[str]) -> list[str]:
        """Parse header and origin lists from string or list."""
        return parse_comma_separated(v)

    @field_validator("methods", mode="before")
    @classmethod
    def validate_cors_methods(cls, v: str | list[str]) -> list[str]:
        """Parse CORS methods from string or list."""
        return [method.upper() for method in parse_comma_separated(v)]

    @model_validator(mode="after")
    def validate_origin_policy(self) -> "CORSSettings":
        """Reject malformed origin lists and wildcard-with-credentials."""
        policy = parse_origin_policy(self.origins)
        if isinstance(policy, AnyOrigin) and self.credentials:
            raise ValueError(
                "cors.credentials cannot be true when cors.origins is '*'; "
                "browsers reject credentialed wildcard responses"
            )
        return self

    @property
    def origin_policy(self) -> OriginPolicy:
        return parse_origin_policy(self.origins)

    def to_policy(self) -> CORSPolicy:
        """Freeze these settings into the engine's policy value."""
        return CORSPolicy.build(
            self.origins,
            allow_credentials=self.credentials,
            allow_methods=self.methods,
            allow_headers=self.headers,
            expose_headers=self.expose_headers,
            max_age=self.max_age,
        )
