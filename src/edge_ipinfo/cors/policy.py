"""Origin policy variants and the immutable CORS policy value.

The origin policy is a closed sum type: a configured value is exactly one of
``AnyOrigin``, ``ReflectOrigin``, ``FixedOrigin`` or ``AllowlistOrigins``.
``parse_origin_policy`` is the only place that interprets the raw config
strings, so nothing downstream has to ask whether it holds a single origin or
a list of them.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field


WILDCARD = "*"
REFLECT_TOKEN = ":origin"
DEFAULT_MAX_AGE = 86400
DEFAULT_METHODS = ("GET", "HEAD", "POST", "OPTIONS", "PATCH")
DEFAULT_HEADERS = ("Content-Type",)


@dataclass(frozen=True, slots=True)
class AnyOrigin:
    """Allow every origin with the literal ``*`` token."""

    def __str__(self) -> str:
        return WILDCARD


@dataclass(frozen=True, slots=True)
class ReflectOrigin:
    """Mirror the caller's ``Origin`` header back."""

    def __str__(self) -> str:
        return REFLECT_TOKEN


@dataclass(frozen=True, slots=True)
class FixedOrigin:
    """Allow one exact origin."""

    origin: str

    def __str__(self) -> str:
        return self.origin


@dataclass(frozen=True, slots=True)
class AllowlistOrigins:
    """Allow any origin from a fixed set of exact origins."""

    origins: frozenset[str]

    def __str__(self) -> str:
        return ", ".join(sorted(self.origins))


OriginPolicy = AnyOrigin | ReflectOrigin | FixedOrigin | AllowlistOrigins


def parse_origin_policy(origins: str | Iterable[str]) -> OriginPolicy:
    """Build an origin policy from configured origin values.

    Args:
        origins: ``"*"``, ``":origin"``, one exact origin, or several

    Returns:
        The matching policy variant

    Raises:
        ValueError: If no origin is given, or ``*``/``:origin`` is combined
            with other values
    """
    values = [origins] if isinstance(origins, str) else list(origins)
    values = [value.strip() for value in values if value and value.strip()]

    if not values:
        raise ValueError("At least one CORS origin must be configured")

    special = {WILDCARD, REFLECT_TOKEN} & set(values)
    if special and len(values) > 1:
        token = special.pop()
        raise ValueError(f"CORS origin {token!r} cannot be combined with other origins")

    if values == [WILDCARD]:
        return AnyOrigin()
    if values == [REFLECT_TOKEN]:
        return ReflectOrigin()
    if len(values) == 1:
        return FixedOrigin(values[0])
    return AllowlistOrigins(frozenset(values))


@dataclass(frozen=True)
class CORSPolicy:
    """Static cross-origin policy, built once at startup and never mutated."""

    origin: OriginPolicy
    allow_credentials: bool = False
    allow_methods: tuple[str, ...] = DEFAULT_METHODS
    allow_headers: tuple[str, ...] = DEFAULT_HEADERS
    expose_headers: tuple[str, ...] = ()
    max_age: int | None = DEFAULT_MAX_AGE
    _allow_headers_lower: frozenset[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if isinstance(self.origin, AnyOrigin) and self.allow_credentials:
            raise ValueError(
                "CORS credentials cannot be enabled with the '*' origin policy; "
                "configure explicit origins or ':origin' instead"
            )
        object.__setattr__(
            self,
            "_allow_headers_lower",
            frozenset(header.lower() for header in self.allow_headers),
        )

    @classmethod
    def build(
        cls,
        origins: str | Iterable[str],
        *,
        allow_credentials: bool = False,
        allow_methods: Sequence[str] | None = None,
        allow_headers: Sequence[str] | None = None,
        expose_headers: Sequence[str] | None = None,
        max_age: int | None = DEFAULT_MAX_AGE,
    ) -> "CORSPolicy":
        """Build a policy from plain config values.

        Methods are upper-cased; header names keep their configured casing
        since they are echoed back verbatim.
        """
        if allow_methods is None:
            allow_methods = DEFAULT_METHODS
        if allow_headers is None:
            allow_headers = DEFAULT_HEADERS
        return cls(
            origin=parse_origin_policy(origins),
            allow_credentials=allow_credentials,
            allow_methods=tuple(method.upper() for method in allow_methods),
            allow_headers=tuple(allow_headers),
            expose_headers=tuple(expose_headers or ()),
            max_age=max_age,
        )

    @property
    def methods_value(self) -> str:
        return ", ".join(self.allow_methods)

    @property
    def headers_value(self) -> str:
        return ", ".join(self.allow_headers)

    @property
    def expose_value(self) -> str | None:
        return ", ".join(self.expose_headers) if self.expose_headers else None

    @property
    def max_age_value(self) -> str:
        return str(self.max_age if self.max_age is not None else DEFAULT_MAX_AGE)

    def allows_method(self, method: str) -> bool:
        """Exact, case-sensitive membership in the method allowlist."""
        return method in self.allow_methods

    def allows_header(self, header: str) -> bool:
        return header.lower() in self._allow_headers_lower
