"""Canonical Pydantic models shared across all specmine modules.

This is the single source of truth for data shapes in the project. Every other
module imports from here rather than defining its own models. The models fall
into two groups:

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`RequestConfig`, :class:`CacheConfig`, :class:`OutputConfig`, and
    :class:`GlobalConfig`.

**Definition models** -- produced by the extraction engine and serialised as
the final artifact:
    :class:`ParameterLocation`, :class:`Parameter`, :class:`ResponseType`,
    :class:`Operation`, :class:`Model`, :class:`Definition`, plus
    :class:`DocumentRef` (which page to read) and :class:`CuratedOverrides`
    (hand-fixed records that win over extraction).

Definition models use snake_case attribute names with camelCase aliases for
the JSON artifact (``baseUri``, ``responseNote``, ``responseTypes``). They are
dumped with ``exclude_none=True`` so that unknown values (an unparseable
default, an unstated ``required``) are omitted rather than written as
``null``.
"""

from __future__ import annotations

import copy
import enum
import json
from typing import Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PrivateAttr,
    ValidatorFunctionWrapHandler,
    field_validator,
)


# --- Configuration ---


class RequestConfig(BaseModel):
    """HTTP settings used when fetching documentation pages."""

    timeout: int = Field(default=30, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")
    max_retries: int = Field(default=3, description="Max retry attempts")
    user_agent: str = Field(
        default="specmine (+https://github.com/specmine/specmine)",
        description="User-Agent header sent with every page request",
    )


class CacheConfig(BaseModel):
    """On-disk page cache settings stored in :class:`GlobalConfig`."""

    enabled: bool = Field(default=True, description="Enable page caching")
    ttl_seconds: int = Field(default=86400, description="Cache TTL in seconds")


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`GlobalConfig`."""

    format: str = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/specmine/config.json``.

    Loaded and saved by :func:`~specmine.config.load_global_config` and
    :func:`~specmine.config.save_global_config`. Fields here have the
    lowest precedence and can be overridden by project config, environment
    variables, or CLI flags. See :func:`~specmine.config.resolve_config`
    for the full precedence chain.
    """

    base_uri: str = Field(
        default="https://discord.com/api",
        description="Base URI written into the definition",
    )
    version: int = Field(default=10, description="API version written into the definition")
    docs_url: str = Field(
        default="https://discord.com/developers/docs",
        description="Root of the documentation site; also used for deep links",
    )
    url_template: Optional[str] = Field(
        default=None,
        description="Page URL template with {docs_url}, {section} and {name} placeholders",
    )
    source: Optional[str] = Field(
        default=None,
        description="Local directory holding pages; replaces HTTP fetching when set",
    )
    document_format: str = Field(
        default="auto", description="Page format: auto, html, markdown"
    )
    resources: list[str] = Field(
        default_factory=lambda: ["channel", "guild", "invite", "user", "voice", "webhook"]
    )
    topics: list[str] = Field(default_factory=lambda: ["gateway", "oauth2"])
    snowflakes: list[str] = Field(
        default_factory=lambda: [
            "channel.id",
            "guild.id",
            "message.id",
            "user.id",
            "webhook.id",
            "emoji.id",
            "role.id",
            "integration.id",
            "overwrite.id",
            "application.id",
        ],
        description="URL tokens typed as snowflake identifiers",
    )
    overrides: Optional[str] = Field(
        default=None, description="Path to the curated override file or directory"
    )
    build_timeout: int = Field(
        default=120, description="Seconds allowed for a whole definition build"
    )
    request: RequestConfig = Field(default_factory=RequestConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)


# --- Documentation pages ---


class DocumentRef(BaseModel):
    """One documentation page, named by resource/topic and site section.

    The documentation site keeps resources (``channel``, ``guild``) and
    topics (``gateway``, ``oauth2``) under separate URL namespaces, so the
    section is part of the page identity.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    section: str = "resources"

    @property
    def path(self) -> str:
        """Site-relative page path, e.g. ``resources/channel``."""
        return f"{self.section}/{self.name}"


# --- Definition ---


class ParameterLocation(str, enum.Enum):
    """Where an operation parameter is sent."""

    URI = "uri"
    QUERY = "query"
    JSON = "json"


class Parameter(BaseModel):
    """A single operation parameter or model property.

    Model properties use the same shape with ``location`` left unset. URI
    parameters are always ``required=True`` and never carry a ``default``.
    """

    model_config = ConfigDict(extra="allow", use_enum_values=True)

    type: Optional[str] = None
    location: Optional[ParameterLocation] = None
    description: Optional[str] = None
    default: Any = None
    required: Optional[bool] = None
    nullable: Optional[bool] = None


class ResponseType(BaseModel):
    """A typed reference found in an operation's "Returns ..." sentence."""

    model_config = ConfigDict(extra="allow")

    name: str
    type: str


class Operation(BaseModel):
    """One documented HTTP endpoint.

    Every field is optional so that curated override records authored by
    hand validate as-is; records produced by
    :func:`~specmine.extraction.operations.build_operation` always fill
    ``key``, ``name``, ``resource``, ``method``, ``url``, ``description``,
    ``parameters`` and ``link``. ``deprecated`` is only set when the
    documentation marks the operation as deprecated.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    key: Optional[str] = None
    name: Optional[str] = None
    resource: Optional[str] = None
    method: Optional[str] = None
    url: Optional[str] = None
    description: Optional[str] = None
    response_note: Optional[str] = Field(default=None, alias="responseNote")
    response_types: Optional[list[ResponseType]] = Field(
        default=None, alias="responseTypes"
    )
    parameters: Optional[dict[str, Parameter]] = None
    deprecated: Optional[bool] = None
    link: Optional[str] = None

    _raw: Optional[dict[str, Any]] = PrivateAttr(default=None)


class Model(BaseModel):
    """A named object schema documented through a property table."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    key: Optional[str] = None
    resource: Optional[str] = None
    description: Optional[str] = None
    type: Optional[str] = None
    properties: Optional[dict[str, Parameter]] = None
    link: Optional[str] = None

    _raw: Optional[dict[str, Any]] = PrivateAttr(default=None)


class CuratedOverrides(BaseModel):
    """Hand-authored records keyed by resource, then by operation/model key.

    Loaded by :func:`~specmine.config.load_overrides` and handed to the
    :class:`~specmine.extraction.assembler.DefinitionAssembler`, which
    seeds the definition with them so they always win over extraction.

    Each record is validated, but keeps a copy of the mapping it was read
    from; :meth:`Definition.to_dict` writes that mapping back unchanged.
    """

    operations: dict[str, dict[str, Operation]] = Field(default_factory=dict)
    models: dict[str, dict[str, Model]] = Field(default_factory=dict)

    @field_validator("operations", "models", mode="wrap")
    @classmethod
    def _keep_raw(cls, value: Any, handler: ValidatorFunctionWrapHandler) -> Any:
        records = handler(value)
        if not isinstance(value, dict):
            return records
        for resource, raw_records in value.items():
            if not isinstance(raw_records, dict):
                continue
            for key, raw in raw_records.items():
                if isinstance(raw, dict):
                    records[resource][key]._raw = copy.deepcopy(raw)
        return records


class Definition(BaseModel):
    """Root aggregate: every operation and model, grouped by resource.

    Keys keep first-merge order, so serialising the same extraction twice
    yields identical JSON.
    """

    model_config = ConfigDict(populate_by_name=True)

    base_uri: str = Field(alias="baseUri")
    version: int
    operations: dict[str, dict[str, Operation]] = Field(default_factory=dict)
    models: dict[str, dict[str, Model]] = Field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-ready dict with aliases applied and ``None`` fields dropped.

        Curated records are the exception: they are written exactly as they
        were authored.
        """
        data = self.model_dump(mode="json", by_alias=True, exclude_none=True)
        for group in ("operations", "models"):
            for resource, records in getattr(self, group).items():
                for key, record in records.items():
                    if record._raw is not None:
                        data[group][resource][key] = copy.deepcopy(record._raw)
        return data

    def to_json(self, indent: int = 4) -> str:
        """Serialise the definition to a JSON string."""
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)
