"""Representation of the arguments of a Helm Release owned by a chart.

A chart component accepts a strongly typed set of arguments. The Helm specific
arguments live in `ReleaseTypeArgs`, nested under the `helmOptions` property
of a chart's `ChartArgs`, and are projected onto `ReleaseArgs` when the child
Release is created.

Every field carries its canonical external property name as a mashumaro
alias. That alias is the only name used when reading raw inputs or writing
values, so renaming a Python attribute never changes the wire format.
"""

from collections.abc import Callable
from dataclasses import dataclass, field, fields, replace
import logging
from typing import Any, Optional

from mashumaro import DataClassDictMixin, field_options
from mashumaro.codecs.yaml import yaml_decode, yaml_encode
from mashumaro.config import BaseConfig

__all__ = [
    "FIELD_HELM_STATUS_OUTPUT",
    "FIELD_HELM_OPTIONS_INPUT",
    "BaseArgs",
    "RepositoryOpts",
    "ReleaseStatus",
    "ReleaseTypeArgs",
    "ReleaseArgs",
    "ChartArgs",
    "RELEASE_ARGS_PROJECTION",
    "UNPROJECTED_FIELDS",
    "property_names",
    "to_release_args",
]

_LOGGER = logging.getLogger(__name__)


FIELD_HELM_STATUS_OUTPUT = "status"
"""Name of the chart output holding the child Release."""

FIELD_HELM_OPTIONS_INPUT = "helmOptions"
"""Property holding the nested release args, never written to chart values."""


@dataclass
class BaseArgs(DataClassDictMixin):
    """Base class for all typed argument objects."""

    @classmethod
    def parse_yaml(cls, content: str) -> "BaseArgs":
        """Parse serialized args."""
        return yaml_decode(content, cls)

    def yaml(self) -> str:
        """Return a YAML string representation keyed by property name."""
        return yaml_encode(self, self.__class__)  # type: ignore[return-value]

    class Config(BaseConfig):
        omit_none = True
        serialize_by_alias = True


def property_names(cls: type[Any]) -> dict[str, str]:
    """Return the table of canonical property name to field name for `cls`.

    The canonical name is the mashumaro alias of a field, or the field name
    when no alias is declared.
    """
    table: dict[str, str] = {}
    for f in fields(cls):
        name = f.metadata.get("alias") or f.name
        if (existing := table.get(name)) is not None:
            raise ValueError(
                f"{cls.__name__} fields '{existing}' and '{f.name}' both map to '{name}'"
            )
        table[name] = f.name
    return table


@dataclass
class RepositoryOpts(BaseArgs):
    """Options for the Helm chart repository."""

    ca_file: Optional[str] = field(metadata=field_options(alias="caFile"), default=None)
    cert_file: Optional[str] = field(
        metadata=field_options(alias="certFile"), default=None
    )
    key_file: Optional[str] = field(
        metadata=field_options(alias="keyFile"), default=None
    )
    password: Optional[str] = None
    repo: Optional[str] = None
    """Repository URL where the chart is located."""
    username: Optional[str] = None


@dataclass
class ReleaseStatus(BaseArgs):
    """Status of a deployed Helm Release."""

    app_version: Optional[str] = field(
        metadata=field_options(alias="appVersion"), default=None
    )
    chart: Optional[str] = None
    name: Optional[str] = None
    namespace: Optional[str] = None
    revision: Optional[int] = None
    status: str = ""
    """Release state, e.g. `deployed` or `failed`."""
    version: Optional[str] = None


@dataclass
class ReleaseTypeArgs(BaseArgs):
    """The Helm specific arguments of a chart component."""

    atomic: Optional[bool] = None
    """Purge the chart when installation fails."""

    chart: Optional[str] = None
    """Chart name to install, defaulted from the owning chart component."""

    cleanup_on_fail: Optional[bool] = field(
        metadata=field_options(alias="cleanupOnFail"), default=None
    )
    """Delete resources created by a failed upgrade."""

    create_namespace: Optional[bool] = field(
        metadata=field_options(alias="createNamespace"), default=None
    )

    dependency_update: Optional[bool] = field(
        metadata=field_options(alias="dependencyUpdate"), default=None
    )

    description: Optional[str] = None

    devel: Optional[bool] = None
    """Also consider development chart versions."""

    disable_crd_hooks: Optional[bool] = field(
        metadata=field_options(alias="disableCRDHooks"), default=None
    )

    disable_openapi_validation: Optional[bool] = field(
        metadata=field_options(alias="disableOpenapiValidation"), default=None
    )

    disable_webhooks: Optional[bool] = field(
        metadata=field_options(alias="disableWebhooks"), default=None
    )

    force_update: Optional[bool] = field(
        metadata=field_options(alias="forceUpdate"), default=None
    )

    keyring: Optional[str] = None
    """Public keys used when `verify` is set."""

    lint: Optional[bool] = None

    manifest: Optional[dict[str, Any]] = None
    """The rendered manifests."""

    max_history: Optional[int] = field(
        metadata=field_options(alias="maxHistory"), default=None
    )
    """Maximum number of revisions kept per release, 0 for no limit."""

    name: Optional[str] = None
    """The release name."""

    namespace: Optional[str] = None
    """The namespace the release is installed into."""

    postrender: Optional[str] = None

    recreate_pods: Optional[bool] = field(
        metadata=field_options(alias="recreatePods"), default=None
    )

    render_subchart_notes: Optional[bool] = field(
        metadata=field_options(alias="renderSubchartNotes"), default=None
    )

    replace: Optional[bool] = None

    repository_opts: RepositoryOpts = field(
        metadata=field_options(alias="repositoryOpts"), default_factory=RepositoryOpts
    )
    """The chart repository, the URL is defaulted from the owning chart component."""

    reset_values: Optional[bool] = field(
        metadata=field_options(alias="resetValues"), default=None
    )

    resource_names: Optional[dict[str, list[str]]] = field(
        metadata=field_options(alias="resourceNames"), default=None
    )
    """Names of resources created by the release, grouped by kind/version."""

    reuse_values: Optional[bool] = field(
        metadata=field_options(alias="reuseValues"), default=None
    )

    skip_await: Optional[bool] = field(
        metadata=field_options(alias="skipAwait"), default=None
    )

    skip_crds: Optional[bool] = field(
        metadata=field_options(alias="skipCrds"), default=None
    )

    status: Optional[ReleaseStatus] = None
    """Status of the deployed release. This is an output and is never projected."""

    timeout: Optional[int] = None
    """Seconds to wait for any individual kubernetes operation."""

    value_yaml_files: Optional[list[Any]] = field(
        metadata=field_options(alias="valueYamlFiles"), default=None
    )
    """Assets holding raw values yaml, passed through to the release."""

    values: Optional[dict[str, Any]] = None
    """Values for the chart. Populated from the typed chart args."""

    verify: Optional[bool] = None

    version: Optional[str] = None
    """Exact chart version, otherwise the latest version is installed."""

    wait_for_jobs: Optional[bool] = field(
        metadata=field_options(alias="waitForJobs"), default=None
    )


@dataclass
class ReleaseArgs(BaseArgs):
    """Arguments of the Helm Release resource created by the host."""

    atomic: Optional[bool] = None
    chart: Optional[str] = None
    cleanup_on_fail: Optional[bool] = field(
        metadata=field_options(alias="cleanupOnFail"), default=None
    )
    create_namespace: Optional[bool] = field(
        metadata=field_options(alias="createNamespace"), default=None
    )
    dependency_update: Optional[bool] = field(
        metadata=field_options(alias="dependencyUpdate"), default=None
    )
    description: Optional[str] = None
    devel: Optional[bool] = None
    disable_crd_hooks: Optional[bool] = field(
        metadata=field_options(alias="disableCRDHooks"), default=None
    )
    disable_openapi_validation: Optional[bool] = field(
        metadata=field_options(alias="disableOpenapiValidation"), default=None
    )
    disable_webhooks: Optional[bool] = field(
        metadata=field_options(alias="disableWebhooks"), default=None
    )
    force_update: Optional[bool] = field(
        metadata=field_options(alias="forceUpdate"), default=None
    )
    keyring: Optional[str] = None
    lint: Optional[bool] = None
    manifest: Optional[dict[str, Any]] = None
    max_history: Optional[int] = field(
        metadata=field_options(alias="maxHistory"), default=None
    )
    name: Optional[str] = None
    namespace: Optional[str] = None
    postrender: Optional[str] = None
    recreate_pods: Optional[bool] = field(
        metadata=field_options(alias="recreatePods"), default=None
    )
    render_subchart_notes: Optional[bool] = field(
        metadata=field_options(alias="renderSubchartNotes"), default=None
    )
    replace: Optional[bool] = None
    repository_opts: Optional[RepositoryOpts] = field(
        metadata=field_options(alias="repositoryOpts"), default=None
    )
    reset_values: Optional[bool] = field(
        metadata=field_options(alias="resetValues"), default=None
    )
    resource_names: Optional[dict[str, list[str]]] = field(
        metadata=field_options(alias="resourceNames"), default=None
    )
    reuse_values: Optional[bool] = field(
        metadata=field_options(alias="reuseValues"), default=None
    )
    skip_await: Optional[bool] = field(
        metadata=field_options(alias="skipAwait"), default=None
    )
    skip_crds: Optional[bool] = field(
        metadata=field_options(alias="skipCrds"), default=None
    )
    timeout: Optional[int] = None
    value_yaml_files: Optional[list[Any]] = field(
        metadata=field_options(alias="valueYamlFiles"), default=None
    )
    values: Optional[dict[str, Any]] = None
    verify: Optional[bool] = None
    version: Optional[str] = None
    wait_for_jobs: Optional[bool] = field(
        metadata=field_options(alias="waitForJobs"), default=None
    )


@dataclass
class ChartArgs(BaseArgs):
    """Base class for the typed arguments of a chart component.

    Chart variants subclass this and add their own fields. Every field that
    is set is written to the chart values under its property name, apart
    from `helm_options` which holds the release arguments themselves.
    All fields of a subclass must have defaults.
    """

    helm_options: Optional[ReleaseTypeArgs] = field(
        metadata=field_options(alias=FIELD_HELM_OPTIONS_INPUT), default=None
    )


def _copy_dict(value: Any) -> Any:
    if isinstance(value, dict):
        return dict(value)
    return value


def _copy_resource_names(value: Any) -> Any:
    if isinstance(value, dict):
        return {key: list(names) for key, names in value.items()}
    return value


def _copy_list(value: Any) -> Any:
    if isinstance(value, list):
        return list(value)
    return value


def _copy_repository_opts(value: Any) -> Any:
    if isinstance(value, RepositoryOpts):
        return replace(value)
    return value


@dataclass(frozen=True)
class _Projection:
    """Copy of one `ReleaseTypeArgs` field onto a `ReleaseArgs` field."""

    source: str
    target: str
    convert: Callable[[Any], Any] | None = None


RELEASE_ARGS_PROJECTION: tuple[_Projection, ...] = (
    _Projection("atomic", "atomic"),
    _Projection("chart", "chart"),
    _Projection("cleanup_on_fail", "cleanup_on_fail"),
    _Projection("create_namespace", "create_namespace"),
    _Projection("dependency_update", "dependency_update"),
    _Projection("description", "description"),
    _Projection("devel", "devel"),
    _Projection("disable_crd_hooks", "disable_crd_hooks"),
    _Projection("disable_openapi_validation", "disable_openapi_validation"),
    _Projection("disable_webhooks", "disable_webhooks"),
    _Projection("force_update", "force_update"),
    _Projection("keyring", "keyring"),
    _Projection("lint", "lint"),
    _Projection("manifest", "manifest", _copy_dict),
    _Projection("max_history", "max_history"),
    _Projection("name", "name"),
    _Projection("namespace", "namespace"),
    _Projection("postrender", "postrender"),
    _Projection("recreate_pods", "recreate_pods"),
    _Projection("render_subchart_notes", "render_subchart_notes"),
    _Projection("replace", "replace"),
    _Projection("repository_opts", "repository_opts", _copy_repository_opts),
    _Projection("reset_values", "reset_values"),
    _Projection("resource_names", "resource_names", _copy_resource_names),
    _Projection("reuse_values", "reuse_values"),
    _Projection("skip_await", "skip_await"),
    _Projection("skip_crds", "skip_crds"),
    _Projection("timeout", "timeout"),
    _Projection("value_yaml_files", "value_yaml_files", _copy_list),
    _Projection("values", "values", _copy_dict),
    _Projection("verify", "verify"),
    _Projection("version", "version"),
    _Projection("wait_for_jobs", "wait_for_jobs"),
)
"""Field by field projection of the release args onto the Release resource.

Both shapes are maintained by hand, so any field added to either side must
be added here as well.
"""

UNPROJECTED_FIELDS = frozenset({"status"})
"""`ReleaseTypeArgs` fields that are outputs and never sent to the Release."""


def to_release_args(args: ReleaseTypeArgs) -> ReleaseArgs:
    """Project the reconciled release args onto the Release resource args.

    Values are passed through as-is, they may be unresolved host outputs.
    Mutable containers are copied so the Release never aliases the chart args.
    """
    projected: dict[str, Any] = {}
    for projection in RELEASE_ARGS_PROJECTION:
        value = getattr(args, projection.source)
        if projection.convert is not None:
            value = projection.convert(value)
        projected[projection.target] = value
    _LOGGER.debug("Projected release args for chart %s", projected.get("chart"))
    return ReleaseArgs(**projected)


def _check_projection() -> None:
    """Verify every field of both shapes is accounted for in the projection."""
    sources = {p.source for p in RELEASE_ARGS_PROJECTION} | UNPROJECTED_FIELDS
    targets = {p.target for p in RELEASE_ARGS_PROJECTION}
    source_fields = set(property_names(ReleaseTypeArgs).values())
    target_fields = set(property_names(ReleaseArgs).values())
    if sources != source_fields:
        raise ValueError(
            f"ReleaseTypeArgs fields not projected: {sorted(source_fields ^ sources)}"
        )
    if targets != target_fields:
        raise ValueError(
            f"ReleaseArgs fields not projected: {sorted(target_fields ^ targets)}"
        )


_check_projection()
