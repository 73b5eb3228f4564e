"""Construction of chart components.

A chart component wraps a single Helm Release. Constructing one:

    1. Checks the chart is constructed under its own type token
    2. Copies the raw inputs onto the typed chart args
    3. Registers the chart as a component resource with the host
    4. Defaults the release args from the chart and merges the chart args
       into the release values
    5. Creates the child Release and registers it as the chart output

Every step either succeeds or aborts the whole call. A failure after the
chart is registered leaves it registered and incomplete, cleaning it up is
left to the host.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
import logging
from typing import Any

from mashumaro.exceptions import InvalidFieldValue, MissingField

from .context import trace_context
from .exceptions import (
    ChildCreationError,
    DecodeError,
    HostException,
    OutputRegistrationError,
    RegistrationError,
    SetArgsError,
    TypeMismatchError,
)
from .host import Release, ResourceHost, ResourceOptions
from .release import (
    FIELD_HELM_STATUS_OUTPUT,
    ChartArgs,
    ReleaseTypeArgs,
    property_names,
    to_release_args,
)
from .values import init_defaults

__all__ = [
    "Chart",
    "ConstructConfig",
    "ConstructResult",
    "construct",
    "hydrate",
]

_LOGGER = logging.getLogger(__name__)


class Chart(ABC):
    """A strongly typed Helm chart component.

    Concrete charts are provided by callers, one per chart wrapped. The chart
    is registered with the host as the parent of its Helm Release.
    """

    @abstractmethod
    def type_token(self) -> str:
        """Return the fully qualified type token of this chart."""

    @abstractmethod
    def set_outputs(self, status: Any) -> None:
        """Record the status of the Helm Release created for this chart.

        The status is a `ReleaseStatus`, or a value the host resolves later.
        """

    @abstractmethod
    def default_chart_name(self) -> str:
        """Return the chart name used when the args do not set one."""

    @abstractmethod
    def default_repo_url(self) -> str:
        """Return the repository URL used when the args do not set one."""


@dataclass
class ConstructConfig:
    """Configuration for constructing a chart."""

    release_suffix: str = "-helm"
    """Suffix appended to the chart name to name the child Release."""


@dataclass
class ConstructResult:
    """Result of constructing a chart component."""

    resource: Chart
    """The constructed chart."""

    state: dict[str, Any] = field(default_factory=dict)
    """Outputs registered for the chart."""


def hydrate(args: ChartArgs, inputs: Mapping[str, Any]) -> None:
    """Copy the raw inputs onto the typed args.

    Inputs are keyed by property name. Unknown keys are ignored and fields
    without an input keep their current value. The inputs are parsed in full
    before any field is assigned, so `args` is left untouched on failure.
    """
    if not isinstance(inputs, Mapping):
        raise TypeError(f"Expected a mapping of inputs, found {type(inputs).__name__}")
    cls = type(args)
    names = property_names(cls)
    known = {key: value for key, value in inputs.items() if key in names}
    if unknown := [key for key in inputs if key not in names]:
        _LOGGER.debug("Ignoring unknown inputs for %s: %s", cls.__name__, unknown)
    parsed = cls.from_dict(known)
    for key in known:
        setattr(args, names[key], getattr(parsed, names[key]))


async def construct(
    host: ResourceHost,
    chart: Chart,
    type_token: str,
    name: str,
    args: ChartArgs,
    inputs: Mapping[str, Any],
    options: ResourceOptions,
    config: ConstructConfig | None = None,
) -> ConstructResult:
    """Construct a chart component and its Helm Release.

    Host failures are wrapped in the exception for the step that failed.
    Nothing is retried and cancellation propagates to the caller.
    """
    config = config or ConstructConfig()
    if (actual := chart.type_token()) != type_token:
        raise TypeMismatchError(name, type_token, actual)

    with trace_context(f"Construct {type_token} '{name}'"):
        _LOGGER.info("Constructing %s '%s'", type_token, name)
        try:
            hydrate(args, inputs)
        except (
            AttributeError,
            InvalidFieldValue,
            MissingField,
            TypeError,
            ValueError,
        ) as err:
            raise SetArgsError(type_token, name, f"setting args: {err}") from err

        try:
            await host.register_component_resource(type_token, name, chart, options)
        except HostException as err:
            raise RegistrationError(type_token, name, str(err)) from err

        if args.helm_options is None:
            args.helm_options = ReleaseTypeArgs()
        release_args = args.helm_options
        try:
            init_defaults(
                release_args, chart.default_chart_name(), chart.default_repo_url(), args
            )
        except DecodeError as err:
            err.add_note(f"Construct {type_token} '{name}'")
            raise

        release_name = f"{name}{config.release_suffix}"
        try:
            release: Release = await host.create_release(
                release_name,
                to_release_args(release_args),
                ResourceOptions(parent=chart),
            )
        except HostException as err:
            raise ChildCreationError(
                type_token, name, f"creating release {release_name}: {err}"
            ) from err

        chart.set_outputs(release.status)
        outputs = {FIELD_HELM_STATUS_OUTPUT: release}
        try:
            await host.register_resource_outputs(chart, outputs)
        except HostException as err:
            raise OutputRegistrationError(type_token, name, str(err)) from err

    _LOGGER.debug("Constructed %s '%s' with release %s", type_token, name, release_name)
    return ConstructResult(resource=chart, state=outputs)
