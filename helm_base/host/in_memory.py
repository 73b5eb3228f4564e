"""Module for an in memory resource host."""

from collections.abc import Mapping
import logging
from typing import Any

from helm_base.exceptions import HostException
from helm_base.release import ReleaseArgs, ReleaseStatus

from .host import Release, ResourceHost, ResourceId, ResourceOptions

__all__ = [
    "RELEASE_TYPE_TOKEN",
    "InMemoryHost",
]

_LOGGER = logging.getLogger(__name__)

RELEASE_TYPE_TOKEN = "kubernetes:helm.sh/v3:Release"
DEFAULT_NAMESPACE = "default"


def _release_status(name: str, args: ReleaseArgs) -> ReleaseStatus:
    """Status of a release that was installed successfully."""
    return ReleaseStatus(
        chart=args.chart,
        name=args.name or name,
        namespace=args.namespace or DEFAULT_NAMESPACE,
        revision=1,
        status="deployed",
        version=args.version,
    )


class InMemoryHost(ResourceHost):
    """In-memory implementation of the ResourceHost interface.

    Records registered components, created releases and component outputs,
    keyed by ResourceId.
    """

    def __init__(self) -> None:
        """Initialize the InMemoryHost."""
        self._components: dict[ResourceId, Any] = {}
        self._releases: dict[ResourceId, Release] = {}
        self._outputs: dict[ResourceId, dict[str, Any]] = {}

    def _find_component(self, resource: Any) -> ResourceId | None:
        for resource_id, component in self._components.items():
            if component is resource:
                return resource_id
        return None

    async def register_component_resource(
        self, type_token: str, name: str, resource: Any, options: ResourceOptions
    ) -> None:
        """Register `resource` as a component resource."""
        resource_id = ResourceId(type_token, name)
        if resource_id in self._components:
            raise HostException(f"Duplicate resource {resource_id}")
        if self._find_component(resource) is not None:
            raise HostException(f"Resource {resource_id} is already registered")
        if options.parent is not None and self._find_component(options.parent) is None:
            raise HostException(f"Parent of {resource_id} is not registered")
        _LOGGER.debug("Registering component %s", resource_id)
        self._components[resource_id] = resource

    async def create_release(
        self, name: str, args: ReleaseArgs, options: ResourceOptions
    ) -> Release:
        """Create a Helm Release resource owned by a registered component."""
        resource_id = ResourceId(RELEASE_TYPE_TOKEN, name)
        if resource_id in self._releases:
            raise HostException(f"Duplicate resource {resource_id}")
        if options.parent is None or self._find_component(options.parent) is None:
            raise HostException(f"Parent of {resource_id} is not registered")
        if not args.chart:
            raise HostException(f"Release {resource_id} has no chart")
        release = Release(
            name=name,
            args=args,
            status=_release_status(name, args),
            parent=options.parent,
        )
        _LOGGER.debug("Creating release %s for chart %s", resource_id, args.chart)
        self._releases[resource_id] = release
        return release

    async def register_resource_outputs(
        self, resource: Any, outputs: Mapping[str, Any]
    ) -> None:
        """Register the outputs of a previously registered component."""
        if (resource_id := self._find_component(resource)) is None:
            raise HostException("Outputs registered for an unknown resource")
        _LOGGER.debug("Registering outputs %s for %s", list(outputs), resource_id)
        self._outputs[resource_id] = dict(outputs)

    def get_component(self, resource_id: ResourceId) -> Any | None:
        """Retrieve a registered component by resource identity."""
        return self._components.get(resource_id)

    def get_outputs(self, resource_id: ResourceId) -> dict[str, Any] | None:
        """Retrieve the registered outputs of a component."""
        return self._outputs.get(resource_id)

    def list_releases(self, parent: Any | None = None) -> list[Release]:
        """List created releases, optionally only those owned by `parent`."""
        return [
            release
            for release in self._releases.values()
            if parent is None or release.parent is parent
        ]
