"""Host interface used to register chart components and create releases."""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from helm_base.release import ReleaseArgs

__all__ = [
    "ResourceHost",
    "ResourceId",
    "ResourceOptions",
    "Release",
]


@dataclass(frozen=True, order=True)
class ResourceId:
    """Identifier for a resource registered with a host."""

    type_token: str
    name: str

    def __str__(self) -> str:
        """Return the type token and name concatenated as an id."""
        return f"{self.type_token}::{self.name}"


@dataclass
class ResourceOptions:
    """Options for registering a resource with the host."""

    parent: Any | None = None
    """The component that owns the resource."""


@dataclass
class Release:
    """A Helm Release created by the host as the child of a chart."""

    name: str
    """The resource name of the release."""

    args: ReleaseArgs
    """The args the release was created with."""

    status: Any
    """Status output of the release.

    A `ReleaseStatus`, or a value the host has not resolved yet.
    """

    parent: Any | None = None
    """The chart component owning the release."""


class ResourceHost(ABC):
    """Abstract base class for the host that owns the resource lifecycle.

    Implementations raise `HostException` when a call is rejected.
    """

    @abstractmethod
    async def register_component_resource(
        self, type_token: str, name: str, resource: Any, options: ResourceOptions
    ) -> None:
        """Register `resource` as a component resource."""

    @abstractmethod
    async def create_release(
        self, name: str, args: ReleaseArgs, options: ResourceOptions
    ) -> Release:
        """Create a Helm Release resource."""

    @abstractmethod
    async def register_resource_outputs(
        self, resource: Any, outputs: Mapping[str, Any]
    ) -> None:
        """Register the outputs of a previously registered component."""
