"""
The host module describes the resource host that a chart is constructed in.

The host owns the lifecycle of the registered chart components and their Helm
Release children. `InMemoryHost` records everything in memory, for use in
tests and local evaluation of charts.
"""

from .host import ResourceHost, ResourceId, ResourceOptions, Release
from .in_memory import InMemoryHost

__all__ = [
    "ResourceHost",
    "ResourceId",
    "ResourceOptions",
    "Release",
    "InMemoryHost",
]
