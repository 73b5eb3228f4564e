"""Tests for the release args data model."""

from dataclasses import dataclass, field, fields
from typing import Any

import pytest
import yaml

from helm_base.release import (
    RELEASE_ARGS_PROJECTION,
    UNPROJECTED_FIELDS,
    ReleaseArgs,
    ReleaseStatus,
    ReleaseTypeArgs,
    RepositoryOpts,
    property_names,
    to_release_args,
)


def test_projection_covers_all_fields() -> None:
    """Test every field of both shapes appears in the projection table."""
    sources = [p.source for p in RELEASE_ARGS_PROJECTION]
    targets = [p.target for p in RELEASE_ARGS_PROJECTION]
    assert len(sources) == len(set(sources))
    assert len(targets) == len(set(targets))
    assert set(sources) | UNPROJECTED_FIELDS == {
        f.name for f in fields(ReleaseTypeArgs)
    }
    assert set(targets) == {f.name for f in fields(ReleaseArgs)}


def test_projection_preserves_property_names() -> None:
    """Test projected fields keep the same external property name."""
    source_names = {v: k for k, v in property_names(ReleaseTypeArgs).items()}
    target_names = {v: k for k, v in property_names(ReleaseArgs).items()}
    for projection in RELEASE_ARGS_PROJECTION:
        assert source_names[projection.source] == target_names[projection.target]


def test_property_names() -> None:
    """Test the table of property names for the release args."""
    names = property_names(ReleaseTypeArgs)
    assert names["chart"] == "chart"
    assert names["disableCRDHooks"] == "disable_crd_hooks"
    assert names["repositoryOpts"] == "repository_opts"
    assert names["valueYamlFiles"] == "value_yaml_files"
    assert "disable_crd_hooks" not in names
    assert len(names) == len(fields(ReleaseTypeArgs))


def test_property_names_duplicate_alias() -> None:
    """Test two fields declaring the same property name are rejected."""

    @dataclass
    class Duplicate:
        first: str = field(metadata={"alias": "value"}, default="")
        value: str = ""

    with pytest.raises(ValueError, match="'first' and 'value' both map to 'value'"):
        property_names(Duplicate)


def test_to_release_args() -> None:
    """Test projecting release args onto the Release resource args."""
    args = ReleaseTypeArgs(
        atomic=True,
        chart="redis",
        disable_crd_hooks=True,
        max_history=5,
        namespace="cache",
        repository_opts=RepositoryOpts(repo="https://charts.example.org"),
        skip_await=False,
        status=ReleaseStatus(status="deployed"),
        timeout=300,
        values={"cacheSize": 256},
        version="1.2.3",
        wait_for_jobs=True,
    )
    release_args = to_release_args(args)
    assert release_args == ReleaseArgs(
        atomic=True,
        chart="redis",
        disable_crd_hooks=True,
        max_history=5,
        namespace="cache",
        repository_opts=RepositoryOpts(repo="https://charts.example.org"),
        skip_await=False,
        timeout=300,
        values={"cacheSize": 256},
        version="1.2.3",
        wait_for_jobs=True,
    )


def test_to_release_args_copies_containers() -> None:
    """Test the Release args never alias the mutable chart args."""
    args = ReleaseTypeArgs(
        manifest={"kind": "ConfigMap"},
        repository_opts=RepositoryOpts(repo="https://charts.example.org"),
        resource_names={"ConfigMap/v1": ["a"]},
        value_yaml_files=["values.yaml"],
        values={"a": 1},
    )
    release_args = to_release_args(args)
    assert release_args.values == args.values
    assert release_args.values is not args.values
    assert release_args.manifest is not args.manifest
    assert release_args.repository_opts == args.repository_opts
    assert release_args.repository_opts is not args.repository_opts
    assert release_args.resource_names == args.resource_names
    assert release_args.resource_names is not args.resource_names
    assert release_args.value_yaml_files == ["values.yaml"]
    assert release_args.value_yaml_files is not args.value_yaml_files

    assert release_args.values is not None
    release_args.values["b"] = 2
    assert args.values == {"a": 1}


def test_to_release_args_passes_through_opaque_values() -> None:
    """Test values that are not resolved yet are passed through untouched."""
    pending: Any = object()
    asset: Any = object()
    args = ReleaseTypeArgs(
        chart=pending,
        timeout=pending,
        values=pending,
        value_yaml_files=[asset],
    )
    release_args = to_release_args(args)
    assert release_args.chart is pending
    assert release_args.timeout is pending
    assert release_args.values is pending
    assert release_args.value_yaml_files == [asset]


def test_parse_yaml() -> None:
    """Test parsing release args keyed by property name."""
    args = ReleaseTypeArgs.parse_yaml(
        """\
chart: redis
createNamespace: true
repositoryOpts:
  repo: https://charts.example.org
  caFile: /etc/ca.pem
resourceNames:
  Service/v1:
  - redis-master
values:
  auth:
    enabled: false
"""
    )
    assert args == ReleaseTypeArgs(
        chart="redis",
        create_namespace=True,
        repository_opts=RepositoryOpts(
            repo="https://charts.example.org", ca_file="/etc/ca.pem"
        ),
        resource_names={"Service/v1": ["redis-master"]},
        values={"auth": {"enabled": False}},
    )


def test_yaml() -> None:
    """Test serializing release args by property name without unset fields."""
    args = ReleaseTypeArgs(
        chart="redis",
        skip_await=True,
        repository_opts=RepositoryOpts(repo="https://charts.example.org"),
    )
    assert yaml.safe_load(args.yaml()) == {
        "chart": "redis",
        "repositoryOpts": {"repo": "https://charts.example.org"},
        "skipAwait": True,
    }
