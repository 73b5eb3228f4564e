"""Module for defaulting Helm release args and merging chart values."""

from collections.abc import Mapping
import logging
from typing import Any

from mashumaro import DataClassDictMixin

from .exceptions import DecodeError
from .release import FIELD_HELM_OPTIONS_INPUT, ReleaseTypeArgs, property_names

__all__ = [
    "decode_values",
    "init_defaults",
]

_LOGGER = logging.getLogger(__name__)


def _decode_field(value_type: str, name: str, item: Any) -> Any:
    """Pack a single field value, passing anything unresolved through."""
    if isinstance(item, DataClassDictMixin):
        try:
            return item.to_dict()
        except (AttributeError, TypeError, ValueError) as err:
            raise DecodeError(value_type, field=name) from err
    if isinstance(item, Mapping):
        return dict(item)
    return item


def decode_values(value: Any) -> dict[str, Any]:
    """Flatten a typed value into a values map keyed by property name.

    Only the top level is flattened: nested objects become nested dicts under
    the property name of their field. Fields that are not set and the nested
    helm options are omitted. Any other field value, such as one the host has
    not resolved yet, is passed through as is.
    """
    if value is None:
        return {}
    value_type = type(value).__name__
    if isinstance(value, DataClassDictMixin):
        result: dict[str, Any] = {}
        for name, attr in property_names(type(value)).items():
            if name == FIELD_HELM_OPTIONS_INPUT:
                continue
            if (item := getattr(value, attr)) is None:
                continue
            result[name] = _decode_field(value_type, name, item)
        return result
    if isinstance(value, Mapping):
        result = {}
        for key, item in value.items():
            if not isinstance(key, str):
                raise DecodeError(value_type, field=repr(key))
            result[key] = item
        return result
    raise DecodeError(value_type)


def init_defaults(
    args: ReleaseTypeArgs, chart: str, repo: str, values: Any
) -> None:
    """Fill unset release args from the chart defaults and merge in values.

    The chart name and repository URL are only used when the args do not
    already set them. Every property decoded from `values` overrides the
    existing entry in `args.values`, other entries are kept. The nested
    helm options property is always removed from the result.

    Running this again with the same inputs does not change the result.
    """
    # Decode before touching args, a bad payload must not leave a partial merge.
    decoded = decode_values(values)

    if not args.chart:
        args.chart = chart
    if not args.repository_opts.repo:
        args.repository_opts.repo = repo
    if args.values is None:
        args.values = {}

    _LOGGER.debug(
        "Merging %d values into chart %s: %s", len(decoded), args.chart, list(decoded)
    )
    args.values.update(decoded)
    args.values.pop(FIELD_HELM_OPTIONS_INPUT, None)
