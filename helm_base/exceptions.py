"""Exceptions related to helm-base."""

__all__ = [
    "HelmBaseException",
    "HostException",
    "DecodeError",
    "ConstructException",
    "TypeMismatchError",
    "SetArgsError",
    "RegistrationError",
    "ChildCreationError",
    "OutputRegistrationError",
]


class HelmBaseException(Exception):
    """Generic base exception used for this library."""


class HostException(HelmBaseException):
    """Raised by a resource host when a registration or creation call fails."""


class DecodeError(HelmBaseException):
    """Raised when a value cannot be flattened into a chart values map."""

    def __init__(self, value_type: str, field: str | None = None) -> None:
        if field:
            message = f"Unable to decode field '{field}' of {value_type} into values"
        else:
            message = f"Unable to decode {value_type} into values"
        super().__init__(message)
        self.value_type = value_type
        self.field = field


class ConstructException(HelmBaseException):
    """Raised when constructing a chart component fails."""

    def __init__(self, type_token: str, name: str, message: str) -> None:
        super().__init__(f"Construct {type_token} '{name}': {message}")
        self.type_token = type_token
        self.name = name


class TypeMismatchError(ConstructException):
    """Raised when a chart is constructed under the wrong type token."""

    def __init__(self, name: str, expected: str, actual: str) -> None:
        super().__init__(
            expected, name, f"chart has resource type {actual}; expected {expected}"
        )
        self.expected = expected
        self.actual = actual


class SetArgsError(ConstructException):
    """Raised when the raw inputs cannot be copied onto the typed args."""


class RegistrationError(ConstructException):
    """Raised when the host rejects the chart component registration."""


class ChildCreationError(ConstructException):
    """Raised when the host fails to create the child Helm Release."""


class OutputRegistrationError(ConstructException):
    """Raised when the chart outputs cannot be registered with the host."""
