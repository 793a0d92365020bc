"""Base exceptions for holdfix."""
from typing import Any, Dict, Tuple


class HoldFixException(Exception):
    """Base exception class for holdfix.

    Subclasses name the attributes that locate the failure in the design
    (net, node, file) in ``context_fields``; ``to_dict`` reports them with
    the error code so a failed run can still write a machine-readable summary.
    """

    default_code: str = None
    context_fields: Tuple[str, ...] = ()

    def __init__(self, message: str, error_code: str = None, details: dict = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.default_code
        self.details = details or {}

    def __str__(self) -> str:
        if self.error_code:
            return f"[{self.error_code}] {self.message}"
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'error': type(self).__name__,
            'code': self.error_code,
            'message': self.message,
        }
        for name in self.context_fields:
            value = getattr(self, name, None)
            if value is not None:
                data[name] = value
        if self.details:
            data['details'] = self.details
        return data


class ConfigurationError(HoldFixException):
    """Settings or the net model are unusable."""
    default_code = "CONFIG_ERROR"


class ValidationError(HoldFixException):
    """A threshold, count or node length is out of range."""
    default_code = "INVALID_VALUE"
    context_fields = ('field', 'value')

    def __init__(self, message: str, field: str = None, value=None, **kwargs):
        super().__init__(message, **kwargs)
        self.field = field
        self.value = value


class RoutingError(HoldFixException):
    """A route could not be walked or changed."""
    default_code = "ROUTING_ERROR"
    context_fields = ('net_id',)

    def __init__(self, message: str, net_id: str = None, **kwargs):
        super().__init__(message, **kwargs)
        self.net_id = net_id
