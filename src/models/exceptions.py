from typing import Any, Dict, Optional


class HdrScopeException(Exception):
    """Base error. Keyword details that are not None are merged into ``context``."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None, **details: Any):
        self.message = message
        self.context = dict(context or {})
        self.context.update({key: value for key, value in details.items() if value is not None})
        super().__init__(self.message)

    def __str__(self) -> str:
        context_str = f" - Context: {self.context}" if self.context else ""
        return f"{self.__class__.__name__}: {self.message}{context_str}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r}, context={self.context!r})"


class NetworkException(HdrScopeException):
    """A target could not be fetched."""

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, context, url=url or None, status_code=status_code)


class ValidationException(HdrScopeException):
    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, context, field=field or None, value=value)


class ConfigurationException(HdrScopeException):
    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        config_value: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, context, config_key=config_key or None, config_value=config_value)


class OutputException(HdrScopeException):
    def __init__(self, message: str, output_format: Optional[str] = None, context: Optional[Dict[str, Any]] = None):
        super().__init__(message, context, output_format=output_format or None)


class CheckResultException(ValidationException):
    """Check result built without a usable status"""
    pass


class ExclusionRuleException(ValidationException):
    """Exclusion rule with a blank id or pattern, or an unknown type"""
    pass
