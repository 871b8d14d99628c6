"""Decorator and helpers that route failures through ChartAssistantError."""

import logging
import traceback
from functools import wraps
from typing import Any, Callable, Dict, Iterable, Optional

from .exceptions import ChartAssistantError, ConfigurationError

logger = logging.getLogger(__name__)


def _failure_extra(error: Exception, **fields: Any) -> Dict[str, Any]:
    if isinstance(error, ChartAssistantError):
        return {"error_code": error.error_code, "details": error.details, **fields}
    return {
        "original_error": str(error),
        "details": {},
        "traceback": traceback.format_exc(),
        **fields,
    }


def handle_errors(
    default_return: Any = None,
    exception_type: type = ChartAssistantError,
    log_level: int = logging.ERROR,
    reraise: bool = False
):
    """Log any failure of the wrapped call, then either return ``default_return`` or raise.

    With ``reraise`` set, ChartAssistantError subclasses propagate as they are
    and anything else is chained into ``exception_type``.
    """

    def decorator(func: Callable) -> Callable:
        name = func.__name__

        @wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except Exception as e:
                known = isinstance(e, ChartAssistantError)
                message = f"{name} failed: {e.message}" if known else f"Unexpected error in {name}: {e}"
                logger.log(log_level, message, extra=_failure_extra(e, function=name))

                if not reraise:
                    return default_return
                if known:
                    raise
                raise exception_type(
                    message=message,
                    details={"original_error": str(e), "function": name}
                ) from e
        return wrapper
    return decorator


def log_error(
    error: Exception,
    context: str,
    details: Optional[dict] = None,
    level: int = logging.ERROR
) -> None:
    """Log ``error`` under ``context``, merging caller-supplied details."""
    extra = _failure_extra(error, context=context)
    extra["details"] = {**(extra["details"] or {}), **(details or {})}
    text = error.message if isinstance(error, ChartAssistantError) else str(error)
    logger.log(level, f"{context}: {text}", extra=extra)


def validate_config(config_dict: dict, required_keys: Iterable[str], context: str = "Configuration") -> None:
    """Raise ConfigurationError naming every required key that is absent or None."""
    missing = [key for key in required_keys if config_dict.get(key) is None]
    if not missing:
        return

    raise ConfigurationError(
        message=f"Missing required configuration keys: {', '.join(missing)}",
        details={
            "missing_keys": missing,
            "available_keys": list(config_dict),
            "context": context
        }
    )
