"""errchain - error chaining with causes, chain traversal and Result adapters.

- new/wrap: Create errors and wrap them with context, keeping the original as cause
- cause/is_/as_: Deepest cause, identity membership and typed lookup along a chain
- try_sync/try_async: Turn raising code into Result values (``data, error``)
- to_dict/to_json: Structured serialization of a whole chain

Example:
    >>> import errchain
    >>> root = errchain.new("disk full")
    >>> err = errchain.wrap(root, "save report")
    >>> str(err)
    'save report: disk full'
    >>> errchain.is_(err, root), errchain.cause(err) is root
    (True, True)
"""

from .chain import (
    SEPARATOR,
    Error,
    WrappedError,
    as_,
    as_error,
    cause,
    is_,
    is_error,
    iter_chain,
    messages,
    new,
    new_error,
    wrap,
)
from .config import ErrchainSettings, LoggingSettings, clear_settings_cache, get_settings
from .logging import BoundLogger, configure_logging, get_logger, log_context, log_error
from .result import Err, Ok, Result, catch, to_error, try_async, try_sync
from .types import ErrorRecord, JsonDict, JsonValue, to_dict, to_json

__version__ = "2.0.0"

__all__ = [
    # Errors
    "Error", "WrappedError", "SEPARATOR",
    # Construction
    "new", "new_error", "wrap",
    # Traversal
    "cause", "is_", "is_error", "as_", "as_error", "iter_chain", "messages",
    # Result adapters
    "Result", "Ok", "Err", "to_error", "try_sync", "try_async", "catch",
    # Serialization
    "ErrorRecord", "to_dict", "to_json", "JsonDict", "JsonValue",
    # Configuration
    "ErrchainSettings", "LoggingSettings", "get_settings", "clear_settings_cache",
    # Logging
    "BoundLogger", "configure_logging", "get_logger", "log_context", "log_error",
]
