"""Decorator utilities for cross-cutting concerns."""
import time
import logging
import functools
from typing import Any, Callable, TypeVar, cast

# Setup logging
logger = logging.getLogger(__name__)

F = TypeVar('F', bound=Callable[..., Any])

def log_transfer(func: F) -> F:
    """Decorator to log the duration of a storage transfer.
    
    The wrapped method must take ``(self, worker, path, ...)``. Failures are
    logged and re-raised unchanged.
    
    Args:
        func: The storage method to decorate
        
    Returns:
        Decorated method that logs worker, path and duration
    """
    @functools.wraps(func)
    def wrapper(self, worker: int, path: str, *args, **kwargs):
        start_time = time.monotonic()
        try:
            result = func(self, worker, path, *args, **kwargs)
        except Exception as e:
            duration = time.monotonic() - start_time
            logger.error(f"{func.__name__} of '{path}' on worker {worker} failed after {duration:.2f}s: {str(e)}")
            raise
        duration = time.monotonic() - start_time
        logger.debug(f"{func.__name__} of '{path}' on worker {worker} completed in {duration:.2f}s")
        return result
    return cast(F, wrapper)
