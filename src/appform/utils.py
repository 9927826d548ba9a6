"""Utility functions for appform"""

import logging
import shutil
import time
from functools import wraps
from pathlib import Path
from typing import Callable, Literal, Optional, Tuple, Type

logger = logging.getLogger(__name__)


BackoffStrategy = Literal["exponential", "fixed"]


def canonicalify(p: Path | str) -> Path:
    return Path(p).expanduser().resolve()


def ensure_path(p: Path | str) -> Path:
    path = canonicalify(p)
    path.mkdir(parents=True, exist_ok=True)
    return path


def atomic_write(p: Path | str, content: str) -> Path:
    """Write text through a temporary sibling file, then move it into place."""
    path = Path(p)
    temp_path = path.with_suffix(path.suffix + ".tmp")
    temp_path.write_text(content, encoding="utf-8")
    shutil.move(str(temp_path), str(path))
    return path


def retry(
    times: int,
    initial_delay: int = 1,
    backoff: BackoffStrategy = "exponential",
    exceptions: Tuple[Type[Exception], ...] = (Exception,),
    on_retry: Optional[Callable[[tuple, dict, Exception, int], None]] = None,
):
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            delay = initial_delay

            for attempt in range(times):
                try:
                    return func(*args, **kwargs)
                except exceptions as e:
                    if attempt == times - 1:
                        logger.error(f"Request failed, max retries ({times}) reached")
                        raise

                    logger.warning(
                        f"Request failed (attempt {attempt + 1}/{times}), "
                        f"retrying in {delay}s. Error: {str(e)[:100]}"
                    )

                    if on_retry:
                        on_retry(args, kwargs, e, attempt + 1)

                    time.sleep(delay)

                    if backoff == "exponential":
                        delay *= 2

        return wrapper

    return decorator


def sanitize(sensitive: str | None, keep_chars: int = 2) -> str:
    """Mask sensitive information for logging.

    Args:
        sensitive: The sensitive string to mask (e.g., API token)
        keep_chars: Number of leading and trailing characters to keep

    Returns:
        Masked string with middle characters replaced by asterisks.

    Examples:
        >>> sanitize("3f1a9c0e7b2d4e6f")
        '3f***6f'
        >>> sanitize(None)
        '***'
    """
    if not sensitive:
        return "***"

    if len(sensitive) <= keep_chars * 2:
        return "***"

    return f"{sensitive[:keep_chars]}***{sensitive[-keep_chars:]}"


def format_validation_error(e: Exception, header: str = "Validation failed:") -> str:
    from pydantic import ValidationError

    if not isinstance(e, ValidationError):
        return str(e)

    lines = [header]
    for error in e.errors():
        loc = " -> ".join(str(item) for item in error.get("loc", []))
        msg = error.get("msg", "")
        lines.append(f"  - {loc}: {msg}" if loc else f"  - {msg}")
    return "\n".join(lines)
