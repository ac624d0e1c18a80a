import logging
from collections.abc import Awaitable, Callable
from functools import wraps
from typing import Any, TypeVar

from .errors import handle_api_error

logger = logging.getLogger("mcp-bitbucket.decorators")


F = TypeVar("F", bound=Callable[..., Awaitable[str]])


def handle_api_errors(context: str) -> Callable[[F], F]:
    """
    Decorator turning any failure of an async tool handler into a text result.

    The context is formatted with the handler's keyword arguments, so
    "getting PR #{pr_id}" becomes "getting PR #42". Handlers wrapped this way
    never raise; errors are logged and classified by `handle_api_error`.

    Args:
        context: Description of the operation, with optional `{name}` fields.
    """

    def decorator(func: F) -> F:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> str:
            try:
                return await func(*args, **kwargs)
            except Exception as e:  # noqa: BLE001 - converted to a text result
                try:
                    operation = context.format(**kwargs)
                except (KeyError, IndexError):
                    operation = context
                return handle_api_error(e, operation)

        return wrapper  # type: ignore

    return decorator
