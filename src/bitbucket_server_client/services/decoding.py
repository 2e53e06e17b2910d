import logging
from functools import lru_cache
from typing import Any, TypeVar

from pydantic import TypeAdapter, ValidationError

from bitbucket_server_client.errors import DecodeError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@lru_cache(maxsize=None)
def adapter_for(shape: Any) -> TypeAdapter[Any]:
    """One adapter per shape; building the validator is the expensive part."""
    return TypeAdapter(shape)


def decode(body: str, shape: type[T] | Any, resource: str) -> T:
    """Validate a JSON response body against ``shape``.

    A 200 response whose body does not fit is still a failure, reported as
    :class:`DecodeError` naming ``resource``.
    """
    try:
        return adapter_for(shape).validate_json(body)
    except ValidationError as exc:
        logger.warning("invalid %s response: %s", resource, exc)
        raise DecodeError(resource, exc) from exc
