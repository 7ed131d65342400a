"""Namespaced storage keys shared by all backends

Every backend keeps its records under an optional application prefix
(`app_prefix()`, e.g. "s3shortener:prod") so several apps and environments can
share one bucket or one Redis database. Backends only differ in the separator
they join key parts with and in how a bare record key looks.
"""

import functools
from collections.abc import Callable


__all__ = ['KeySchema', 'namespaced']


def namespaced(func: Callable[..., str]) -> Callable[..., str]:
    """Prepend the schema's prefix (if any) to the key returned by `func`."""

    @functools.wraps(func)
    def wrapper(self: 'KeySchema', *args, **kwargs) -> str:
        key = func(self, *args, **kwargs)
        if self.prefix is None:
            return key
        return f'{self.prefix}{self.separator}{key}'

    return wrapper


class KeySchema:
    separator = ':'

    def __init__(self, prefix: str | None = None):
        if prefix is not None and not isinstance(prefix, str):
            raise TypeError(f'Prefix must be of type string (given type: {type(prefix)}).')
        self.prefix = self.normalize_prefix(prefix) if prefix is not None else None

    def normalize_prefix(self, prefix: str) -> str | None:
        return prefix

    def record_key(self, code: str) -> str:
        raise NotImplementedError
