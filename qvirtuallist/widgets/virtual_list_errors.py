"""Error taxonomy and result values for virtual list operations."""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ErrorKind(Enum):
    INVALID_INDEX = 'invalid_index'
    NO_DATA_SOURCE = 'no_data_source'
    NO_RENDERER = 'no_renderer'
    CONTEXT_NOT_FOUND = 'context_not_found'
    INVALID_CONFIG = 'invalid_config'


class VirtualListError(Exception):
    """A recoverable virtual list failure, handed back inside a result."""

    def __init__(self, kind: ErrorKind, message: str, **details):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.details = details

    def __repr__(self):
        return f'VirtualListError({self.kind.name}, {self.message!r})'

    @classmethod
    def invalid_index(cls, index: int, total_items: int) -> 'VirtualListError':
        return cls(ErrorKind.INVALID_INDEX,
                   f'Invalid item index: {index} (total items: {total_items})',
                   index=index, total_items=total_items)

    @classmethod
    def no_data_source(cls) -> 'VirtualListError':
        return cls(ErrorKind.NO_DATA_SOURCE, 'No data source set')

    @classmethod
    def no_renderer(cls) -> 'VirtualListError':
        return cls(ErrorKind.NO_RENDERER, 'No item renderer set')

    @classmethod
    def context_not_found(cls, operation: str) -> 'VirtualListError':
        return cls(ErrorKind.CONTEXT_NOT_FOUND,
                   f"Operation '{operation}' found no item context for panel",
                   operation=operation)

    @classmethod
    def invalid_config(cls, message: str) -> 'VirtualListError':
        return cls(ErrorKind.INVALID_CONFIG, f'Invalid configuration: {message}')


@dataclass(frozen=True)
class VirtualListResult:
    """Outcome of a fallible public operation: a value or an error, never both."""

    value: Any = None
    error: VirtualListError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self):
        if self.error is not None:
            raise self.error
        return self.value

    def unwrap_or(self, default):
        return default if self.error is not None else self.value

    @classmethod
    def success(cls, value=None) -> 'VirtualListResult':
        return cls(value=value)

    @classmethod
    def failure(cls, error: VirtualListError) -> 'VirtualListResult':
        return cls(error=error)
