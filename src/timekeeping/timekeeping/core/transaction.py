from __future__ import annotations

from contextlib import contextmanager
from typing import ContextManager, Iterator, Protocol


class TransactionManager(Protocol):
    """Opens an all-or-nothing unit of work around several repository calls."""

    def transaction(self) -> ContextManager[None]:
        raise NotImplementedError


class NullTransactionManager:
    """Used when repositories are not transactional (in-memory fakes)."""

    @contextmanager
    def transaction(self) -> Iterator[None]:
        yield
