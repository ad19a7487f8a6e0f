"""Unit-of-work port for multi-store atomic writes."""

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from typing import Any

# Opens a transaction that every store call made inside it joins.
# Commits on clean exit, rolls back when the block raises.
TransactionFactory = Callable[[], AbstractAsyncContextManager[Any]]
