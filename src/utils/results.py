"""Settled results for concurrent fan-out."""

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Generic, Iterable, List, TypeVar, Union
from .helpers import error_message

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Call completed with a value."""

    value: T


@dataclass(frozen=True)
class Err:
    """Call raised; ``reason`` is the error message, ``error`` the exception."""

    reason: str
    error: Exception


Result = Union[Ok[T], Err]


async def gather_settled(aws: Iterable[Awaitable[T]]) -> List[Result]:
    """
    Run awaitables concurrently and wait for all of them.

    Returns one result per awaitable, in input order. A failing call
    never aborts its siblings. Cancellation is propagated, not captured.
    """
    outcomes = await asyncio.gather(*aws, return_exceptions=True)

    results: List[Result] = []
    for outcome in outcomes:
        if isinstance(outcome, Exception):
            results.append(Err(reason=error_message(outcome), error=outcome))
        elif isinstance(outcome, BaseException):
            raise outcome
        else:
            results.append(Ok(outcome))
    return results
