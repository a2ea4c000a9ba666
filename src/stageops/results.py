"""
Tagged results for operations that degrade instead of failing.

Reading an env file and paging through stack resources both swallow errors and
hand back whatever they have. ``Partial`` keeps that behaviour while still
telling the caller that something went wrong and why.
"""

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Complete(Generic[T]):
    """The operation finished normally."""

    value: T

    @property
    def is_partial(self) -> bool:
        return False


@dataclass(frozen=True)
class Partial(Generic[T]):
    """The operation hit ``cause`` and returned what it had collected."""

    value: T
    cause: BaseException

    @property
    def is_partial(self) -> bool:
        return True


Result = Union[Complete[T], Partial[T]]
