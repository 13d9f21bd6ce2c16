# app/domain/result.py
from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from app.domain.errors import CartError

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err:
    error: CartError


Result = Union[Ok[T], Err]
