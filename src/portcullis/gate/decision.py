"""
Access decisions and token requirements.

An AccessDecision is one of three frozen records, Granted, Denied or
Errored. They share no base class: code matches on them with isinstance,
or reads the ``granted`` flag each of them carries.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union


class TokenKind(str, Enum):
    ERC20 = "erc20"
    ERC721 = "erc721"


@dataclass(frozen=True)
class TokenRequirement:
    """Hold at least ``min_balance`` of the token at ``contract_address``."""

    contract_address: str
    min_balance: int = 1
    kind: TokenKind = TokenKind.ERC20

    def __post_init__(self) -> None:
        if isinstance(self.min_balance, bool) or not isinstance(self.min_balance, int):
            raise ValueError(f"min_balance must be an int, got {self.min_balance!r}")
        if self.min_balance < 0:
            raise ValueError(f"min_balance must be non-negative, got {self.min_balance}")
        object.__setattr__(self, "kind", TokenKind(self.kind))


@dataclass(frozen=True)
class Granted:
    current: int
    required: int

    @property
    def granted(self) -> bool:
        return True


@dataclass(frozen=True)
class Denied:
    current: int
    required: int

    @property
    def granted(self) -> bool:
        return False

    @property
    def missing(self) -> int:
        return self.required - self.current


@dataclass(frozen=True)
class Errored:
    """The balance could not be read; ``cause`` says why."""

    cause: BaseException

    @property
    def granted(self) -> bool:
        return False


AccessDecision = Union[Granted, Denied, Errored]
