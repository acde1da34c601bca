"""
Token gating engine.

Turns balances into access decisions. This is the error boundary of the
library: whatever goes wrong while reading a balance (bad address, node
error, network down, garbage payload) comes back as an ``Errored``
decision, never as an exception.

Batches (any / all / verify-all) run on a bounded thread pool. Every
requirement is evaluated independently; the only shared state is the
transport's request-id counter.
"""

from __future__ import annotations

import logging
from concurrent import futures
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, Optional

from ..errors import Cancelled
from ..pneuma.reader import ContractReader
from ..pneuma.tokens import Erc20Token, Erc721Token
from .decision import (
    AccessDecision,
    Denied,
    Errored,
    Granted,
    TokenKind,
    TokenRequirement,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 8


class GatingEngine:
    """
    Evaluates token requirements for a wallet.

    Args:
        reader: Shared contract reader
        max_workers: Upper bound on concurrent reads per batch
    """

    def __init__(self, reader: ContractReader, max_workers: int = DEFAULT_MAX_WORKERS) -> None:
        if max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {max_workers}")
        self.reader = reader
        self.max_workers = max_workers

    # ------------------------------------------------------------------
    # Single requirement
    # ------------------------------------------------------------------

    def _read_balance(self, wallet: str, requirement: TokenRequirement) -> int:
        if requirement.kind is TokenKind.ERC721:
            token = Erc721Token(requirement.contract_address, self.reader)
        else:
            token = Erc20Token(requirement.contract_address, self.reader)
        return token.balance_of(wallet)

    def verify_access(
        self,
        wallet: str,
        contract: str,
        min_balance: int = 1,
        kind: TokenKind = TokenKind.ERC20,
    ) -> AccessDecision:
        """
        Check one requirement and report the full outcome.

        Returns:
            Granted if balance >= min_balance, Denied otherwise, Errored if
            the balance could not be read. Never raises.
        """
        try:
            requirement = TokenRequirement(contract, min_balance, kind)
            balance = self._read_balance(wallet, requirement)
        except Exception as exc:
            logger.debug("access check for %s on %s errored: %s", wallet, contract, exc)
            return Errored(exc)

        if balance >= requirement.min_balance:
            decision: AccessDecision = Granted(balance, requirement.min_balance)
        else:
            decision = Denied(balance, requirement.min_balance)
        logger.debug(
            "access check for %s on %s: %s (%d/%d)",
            wallet, contract, type(decision).__name__, balance, requirement.min_balance,
        )
        return decision

    def evaluate(self, wallet: str, requirement: TokenRequirement) -> AccessDecision:
        return self.verify_access(
            wallet, requirement.contract_address, requirement.min_balance, requirement.kind
        )

    def check_access(
        self,
        wallet: str,
        contract: str,
        min_balance: int = 1,
        kind: TokenKind = TokenKind.ERC20,
    ) -> bool:
        """True only for Granted; Denied and Errored both mean no access."""
        return self.verify_access(wallet, contract, min_balance, kind).granted

    # ------------------------------------------------------------------
    # Batches
    # ------------------------------------------------------------------

    def _evaluate_batch(
        self,
        wallet: str,
        requirements: list[TokenRequirement],
        deadline: Optional[float] = None,
        stop_on: Optional[bool] = None,
    ) -> list[Optional[AccessDecision]]:
        """
        Evaluate ``requirements`` concurrently, in input order.

        With ``stop_on`` set, stops at the first decision whose ``granted``
        flag equals it; entries never reached stay None. Entries still
        pending when ``deadline`` seconds elapse become Errored(Cancelled).
        """
        decisions: list[Optional[AccessDecision]] = [None] * len(requirements)
        if not requirements:
            return decisions

        if len(requirements) == 1 and deadline is None:
            decisions[0] = self.evaluate(wallet, requirements[0])
            return decisions

        executor = ThreadPoolExecutor(
            max_workers=min(self.max_workers, len(requirements)),
            thread_name_prefix="portcullis-gate",
        )
        submitted = {
            executor.submit(self.evaluate, wallet, requirement): index
            for index, requirement in enumerate(requirements)
        }
        try:
            for future in futures.as_completed(submitted, timeout=deadline):
                decision = future.result()
                decisions[submitted[future]] = decision
                if stop_on is not None and decision.granted is stop_on:
                    break
        except futures.TimeoutError:
            # Reads that finished but were not yielded yet keep their result
            for future, index in submitted.items():
                if decisions[index] is None and future.done() and not future.cancelled():
                    decisions[index] = future.result()
            unfinished = [i for i, decision in enumerate(decisions) if decision is None]
            logger.warning(
                "gating deadline of %ss elapsed, cancelling %d pending read(s)",
                deadline, len(unfinished),
            )
            for index in unfinished:
                decisions[index] = Errored(Cancelled())
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        return decisions

    def check_access_any(
        self,
        wallet: str,
        requirements: Iterable[TokenRequirement],
        deadline: Optional[float] = None,
    ) -> bool:
        """True if at least one requirement is met (OR). Empty list: False."""
        decisions = self._evaluate_batch(wallet, list(requirements), deadline, stop_on=True)
        return any(decision is not None and decision.granted for decision in decisions)

    def check_access_all(
        self,
        wallet: str,
        requirements: Iterable[TokenRequirement],
        deadline: Optional[float] = None,
    ) -> bool:
        """True if every requirement is met (AND). Empty list: True."""
        decisions = self._evaluate_batch(wallet, list(requirements), deadline, stop_on=False)
        return all(decision is not None and decision.granted for decision in decisions)

    def verify_access_all(
        self,
        wallet: str,
        requirements: Iterable[TokenRequirement],
        deadline: Optional[float] = None,
    ) -> dict[str, AccessDecision]:
        """
        Evaluate every requirement and report each outcome by contract.

        One requirement failing never hides another's result. If a contract
        address appears twice, the later requirement's decision is kept.
        """
        requirements = list(requirements)
        decisions = self._evaluate_batch(wallet, requirements, deadline)
        report: dict[str, AccessDecision] = {}
        for requirement, decision in zip(requirements, decisions):
            report[requirement.contract_address] = (
                decision if decision is not None else Errored(Cancelled())
            )
        return report
