"""Tests for access decisions and the gating engine."""

from __future__ import annotations

import dataclasses
import logging
import time
from concurrent import futures

import pytest

from portcullis.errors import Cancelled, ContractCallFailure, InvalidAddress
from portcullis.gate import engine as engine_module
from portcullis.gate import (
    Denied,
    Errored,
    GatingEngine,
    Granted,
    TokenKind,
    TokenRequirement,
)
from portcullis.pneuma.reader import ContractReader

from .conftest import NFT, OTHER_TOKEN, TOKEN, WALLET, FakeNode, address_word

THIRD_TOKEN = "0x" + "dd" * 20


@pytest.fixture()
def engine(reader: ContractReader) -> GatingEngine:
    return GatingEngine(reader, max_workers=4)


class TestDecisionTypes:
    def test_granted(self) -> None:
        decision = Granted(1500, 1000)
        assert decision.granted
        assert (decision.current, decision.required) == (1500, 1000)

    def test_denied_missing(self) -> None:
        decision = Denied(500, 1000)
        assert not decision.granted
        assert decision.missing == 500

    def test_errored(self) -> None:
        cause = InvalidAddress("nope")
        decision = Errored(cause)
        assert not decision.granted
        assert decision.cause is cause

    def test_decisions_are_frozen(self) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            Granted(1, 1).current = 2  # type: ignore[misc]

    def test_variants_share_no_base(self) -> None:
        assert not issubclass(Denied, Granted)
        assert Granted.__mro__[1] is object
        assert Denied.__mro__[1] is object
        assert Errored.__mro__[1] is object


class TestTokenRequirement:
    def test_defaults(self) -> None:
        requirement = TokenRequirement(TOKEN)
        assert requirement.min_balance == 1
        assert requirement.kind is TokenKind.ERC20

    def test_kind_from_string(self) -> None:
        assert TokenRequirement(NFT, 1, "erc721").kind is TokenKind.ERC721  # type: ignore[arg-type]

    def test_unknown_kind(self) -> None:
        with pytest.raises(ValueError):
            TokenRequirement(NFT, 1, "erc1155")  # type: ignore[arg-type]

    @pytest.mark.parametrize("value", [-1, True, 1.5, "10"])
    def test_rejects_bad_min_balance(self, value: object) -> None:
        with pytest.raises(ValueError):
            TokenRequirement(TOKEN, value)  # type: ignore[arg-type]

    def test_zero_is_allowed(self) -> None:
        assert TokenRequirement(TOKEN, 0).min_balance == 0


class TestVerifyAccess:
    """Single requirement: Granted iff balance >= min_balance."""

    def test_end_to_end_denied(self, engine: GatingEngine, node: FakeNode) -> None:
        contract = "0x" + "AA" * 20
        node.set_balance(contract, WALLET, 500)
        decision = engine.verify_access(WALLET, contract, 1000)
        assert decision == Denied(500, 1000)
        assert decision.missing == 500

    def test_end_to_end_granted(self, engine: GatingEngine, node: FakeNode) -> None:
        contract = "0x" + "AA" * 20
        node.set_balance(contract, WALLET, 1500)
        assert engine.verify_access(WALLET, contract, 1000) == Granted(1500, 1000)

    @pytest.mark.parametrize(
        "balance, required, granted",
        [(0, 0, True), (0, 1, False), (1, 1, True), (999, 1000, False), (1000, 1000, True),
         (2**256 - 1, 2**255, True)],
    )
    def test_threshold(
        self, engine: GatingEngine, node: FakeNode, balance: int, required: int, granted: bool
    ) -> None:
        node.set_balance(TOKEN, WALLET, balance)
        decision = engine.verify_access(WALLET, TOKEN, required)
        assert decision.granted is granted
        assert decision == (Granted if granted else Denied)(balance, required)
        assert engine.check_access(WALLET, TOKEN, required) is granted

    def test_erc721_balance(self, engine: GatingEngine, node: FakeNode) -> None:
        node.set_balance(NFT, WALLET, 1)
        assert engine.verify_access(WALLET, NFT, 1, TokenKind.ERC721) == Granted(1, 1)

    def test_evaluate_requirement(self, engine: GatingEngine, node: FakeNode) -> None:
        node.set_balance(TOKEN, WALLET, 3)
        assert engine.evaluate(WALLET, TokenRequirement(TOKEN, 5)) == Denied(3, 5)

    def test_invalid_wallet_is_errored(self, engine: GatingEngine, node: FakeNode) -> None:
        decision = engine.verify_access("0xnot-a-wallet", TOKEN)
        assert isinstance(decision, Errored)
        assert isinstance(decision.cause, InvalidAddress)
        assert node.requests == []

    def test_invalid_contract_is_errored(self, engine: GatingEngine) -> None:
        decision = engine.verify_access(WALLET, "0x1234")
        assert isinstance(decision, Errored)
        assert isinstance(decision.cause, InvalidAddress)

    def test_revert_is_errored(self, engine: GatingEngine) -> None:
        decision = engine.verify_access(WALLET, TOKEN)
        assert isinstance(decision, Errored)
        assert isinstance(decision.cause, ContractCallFailure)
        assert not engine.check_access(WALLET, TOKEN)

    def test_network_failure_is_errored(self, engine: GatingEngine, node: FakeNode) -> None:
        node.set_balance(TOKEN, WALLET, 10, disconnect=True)
        assert isinstance(engine.verify_access(WALLET, TOKEN), Errored)

    def test_garbled_body_is_errored(self, engine: GatingEngine, node: FakeNode) -> None:
        node.set_balance(TOKEN, WALLET, 10, garbled=True)
        decision = engine.verify_access(WALLET, TOKEN)
        assert isinstance(decision, Errored)
        assert isinstance(decision.cause, ContractCallFailure)

    def test_garbage_payload_is_errored(self, engine: GatingEngine, node: FakeNode) -> None:
        node.on(TOKEN, "balanceOf(address)", address_word(WALLET), result="0xnothex")
        assert isinstance(engine.verify_access(WALLET, TOKEN), Errored)

    def test_negative_min_balance_is_errored(self, engine: GatingEngine, node: FakeNode) -> None:
        decision = engine.verify_access(WALLET, TOKEN, -5)
        assert isinstance(decision, Errored)
        assert isinstance(decision.cause, ValueError)
        assert node.requests == []

    def test_fresh_read_every_time(self, engine: GatingEngine, node: FakeNode) -> None:
        node.set_balance(TOKEN, WALLET, 5)
        assert engine.check_access(WALLET, TOKEN, 5)
        node.set_balance(TOKEN, WALLET, 4)
        assert not engine.check_access(WALLET, TOKEN, 5)
        assert node.call_count == 2


class TestBatches:
    """ANY = OR, ALL = AND, errors count as false and stay isolated."""

    @pytest.mark.parametrize(
        "balances, expect_any, expect_all",
        [
            ((10, 10), True, True),
            ((10, 0), True, False),
            ((0, 0), False, False),
            ((None, 10), True, False),
            ((None, None), False, False),
        ],
    )
    def test_any_all_truth_table(
        self,
        engine: GatingEngine,
        node: FakeNode,
        balances: tuple,
        expect_any: bool,
        expect_all: bool,
    ) -> None:
        contracts = [TOKEN, OTHER_TOKEN]
        for contract, balance in zip(contracts, balances):
            if balance is not None:
                node.set_balance(contract, WALLET, balance)
        requirements = [TokenRequirement(c, 10) for c in contracts]

        assert engine.check_access_any(WALLET, requirements) is expect_any
        assert engine.check_access_all(WALLET, requirements) is expect_all

    def test_empty_requirements(self, engine: GatingEngine, node: FakeNode) -> None:
        assert engine.check_access_any(WALLET, []) is False
        assert engine.check_access_all(WALLET, []) is True
        assert engine.verify_access_all(WALLET, []) == {}
        assert node.requests == []

    def test_single_requirement(self, engine: GatingEngine, node: FakeNode) -> None:
        node.set_balance(TOKEN, WALLET, 1)
        assert engine.check_access_all(WALLET, [TokenRequirement(TOKEN)])
        assert engine.check_access_any(WALLET, iter([TokenRequirement(TOKEN)]))

    def test_verify_all_isolates_failures(self, engine: GatingEngine, node: FakeNode) -> None:
        node.set_balance(TOKEN, WALLET, 100)
        node.set_balance(NFT, WALLET, 0)
        requirements = [
            TokenRequirement(TOKEN, 50),
            TokenRequirement(OTHER_TOKEN, 1),
            TokenRequirement(NFT, 1, TokenKind.ERC721),
            TokenRequirement("0xbad", 1),
        ]

        report = engine.verify_access_all(WALLET, requirements)

        assert list(report) == [TOKEN, OTHER_TOKEN, NFT, "0xbad"]
        assert report[TOKEN] == Granted(100, 50)
        assert isinstance(report[OTHER_TOKEN], Errored)
        assert report[NFT] == Denied(0, 1)
        assert isinstance(report["0xbad"].cause, InvalidAddress)  # type: ignore[union-attr]

    def test_verify_all_duplicate_contract_keeps_later(
        self, engine: GatingEngine, node: FakeNode
    ) -> None:
        node.set_balance(TOKEN, WALLET, 500)
        report = engine.verify_access_all(
            WALLET, [TokenRequirement(TOKEN, 1000), TokenRequirement(TOKEN, 1)]
        )
        assert report == {TOKEN: Granted(500, 1)}

    def test_many_requirements_few_workers(self, reader: ContractReader, node: FakeNode) -> None:
        engine = GatingEngine(reader, max_workers=2)
        contracts = ["0x" + format(i, "040x") for i in range(1, 21)]
        for i, contract in enumerate(contracts):
            node.set_balance(contract, WALLET, i)

        report = engine.verify_access_all(WALLET, [TokenRequirement(c, 10) for c in contracts])

        assert len(report) == 20
        assert sum(1 for d in report.values() if d.granted) == 10
        assert sorted(r["id"] for r in node.requests) == list(range(1, 21))

    def test_rejects_zero_workers(self, reader: ContractReader) -> None:
        with pytest.raises(ValueError):
            GatingEngine(reader, max_workers=0)


class TestDeadlinesAndEarlyExit:
    def test_deadline_cancels_only_the_slow_read(
        self, engine: GatingEngine, node: FakeNode, caplog: pytest.LogCaptureFixture
    ) -> None:
        node.slow_balance(TOKEN, WALLET, 100)
        node.set_balance(OTHER_TOKEN, WALLET, 5)
        requirements = [TokenRequirement(TOKEN, 1), TokenRequirement(OTHER_TOKEN, 1)]

        with caplog.at_level(logging.WARNING, logger="portcullis.gate.engine"):
            report = engine.verify_access_all(WALLET, requirements, deadline=0.3)
        node.released.set()

        assert isinstance(report[TOKEN], Errored)
        assert isinstance(report[TOKEN].cause, Cancelled)  # type: ignore[union-attr]
        assert report[OTHER_TOKEN] == Granted(5, 1)
        assert any("deadline" in record.getMessage() for record in caplog.records)

    def test_deadline_with_nothing_granted(self, engine: GatingEngine, node: FakeNode) -> None:
        node.slow_balance(TOKEN, WALLET, 100)
        node.set_balance(OTHER_TOKEN, WALLET, 0)
        requirements = [TokenRequirement(TOKEN, 1), TokenRequirement(OTHER_TOKEN, 1)]

        assert engine.check_access_any(WALLET, requirements, deadline=0.3) is False
        node.released.set()

    def test_deadline_on_single_requirement(self, engine: GatingEngine, node: FakeNode) -> None:
        node.slow_balance(TOKEN, WALLET, 100)
        report = engine.verify_access_all(WALLET, [TokenRequirement(TOKEN)], deadline=0.2)
        node.released.set()
        assert isinstance(report[TOKEN], Errored)

    def test_finished_reads_survive_the_deadline(
        self, engine: GatingEngine, node: FakeNode, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Reads done before the deadline fired keep their decision even if not yet collected."""
        node.set_balance(TOKEN, WALLET, 3)
        node.set_balance(OTHER_TOKEN, WALLET, 0)

        def expire(pending, timeout=None):
            futures.wait(pending)
            raise futures.TimeoutError()

        monkeypatch.setattr(engine_module.futures, "as_completed", expire)
        requirements = [TokenRequirement(TOKEN), TokenRequirement(OTHER_TOKEN)]
        report = engine.verify_access_all(WALLET, requirements, deadline=0.5)

        assert report == {TOKEN: Granted(3, 1), OTHER_TOKEN: Denied(0, 1)}

    def test_generous_deadline_changes_nothing(self, engine: GatingEngine, node: FakeNode) -> None:
        node.set_balance(TOKEN, WALLET, 1)
        node.set_balance(OTHER_TOKEN, WALLET, 1)
        requirements = [TokenRequirement(TOKEN), TokenRequirement(OTHER_TOKEN)]
        assert engine.check_access_all(WALLET, requirements, deadline=10.0)

    def test_any_returns_on_first_grant(self, engine: GatingEngine, node: FakeNode) -> None:
        node.slow_balance(TOKEN, WALLET, 100)
        node.set_balance(OTHER_TOKEN, WALLET, 1)
        requirements = [TokenRequirement(TOKEN), TokenRequirement(OTHER_TOKEN)]

        started = time.monotonic()
        assert engine.check_access_any(WALLET, requirements)
        elapsed = time.monotonic() - started
        node.released.set()

        assert elapsed < 2.0

    def test_all_returns_on_first_refusal(self, engine: GatingEngine, node: FakeNode) -> None:
        node.slow_balance(TOKEN, WALLET, 100)
        node.set_balance(OTHER_TOKEN, WALLET, 0)
        requirements = [TokenRequirement(TOKEN), TokenRequirement(OTHER_TOKEN)]

        started = time.monotonic()
        assert not engine.check_access_all(WALLET, requirements)
        elapsed = time.monotonic() - started
        node.released.set()

        assert elapsed < 2.0

    def test_early_exit_never_changes_the_answer(
        self, engine: GatingEngine, node: FakeNode
    ) -> None:
        node.set_balance(TOKEN, WALLET, 0)
        node.set_balance(OTHER_TOKEN, WALLET, 0)
        node.set_balance(THIRD_TOKEN, WALLET, 7)
        requirements = [TokenRequirement(c) for c in (TOKEN, OTHER_TOKEN, THIRD_TOKEN)]

        assert engine.check_access_any(WALLET, requirements)
        assert not engine.check_access_all(WALLET, requirements)
