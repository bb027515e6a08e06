"""
Global test configuration: markers, environment isolation and ledger fixtures.
"""

from collections.abc import Callable
import logging
import os
from types import MappingProxyType
import typing

import pytest

from ledger_entry.config import FrozenConfig
from ledger_entry.executor import LedgerEntryExecutor
from ledger_entry.protocol import keylets
from ledger_entry.protocol.accounts import AccountID
from ledger_entry.protocol.bridge import ChainType, XChainBridge
from ledger_entry.protocol.currency import NATIVE_ISSUE, Currency, Issue
from ledger_entry.protocol.hashes import Hash256
from ledger_entry.protocol.ledger_types import LedgerEntryType
from ledger_entry.snapshot import LedgerHistory, LedgerSnapshot

# --- Environment Isolation (Autouse) ---


@pytest.fixture(autouse=True)
def isolate_ledger_entry_env(request, monkeypatch):
    """Ensure a clean LEDGER_ENTRY_* environment for each test.

    Escape hatch: @pytest.mark.allow_env_pollution keeps the environment.
    """
    if request.node.get_closest_marker("allow_env_pollution"):
        return
    for key in list(os.environ.keys()):
        if key.startswith("LEDGER_ENTRY_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def neutral_home_config(request, monkeypatch, tmp_path):
    """Point the home-config path to an isolated, absent temp file.

    Prevents reading a developer's real ~/.config/ledger_entry.toml.

    Escape hatch: @pytest.mark.allow_real_home_config uses the real path.
    """
    if request.node.get_closest_marker("allow_real_home_config"):
        return
    fake_home_dir = tmp_path / "home_config_isolated"
    fake_home_dir.mkdir(parents=True, exist_ok=True)
    monkeypatch.setenv(
        "LEDGER_ENTRY_CONFIG_HOME", str(fake_home_dir / "ledger_entry.toml")
    )


# --- Logging Fixtures ---
@pytest.fixture(scope="session", autouse=True)
def quiet_library_logs():
    """Keep debug output from the library out of test reports."""
    logging.getLogger("ledger_entry").setLevel(logging.WARNING)


# --- Test Environment Markers ---
def pytest_configure(config):
    """Configure custom markers for test organization."""
    markers = [
        "unit: Fast, isolated unit tests",
        "integration: End-to-end lookups through the executor",
        "allow_env_pollution: Keep LEDGER_ENTRY_* variables from the real environment",
        "allow_real_home_config: Read the real home configuration file",
    ]
    for marker in markers:
        config.addinivalue_line("markers", marker)


# --- Accounts and descriptors ---


@pytest.fixture(scope="session")
def alice() -> AccountID:
    return AccountID(bytes([0xA1]) * 20)


@pytest.fixture(scope="session")
def bob() -> AccountID:
    return AccountID(bytes([0xB2]) * 20)


@pytest.fixture(scope="session")
def carol() -> AccountID:
    """An account with no objects in the standard ledger."""
    return AccountID(bytes([0xC3]) * 20)


@pytest.fixture(scope="session")
def usd() -> Currency:
    currency = Currency.from_code("USD")
    assert currency is not None
    return currency


@pytest.fixture(scope="session")
def bridge_spec(alice, bob) -> XChainBridge:
    """Alice is the locking-chain door, Bob the issuing-chain door."""
    return XChainBridge(
        locking_chain_door=alice,
        locking_chain_issue=NATIVE_ISSUE,
        issuing_chain_door=bob,
        issuing_chain_issue=NATIVE_ISSUE,
    )


@pytest.fixture(scope="session")
def bridge_json(bridge_spec) -> dict[str, typing.Any]:
    return bridge_spec.to_json()


# --- Ledger fixtures ---

CHECK_KEY = Hash256(bytes([0x0C]) * 32)
PAYCHAN_KEY = Hash256(bytes([0x0D]) * 32)
NFT_PAGE_KEY = Hash256(bytes([0x0E]) * 32)
LEDGER_HASH = Hash256(bytes([0x11]) * 32)


@pytest.fixture(scope="session")
def ledger_keys(alice, bob, usd, bridge_spec) -> MappingProxyType:
    """Keys of every object in the standard ledger, by a short name."""
    owner_root = keylets.owner_dir(alice)
    return MappingProxyType(
        {
            "alice_root": keylets.account(alice),
            "bob_root": keylets.account(bob),
            "check": CHECK_KEY,
            "paychan": PAYCHAN_KEY,
            "preauth": keylets.deposit_preauth(alice, bob),
            "owner_dir": owner_root,
            "owner_dir_page1": keylets.page(owner_root, 1),
            "escrow": keylets.escrow(alice, 5),
            "offer": keylets.offer(alice, 7),
            "ticket": keylets.ticket(alice, 9),
            "line": keylets.line(alice, bob, usd),
            "nft_page": NFT_PAGE_KEY,
            "amm": keylets.amm(NATIVE_ISSUE, Issue(usd, alice)),
            "bridge": keylets.bridge(bridge_spec, ChainType.LOCKING),
            "claim_id": keylets.xchain_claim_id(bridge_spec, 1),
            "create_account_claim_id": keylets.xchain_create_account_claim_id(
                bridge_spec, 2
            ),
            "did": keylets.did(alice),
            "oracle": keylets.oracle(alice, 1),
        }
    )


_LEDGER_TYPES: dict[str, LedgerEntryType] = {
    "alice_root": LedgerEntryType.ACCOUNT_ROOT,
    "bob_root": LedgerEntryType.ACCOUNT_ROOT,
    "check": LedgerEntryType.CHECK,
    "paychan": LedgerEntryType.PAYCHAN,
    "preauth": LedgerEntryType.DEPOSIT_PREAUTH,
    "owner_dir": LedgerEntryType.DIR_NODE,
    "owner_dir_page1": LedgerEntryType.DIR_NODE,
    "escrow": LedgerEntryType.ESCROW,
    "offer": LedgerEntryType.OFFER,
    "ticket": LedgerEntryType.TICKET,
    "line": LedgerEntryType.RIPPLE_STATE,
    "nft_page": LedgerEntryType.NFTOKEN_PAGE,
    "amm": LedgerEntryType.AMM,
    "bridge": LedgerEntryType.BRIDGE,
    "claim_id": LedgerEntryType.XCHAIN_OWNED_CLAIM_ID,
    "create_account_claim_id": LedgerEntryType.XCHAIN_OWNED_CREATE_ACCOUNT_CLAIM_ID,
    "did": LedgerEntryType.DID,
    "oracle": LedgerEntryType.ORACLE,
}


@pytest.fixture(scope="session")
def ledger(ledger_keys) -> LedgerSnapshot:
    """A validated snapshot holding one object of every supported type."""
    return LedgerSnapshot.from_objects(
        (
            (key, _LEDGER_TYPES[name], {"Name": name})
            for name, key in ledger_keys.items()
        ),
        ledger_index=10,
        ledger_hash=LEDGER_HASH,
        validated=True,
    )


@pytest.fixture
def make_executor(ledger) -> Callable[..., LedgerEntryExecutor]:
    """Factory for executors over the standard ledger.

    Usage:
        executor = make_executor(api_version=2)
    """

    def _make(**config_fields: typing.Any) -> LedgerEntryExecutor:
        return LedgerEntryExecutor(FrozenConfig(**config_fields), LedgerHistory([ledger]))

    return _make


@pytest.fixture
def executor(make_executor) -> LedgerEntryExecutor:
    return make_executor()
