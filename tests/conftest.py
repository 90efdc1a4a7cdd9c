import logging
from pathlib import Path

import msgspec
import pytest

from observability import init_observability
from providers import ChainSnapshot, InMemoryChainStore
from services import BeaconQueryService
from tests.chain_data import SLOTS_PER_EPOCH, build_chain_snapshot


@pytest.fixture(autouse=True, scope="session")
def _init_observability(
    tmp_path_factory: pytest.TempPathFactory,
) -> None:
    init_observability(
        log_level=logging.DEBUG,
        data_dir=tmp_path_factory.mktemp("logs"),
    )


@pytest.fixture
def chain_snapshot() -> ChainSnapshot:
    return build_chain_snapshot()


@pytest.fixture
def chain_snapshot_path(chain_snapshot: ChainSnapshot, tmp_path: Path) -> Path:
    fp = tmp_path / "chain-snapshot.json"
    with Path.open(fp, "wb") as f:
        f.write(msgspec.json.encode(chain_snapshot))
    return fp


@pytest.fixture
def chain_store(chain_snapshot: ChainSnapshot) -> InMemoryChainStore:
    return InMemoryChainStore(
        genesis=chain_snapshot.genesis,
        blocks=chain_snapshot.blocks,
        states=chain_snapshot.states,
        slots_per_epoch=SLOTS_PER_EPOCH,
    )


@pytest.fixture
def beacon_query_service(chain_store: InMemoryChainStore) -> BeaconQueryService:
    return BeaconQueryService(chain_store=chain_store)

