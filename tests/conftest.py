import sys
from pathlib import Path as _Path
sys.path.insert(0, str(_Path(__file__).resolve().parents[1] / "src"))

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from btcchecker.app import create_app
from btcchecker.auth.store import CredentialStore
from btcchecker.config import Config
from btcchecker.rates import BTCRate


@pytest.fixture()
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "storage" / "db.csv"


@pytest.fixture()
def store(db_path: Path) -> CredentialStore:
    return CredentialStore(db_path)


@pytest.fixture()
def config(db_path: Path) -> Config:
    return Config(database_path=str(db_path), session_key="test-secret")


class FakeRates:
    """Stands in for RateClient so no test talks to the network."""

    def __init__(self, rate: float = 1_234_567.89, currency: str = "uah"):
        self.rate = rate
        self.currency = currency
        self.calls = 0

    def current(self) -> BTCRate:
        self.calls += 1
        return BTCRate(currency=self.currency, rate=self.rate)


@pytest.fixture()
def fake_rates() -> FakeRates:
    return FakeRates()


@pytest.fixture()
def client(config: Config, store: CredentialStore, fake_rates: FakeRates) -> TestClient:
    app = create_app(config, store=store, rates=fake_rates)
    return TestClient(app)
