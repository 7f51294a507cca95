"""
Global pytest configuration and fixtures.
"""
import datetime as dt
from typing import Dict, Optional

import pytest

from timebill.config import TimebillConfig, reload_config, reset_logging
from timebill.db.database import get_engine, get_session_factory, init_db
from timebill.db.models import Client, Company, Contract, TrackingSession
from timebill.services.document_numbers import generate_contract_number


@pytest.fixture(scope="session")
def test_env_vars() -> Dict[str, str]:
    """Test environment variables for configuration."""
    return {
        'DEBUG': 'false',
        'LOG_LEVEL': 'DEBUG',
        'INVOICE_DUE_DAYS': '30',
    }


@pytest.fixture
def mock_env(test_env_vars, monkeypatch, tmp_path):
    """Mock environment variables for testing."""
    env = dict(test_env_vars, DATABASE_PATH=str(tmp_path / "env.db"))
    for key, value in env.items():
        monkeypatch.setenv(key, value)

    # Clear the global config to force reload with test values
    import timebill.config.settings
    timebill.config.settings._config = None

    yield env

    timebill.config.settings._config = None


@pytest.fixture
def test_config(mock_env) -> TimebillConfig:
    """Test configuration instance."""
    return reload_config()


@pytest.fixture
def db_path(tmp_path):
    """Path of the per-test SQLite database."""
    return tmp_path / "timebill.db"


@pytest.fixture
def db_engine(db_path):
    """Engine bound to a fresh database with the full schema."""
    engine = get_engine(db_path, echo=False)
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(db_engine):
    """Session on the test database."""
    session = get_session_factory(db_engine)()
    yield session
    session.close()


class StoreSeeder:
    """Insert companies, clients, contracts and tracking sessions for tests."""

    def __init__(self, session):
        self.session = session
        self._next_start = dt.datetime(2025, 1, 6, 9, 0)

    def _save(self, obj):
        self.session.add(obj)
        self.session.commit()
        return obj

    def company(self, name: str = "Freelance Studio") -> Company:
        return self._save(Company(name=name, email="billing@studio.test"))

    def client(self, name: str = "Acme") -> Client:
        return self._save(Client(name=name, email=f"{name.lower()}@client.test"))

    def contract(
        self,
        client: Client,
        contract_type: str = "hourly",
        hourly_rate: Optional[float] = None,
        fixed_price: Optional[float] = None,
        currency: str = "USD",
        name: str = "Main engagement",
        start_date: dt.date = dt.date(2025, 1, 1),
    ) -> Contract:
        number = generate_contract_number(self.session, start_date)
        return self._save(
            Contract(
                contract_num=number,
                client_id=client.id,
                name=name,
                contract_type=contract_type,
                hourly_rate=hourly_rate,
                fixed_price=fixed_price,
                currency=currency,
                start_date=start_date,
            )
        )

    def tracking(
        self,
        client: Optional[Client],
        contract: Optional[Contract] = None,
        hours: Optional[float] = 1.0,
        project: str = "Development",
        notes: Optional[str] = None,
        billable: bool = True,
        deleted: bool = False,
        start: Optional[dt.datetime] = None,
    ) -> TrackingSession:
        if start is None:
            start = self._next_start
            self._next_start += dt.timedelta(days=1)
        end = start + dt.timedelta(hours=hours) if hours is not None else None
        return self._save(
            TrackingSession(
                client_id=client.id if client is not None else None,
                contract_id=contract.id if contract is not None else None,
                project_name=project,
                start_time=start,
                end_time=end,
                duration=int(hours * 3600) if hours is not None else None,
                hours=hours,
                billable=billable,
                notes=notes,
                deleted_at=dt.datetime(2025, 2, 1) if deleted else None,
            )
        )


@pytest.fixture
def seed(db_session) -> StoreSeeder:
    """Seeder bound to the test session."""
    return StoreSeeder(db_session)


@pytest.fixture(autouse=True)
def cleanup_logging():
    """Drop handlers installed by CLI runs so they do not leak between tests."""
    yield
    reset_logging()


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )


def pytest_collection_modifyitems(config, items):
    """Add the unit marker to tests under tests/unit/."""
    for item in items:
        if "tests/unit/" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
