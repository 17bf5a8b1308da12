from decimal import Decimal

import pytest
import httpx
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from solcraft.api.dependencies import get_db
from solcraft.core.database import Base
from solcraft.core.security import create_user_token
from solcraft.main import app
from solcraft.models import PlayerProfile, Tournament, TournamentStatus, User
import solcraft.models  # noqa: F401  registers every table on Base


@pytest.fixture
def engine():
    # One shared in-memory database per test
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides = {}


def _add_user(db, name, ranking=None, is_admin=False):
    user = User(name=name, email=f"{name.lower()}@example.com", is_admin=is_admin)
    db.add(user)
    db.commit()
    db.refresh(user)
    if ranking is not None:
        db.add(PlayerProfile(user_id=user.id, ranking=ranking, tournaments_played=12, win_rate=0.25))
        db.commit()
    return user


@pytest.fixture
def player(db):
    return _add_user(db, "Player", ranking="GOLD")


@pytest.fixture
def investor(db):
    return _add_user(db, "Investor")


@pytest.fixture
def admin(db):
    return _add_user(db, "Admin", is_admin=True)


@pytest.fixture
def player_without_profile(db):
    return _add_user(db, "Newcomer")


@pytest.fixture
def auth_headers():
    def _headers(user):
        return {"Authorization": f"Bearer {create_user_token(user.id)}"}
    return _headers


@pytest.fixture
def api_transport(client):
    """httpx transport that hands every request to the in-process app."""
    def forward(request: httpx.Request) -> httpx.Response:
        response = client.request(
            request.method,
            request.url.raw_path.decode(),
            headers=dict(request.headers),
            content=request.content,
        )
        return httpx.Response(response.status_code, headers=response.headers, content=response.content)
    return httpx.MockTransport(forward)


@pytest.fixture
def make_tournament(db):
    """Inserts a tournament directly, bypassing the payment flow."""
    def _make(creator, status=TournamentStatus.PENDING_INITIAL_PAYMENT, target="100", current="0", **overrides):
        target_amount = Decimal(target)
        values = dict(
            creator_user_id=creator.id,
            name="Sunday Million Backing",
            game_type="Poker",
            target_pool_amount=target_amount,
            current_pool_amount=Decimal(current),
            player_ranking_at_creation="GOLD",
            initial_platform_fee_pct=Decimal("0.07"),
            initial_platform_fee_amount=target_amount * Decimal("0.07"),
            initial_platform_fee_paid=False,
            player_guarantee_pct=Decimal("0.25"),
            player_guarantee_amount_required=target_amount * Decimal("0.25"),
            player_guarantee_paid=False,
            status=status.value if isinstance(status, TournamentStatus) else status,
        )
        values.update(overrides)
        tournament = Tournament(**values)
        db.add(tournament)
        db.commit()
        db.refresh(tournament)
        return tournament
    return _make
