"""
Shared fixtures: an in-memory database, a temporary uploads directory and a
handful of users and groups in known states.
"""

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from spshare.core.database import init_db
from spshare.core.security import get_password_hash
from spshare.core.storage import LocalStorage
from spshare.models import Group, Item, ItemType, Membership, User, WorkflowStatus

TEST_PASSWORD = "Secret123!"


@pytest.fixture(scope="session")
def password_hash():
    # bcrypt is slow; hash once per run
    return get_password_hash(TEST_PASSWORD)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def storage(tmp_path):
    return LocalStorage(str(tmp_path / "uploads"))


@pytest.fixture
def make_user(db, password_hash):
    def _make_user(
        username,
        is_admin=False,
        workflow_status=WorkflowStatus.APPROVED,
        max_item_count=20,
        max_item_space=100.0,
    ):
        user = User(
            first_name=username.capitalize(),
            last_name="Tester",
            email=f"{username}@example.com",
            username=username,
            hashed_password=password_hash,
            is_admin=is_admin,
            workflow_status=workflow_status,
            max_item_count=max_item_count,
            max_item_space=max_item_space,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def admin(make_user):
    return make_user("admin", is_admin=True)


@pytest.fixture
def alice(make_user):
    return make_user("alice")


@pytest.fixture
def bob(make_user):
    return make_user("bob")


@pytest.fixture
def make_group(db):
    def _make_group(
        name,
        leader,
        workflow_status=WorkflowStatus.APPROVED,
        max_item_count=100,
        max_item_space=500.0,
    ):
        group = Group(
            name=name,
            created_by=leader.id,
            workflow_status=workflow_status,
            max_item_count=max_item_count,
            max_item_space=max_item_space,
        )
        db.add(group)
        db.commit()
        db.refresh(group)

        db.add(
            Membership(
                user_id=leader.id,
                group_id=group.id,
                created_by=leader.id,
                is_leader=True,
                workflow_status=WorkflowStatus.APPROVED,
            )
        )
        db.commit()
        return group

    return _make_group


@pytest.fixture
def hikers(make_group, alice):
    """Approved group led by alice."""
    return make_group("Hikers", alice)


@pytest.fixture
def add_item(db):
    def _add_item(owner, group, size_bytes, item_type=ItemType.PICTURE, uploaded=True, name="photo"):
        item = Item(
            name=name,
            description="test item",
            item_type=item_type,
            size_bytes=size_bytes,
            path=f"uploads/{name}",
            uploaded=uploaded,
            group_id=group.id,
            created_by=owner.id,
        )
        db.add(item)
        db.commit()
        db.refresh(item)
        return item

    return _add_item
