"""Unit tests for the user entity package.

Covers the domain model rules (address book) and the repository that maps
it to the users and user_addresses tables.
"""

from uuid import UUID

import pytest
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from src.storefront.core.errors import ConflictError
from src.storefront.entities.core.user import (
    Address,
    AddressTable,
    Avatar,
    User,
    UserRepository,
    UserRole,
)


def _user(**fields) -> User:
    data = {"name": "Jane", "email": "jane@example.com", "password_hash": "hash"}
    data.update(fields)
    return User(**data)


class TestUser:
    """Test the User domain entity."""

    def test_user_creation_with_defaults(self):
        """User should be created with auto-generated UUID and the user role."""
        user = _user()

        UUID(user.id)
        assert user.role == UserRole.USER
        assert user.is_admin is False
        assert user.avatar is None
        assert user.addresses == []

    def test_password_hash_not_in_repr(self):
        assert "s3cr3t-digest" not in repr(_user(password_hash="s3cr3t-digest"))

    def test_equality_ignores_timestamps(self):
        user = _user()
        copy = user.model_copy(update={"updated_at": user.updated_at.replace(year=2000)})

        assert user == copy
        assert hash(user) == hash(copy)


class TestAddressBook:
    def test_upsert_appends_new_address(self):
        user = _user()

        user.upsert_address(Address(address_type="Home"))
        user.upsert_address(Address(address_type="Office"))

        assert [a.address_type for a in user.addresses] == ["Home", "Office"]

    def test_upsert_replaces_in_place(self):
        user = _user()
        home = user.upsert_address(Address(address_type="Home", city="Paris"))
        user.upsert_address(Address(address_type="Office"))

        user.upsert_address(Address(id=home.id, address_type="Home", city="Nice"))

        assert user.addresses[0].id == home.id
        assert user.addresses[0].city == "Nice"
        assert len(user.addresses) == 2

    def test_upsert_can_rename_type(self):
        user = _user()
        home = user.upsert_address(Address(address_type="Home"))

        user.upsert_address(Address(id=home.id, address_type="Cottage"))

        assert [a.address_type for a in user.addresses] == ["Cottage"]

    def test_duplicate_type_rejected(self):
        user = _user()
        user.upsert_address(Address(address_type="Home"))

        with pytest.raises(ConflictError) as exc_info:
            user.upsert_address(Address(address_type="Home"))

        assert exc_info.value.message == "Home address already exists"

    def test_unknown_id_is_appended_under_a_fresh_id(self):
        user = _user()

        stored = user.upsert_address(Address(id="client-made-id", address_type="Home", city="Paris"))

        assert stored.id != "client-made-id"
        assert user.find_address("client-made-id") is None
        assert user.find_address(stored.id).city == "Paris"

    def test_remove_address(self):
        user = _user()
        home = user.upsert_address(Address(address_type="Home"))

        assert user.remove_address(home.id) is True
        assert user.remove_address(home.id) is False
        assert user.addresses == []


class TestUserRepository:
    def test_create_and_get(self, session: Session):
        repo = UserRepository(session)
        user = _user(avatar=Avatar(public_id="avatars/1", url="https://img.test/1"))

        created = repo.create(user)
        session.commit()

        fetched = repo.get(created.id)
        assert fetched == user
        assert repo.get_by_email("jane@example.com") == user
        assert repo.exists_by_email("jane@example.com") is True
        assert repo.exists_by_email("other@example.com") is False

    def test_get_missing(self, session: Session):
        assert UserRepository(session).get("missing") is None
        assert UserRepository(session).get_by_email("missing@example.com") is None

    def test_email_is_unique(self, session: Session):
        repo = UserRepository(session)
        repo.create(_user())
        session.commit()

        with pytest.raises(IntegrityError):
            repo.create(_user(name="Imposter"))
        session.rollback()

    def test_addresses_keep_their_order(self, session: Session):
        repo = UserRepository(session)
        user = repo.create(_user())
        for kind in ("Home", "Office", "Parents"):
            user.upsert_address(Address(address_type=kind))
        repo.update(user)
        session.commit()

        stored = repo.get(user.id)
        assert [a.address_type for a in stored.addresses] == ["Home", "Office", "Parents"]

    def test_update_removes_dropped_addresses(self, session: Session):
        repo = UserRepository(session)
        user = repo.create(_user())
        home = user.upsert_address(Address(address_type="Home"))
        user.upsert_address(Address(address_type="Office"))
        user = repo.update(user)

        user.remove_address(home.id)
        repo.update(user)
        session.commit()

        rows = session.exec(select(AddressTable)).all()
        assert [r.address_type for r in rows] == ["Office"]

    def test_update_missing_user(self, session: Session):
        with pytest.raises(ValueError):
            UserRepository(session).update(_user())

    def test_delete_cascades_to_addresses(self, session: Session):
        repo = UserRepository(session)
        user = repo.create(_user())
        user.upsert_address(Address(address_type="Home"))
        repo.update(user)
        session.commit()

        assert repo.delete(user.id) is True
        session.commit()

        assert repo.get(user.id) is None
        assert session.exec(select(AddressTable)).all() == []
        assert repo.delete(user.id) is False

    def test_list_all_newest_first(self, session: Session):
        repo = UserRepository(session)
        older = repo.create(_user(email="old@example.com"))
        newer = repo.create(
            _user(email="new@example.com", created_at=older.created_at.replace(year=2099))
        )
        session.commit()

        assert [u.id for u in repo.list_all()] == [newer.id, older.id]
