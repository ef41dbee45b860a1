"""User repository for data access operations."""

from sqlmodel import Session, col, select

from src.storefront.entities.core._base import utcnow
from src.storefront.entities.core.user.entity import Address, Avatar, User
from src.storefront.entities.core.user.table import AddressTable, UserTable


def _address_to_entity(row: AddressTable) -> Address:
    return Address(
        id=row.id,
        address_type=row.address_type,
        country=row.country,
        city=row.city,
        address1=row.address1,
        address2=row.address2,
        zip_code=row.zip_code,
    )


def _to_entity(row: UserTable) -> User:
    avatar = None
    if row.avatar_public_id:
        avatar = Avatar(public_id=row.avatar_public_id, url=row.avatar_url or "")
    return User(
        id=row.id,
        created_at=row.created_at,
        updated_at=row.updated_at,
        name=row.name,
        email=row.email,
        password_hash=row.password_hash,
        phone_number=row.phone_number,
        role=row.role,
        avatar=avatar,
        addresses=[_address_to_entity(a) for a in row.addresses],
    )


def _apply_entity(row: UserTable, user: User) -> None:
    row.name = user.name
    row.email = user.email
    row.password_hash = user.password_hash
    row.phone_number = user.phone_number
    row.role = user.role.value
    row.avatar_public_id = user.avatar.public_id if user.avatar else None
    row.avatar_url = user.avatar.url if user.avatar else None

    existing = {a.id: a for a in row.addresses}
    rows = []
    for position, address in enumerate(user.addresses):
        address_row = existing.get(address.id) or AddressTable(id=address.id, user_id=row.id)
        address_row.position = position
        address_row.address_type = address.address_type
        address_row.country = address.country
        address_row.city = address.city
        address_row.address1 = address.address1
        address_row.address2 = address.address2
        address_row.zip_code = address.zip_code
        rows.append(address_row)
    row.addresses = rows


class UserRepository:
    """Data-access layer for users and their address book."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, user_id: str) -> User | None:
        row = self._session.get(UserTable, user_id)
        if row is None:
            return None
        return _to_entity(row)

    def get_by_email(self, email: str) -> User | None:
        statement = select(UserTable).where(UserTable.email == email)
        row = self._session.exec(statement).first()
        if row is None:
            return None
        return _to_entity(row)

    def exists_by_email(self, email: str) -> bool:
        statement = select(UserTable.id).where(UserTable.email == email)
        return self._session.exec(statement).first() is not None

    def create(self, user: User) -> User:
        """Insert a new user; the unique index on email raises IntegrityError on duplicates."""
        row = UserTable(id=user.id, created_at=user.created_at, updated_at=user.updated_at)
        _apply_entity(row, user)
        self._session.add(row)
        self._session.flush()
        self._session.refresh(row)
        return _to_entity(row)

    def update(self, user: User) -> User:
        row = self._session.get(UserTable, user.id)
        if row is None:
            raise ValueError(f"User with id {user.id} not found")
        _apply_entity(row, user)
        row.updated_at = utcnow()
        self._session.add(row)
        self._session.flush()
        self._session.refresh(row)
        return _to_entity(row)

    def delete(self, user_id: str) -> bool:
        row = self._session.get(UserTable, user_id)
        if row is None:
            return False
        self._session.delete(row)
        self._session.flush()
        return True

    def list_all(self) -> list[User]:
        """All users, most recently created first."""
        statement = select(UserTable).order_by(col(UserTable.created_at).desc())
        return [_to_entity(row) for row in self._session.exec(statement).all()]
