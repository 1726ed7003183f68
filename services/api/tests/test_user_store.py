import re

from services.api.models.user import User
from services.api.services.user_store import MockUserRepository, utc_timestamp


def test_utc_timestamp_format():
    assert re.fullmatch(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z", utc_timestamp())


def test_create_drops_password():
    user = MockUserRepository().create("a@b.c", "A", "secret", "admin")

    assert isinstance(user, User)
    assert user.role == "admin"
    assert "secret" not in user.model_dump_json()


def test_created_users_are_not_persisted():
    repository = MockUserRepository()
    created = repository.create("a@b.c", "A", "secret", "user")

    fetched = repository.get(created.id)

    assert fetched.email == "user@example.com"
    assert fetched.name == "DefaultUser"


def test_list_returns_fixtures_with_total():
    users, total = MockUserRepository().list(page=5, limit=1)

    assert total == 2
    assert [u.email for u in users] == ["user@example.com", "admin@example.com"]


def test_update_and_delete():
    repository = MockUserRepository()

    assert repository.update("x", {"name": "N"}).name == "N"
    assert repository.delete("x") is True
