import pytest

from agenda.domain.exceptions import EmailAlreadyInUse, NotFound
from agenda.infrastructure.persistence.sqlite import SQLitePersistence


@pytest.fixture()
def persistence(tmp_path):
    gateway = SQLitePersistence(tmp_path / "nested" / "agenda.db")
    yield gateway
    gateway.close()


def _create(persistence, email, **kwargs):
    return persistence.create_user(name=email.split("@")[0], email=email, password_hash="hash", **kwargs)


def test_create_user_applies_defaults(persistence):
    user = _create(persistence, "Jane@Example.com")

    assert user.id == 1
    assert user.email == "jane@example.com"
    assert user.avatar is None
    assert user.is_admin is False
    assert user.is_active is True
    assert user.created_at.tzinfo is not None


def test_email_lookup_is_case_insensitive(persistence):
    created = _create(persistence, "jane@example.com")

    assert persistence.get_user_by_email("JANE@EXAMPLE.COM").id == created.id
    assert persistence.get_user_by_email("nobody@example.com") is None


def test_unique_email_is_enforced_by_the_store(persistence):
    _create(persistence, "jane@example.com")

    with pytest.raises(EmailAlreadyInUse):
        _create(persistence, "JANE@example.com")


def test_list_users_in_creation_order(persistence):
    emails = ["c@example.com", "a@example.com", "b@example.com"]
    for email in emails:
        _create(persistence, email)

    assert [user.email for user in persistence.list_users()] == emails


def test_ids_are_not_reused_after_delete(persistence):
    _create(persistence, "one@example.com")
    second = _create(persistence, "two@example.com")

    assert persistence.delete_user(second.id) is True
    third = _create(persistence, "three@example.com")

    assert third.id == second.id + 1
    assert persistence.get_user_by_id(second.id) is None


def test_delete_missing_user_reports_false(persistence):
    assert persistence.delete_user(999) is False


@pytest.mark.parametrize("user_id", [2**63, 10**20, -(2**63) - 1])
def test_ids_outside_integer_range_match_nothing(persistence, user_id):
    assert persistence.get_user_by_id(user_id) is None
    assert persistence.delete_user(user_id) is False
    with pytest.raises(NotFound):
        persistence.update_user(user_id, name="Ghost")


def test_update_only_touches_given_fields(persistence):
    user = _create(persistence, "jane@example.com", avatar="https://img.example.com/a.png")

    updated = persistence.update_user(user.id, name="Janet", is_active=False)

    assert updated.name == "Janet"
    assert updated.is_active is False
    assert updated.email == "jane@example.com"
    assert updated.password_hash == "hash"
    assert updated.avatar == "https://img.example.com/a.png"


def test_avatar_changes_only_with_flag(persistence):
    user = _create(persistence, "jane@example.com", avatar="https://img.example.com/a.png")

    unchanged = persistence.update_user(user.id, avatar=None)
    cleared = persistence.update_user(user.id, update_avatar=True, avatar=None)

    assert unchanged.avatar == "https://img.example.com/a.png"
    assert cleared.avatar is None


def test_update_to_taken_email_conflicts(persistence):
    _create(persistence, "jane@example.com")
    john = _create(persistence, "john@example.com")

    with pytest.raises(EmailAlreadyInUse):
        persistence.update_user(john.id, email="Jane@example.com")


def test_update_missing_user(persistence):
    with pytest.raises(NotFound):
        persistence.update_user(999, name="Ghost")
