from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Make the taskboard package importable when running tests from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
if str(ROOT / "scripts") not in sys.path:
    sys.path.insert(0, str(ROOT / "scripts"))

from taskboard.core.security import hash_password, is_hashed, verify_password  # noqa: E402
from taskboard.domain.models import User  # noqa: E402
from taskboard.repositories.json_storage import UserStore  # noqa: E402
from taskboard.services.user_service import UserService  # noqa: E402
import hash_passwords  # noqa: E402


@pytest.fixture()
def user_store(tmp_path):
    store = UserStore(tmp_path / "users.json")
    store.save(
        [
            User(id="u1", first_name="Ada", last_name="Lovelace", email="ada@example.com", password="secret", role="Admin"),
            User(id="u2", first_name="Grace", last_name="Hopper", email="grace@example.com", password=hash_password("navy")),
            User(id="u3", first_name="Dup", last_name="Email", email="ada@example.com", password="other"),
        ]
    )
    return store


@pytest.fixture()
def svc(user_store):
    return UserService(store=user_store)


@pytest.mark.parametrize(
    "email, password",
    [("", "secret"), ("ada@example.com", ""), ("   ", "secret"), ("ada@example.com", "  "), (None, None)],
)
def test_login_rejects_blank_inputs(svc, email, password):
    assert svc.login(email, password) is None


def test_login_with_plaintext_record(svc):
    user = svc.login("ada@example.com", "secret")
    assert user is not None
    assert user.id == "u1"


def test_login_returns_first_user_matching_both_fields(svc):
    assert svc.login("ada@example.com", "other").id == "u3"


def test_login_with_hashed_record(svc):
    assert svc.login("grace@example.com", "navy").id == "u2"
    assert svc.login("grace@example.com", "army") is None


def test_login_is_exact(svc):
    assert svc.login("ADA@example.com", "secret") is None
    assert svc.login("ada@example.com", "Secret") is None
    assert svc.login("nobody@example.com", "secret") is None


def test_list_users_is_unfiltered(svc):
    users = svc.list_users()
    assert [u.id for u in users] == ["u1", "u2", "u3"]
    assert users[0].password == "secret"


def test_get_user(svc):
    assert svc.get_user("u2").first_name == "Grace"
    assert svc.get_user("missing") is None


def test_missing_users_file_means_no_users(tmp_path):
    svc = UserService(store=UserStore(tmp_path / "absent.json"))
    assert svc.list_users() == []
    assert svc.login("ada@example.com", "secret") is None


def test_verify_password_forms():
    hashed = hash_password("pw")
    assert is_hashed(hashed)
    assert verify_password("pw", hashed)
    assert not verify_password("nope", hashed)
    assert not verify_password("pw", "argon2$garbage")
    assert verify_password("pw", "pw")
    assert not verify_password("pw", None)


def test_hash_passwords_script_migrates_plaintext(user_store):
    assert hash_passwords.migrate(user_store, dry_run=True) == 2
    assert user_store.load()[0].password == "secret"

    assert hash_passwords.migrate(user_store) == 2
    users = user_store.load()
    assert all(is_hashed(u.password) for u in users)

    svc = UserService(store=user_store)
    assert svc.login("ada@example.com", "secret").id == "u1"
    assert svc.login("grace@example.com", "navy").id == "u2"
    assert hash_passwords.migrate(user_store) == 0
