"""
Unit tests for the account store and bearer tokens
"""

import pytest

from auth import (
    DuplicateEmailError,
    InMemoryUserStore,
    UserStore,
    InvalidTokenError,
    TokenService,
    bearer_token,
    public_user,
)


class TestInMemoryUserStore:
    def setup_method(self):
        self.store = InMemoryUserStore()

    def test_create_and_find(self):
        user = self.store.create_user({"name": "Ada", "email": "ada@example.com", "provider": "email"})
        assert user["id"]
        assert self.store.find_by_email("ada@example.com")["name"] == "Ada"
        assert self.store.find_by_id(user["id"])["email"] == "ada@example.com"
        assert self.store.find_by_email("nobody@example.com") is None

    def test_unique_email(self):
        self.store.create_user({"email": "ada@example.com"})
        with pytest.raises(DuplicateEmailError):
            self.store.create_user({"email": "ada@example.com"})

    def test_update(self):
        user = self.store.create_user({"email": "ada@example.com"})
        updated = self.store.update_user(user["id"], {"picture": "p.png", "id": "hijack"})
        assert updated["picture"] == "p.png"
        assert updated["id"] == user["id"]
        assert self.store.update_user("missing", {"name": "x"}) is None

    def test_update_cannot_steal_email(self):
        self.store.create_user({"email": "ada@example.com"})
        bob = self.store.create_user({"email": "bob@example.com"})
        with pytest.raises(DuplicateEmailError):
            self.store.update_user(bob["id"], {"email": "ada@example.com"})

    def test_returned_records_are_copies(self):
        user = self.store.create_user({"email": "ada@example.com"})
        user["email"] = "changed@example.com"
        assert self.store.find_by_id(user["id"])["email"] == "ada@example.com"

    def test_interface_requires_every_method(self):
        class PartialStore(UserStore):
            def find_by_id(self, user_id):
                return None

        with pytest.raises(TypeError):
            PartialStore()

    def test_public_user(self):
        user = self.store.create_user({"name": "Ada", "email": "ada@example.com", "password": "hash"})
        assert "password" not in public_user(user)


class TestTokenService:
    def test_round_trip(self):
        tokens = TokenService("secret")
        claims = tokens.verify(tokens.issue({"id": "u1", "email": "a@example.com"}))
        assert claims == {"id": "u1", "email": "a@example.com"}

    def test_wrong_secret(self):
        token = TokenService("one").issue({"id": "u1", "email": "a@example.com"})
        with pytest.raises(InvalidTokenError):
            TokenService("two").verify(token)

    def test_expired(self):
        tokens = TokenService("secret", max_age=-1)
        token = tokens.issue({"id": "u1", "email": "a@example.com"})
        with pytest.raises(InvalidTokenError):
            tokens.verify(token)

    def test_default_expiry_is_seven_days(self):
        assert TokenService("secret").max_age == 7 * 24 * 60 * 60

    def test_secret_required(self):
        with pytest.raises(ValueError):
            TokenService("")


class TestBearerToken:
    @pytest.mark.parametrize("header, expected", [
        ("Bearer abc.def", "abc.def"),
        ("Bearer ", None),
        ("Basic abc", None),
        ("", None),
        (None, None),
    ])
    def test_parse(self, header, expected):
        assert bearer_token(header) == expected
