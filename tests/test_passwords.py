"""Password hashing tests."""

import pytest

from edugame.auth.passwords import hash_password, verify_password


class TestHashPassword:
    def test_hash_is_not_plaintext(self):
        hashed = hash_password("hunter2", rounds=4)
        assert hashed != "hunter2"
        assert hashed.startswith("$2b$04$")

    def test_same_password_gets_a_new_salt_each_time(self):
        assert hash_password("hunter2", rounds=4) != hash_password("hunter2", rounds=4)

    def test_empty_password_rejected(self):
        with pytest.raises(ValueError):
            hash_password("", rounds=4)

    def test_rounds_come_from_app_config(self, app):
        with app.app_context():
            hashed = hash_password("hunter2")
        assert hashed.startswith("$2b$04$")


class TestVerifyPassword:
    @pytest.mark.parametrize("password", ["hunter2", "pässwörd", "x" * 60])
    def test_round_trip(self, password):
        hashed = hash_password(password, rounds=4)
        assert verify_password(password, hashed) is True

    @pytest.mark.parametrize("other", ["hunter3", "Hunter2", "", "hunter2 "])
    def test_other_plaintext_fails(self, other):
        hashed = hash_password("hunter2", rounds=4)
        assert verify_password(other, hashed) is False

    def test_accepts_2a_hashes_from_older_clients(self):
        hashed = hash_password("hunter2", rounds=4).replace("$2b$", "$2a$", 1)
        assert verify_password("hunter2", hashed) is True

    def test_malformed_hash_raises(self):
        with pytest.raises(ValueError):
            verify_password("hunter2", "not-a-bcrypt-hash")

    def test_empty_hash_raises(self):
        with pytest.raises(ValueError):
            verify_password("hunter2", "")
