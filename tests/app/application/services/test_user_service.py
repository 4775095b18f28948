import asyncio

import pytest
from app.application.errors.exceptions import ValidationError
from app.application.services.user_service import UserService
from core.security import verify_password


def test_register_hashes_password(uow_factory, db) -> None:
    service = UserService(uow_factory=uow_factory)

    user = asyncio.run(service.register("new@example.com", "pw"))

    assert db.users[user.id].email == "new@example.com"
    assert verify_password("pw", db.users[user.id].password_hash)


@pytest.mark.parametrize(
    "email, password, message",
    [
        (None, "pw", "Missing email"),
        ("a@example.com", None, "Missing password"),
        ("owner@example.com", "pw", "Already exist"),
    ],
)
def test_register_rejects_invalid_input(uow_factory, owner, email, password, message) -> None:
    service = UserService(uow_factory=uow_factory)

    with pytest.raises(ValidationError) as exc_info:
        asyncio.run(service.register(email, password))

    assert exc_info.value.msg == message
