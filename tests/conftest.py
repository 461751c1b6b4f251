import pytest
from types import SimpleNamespace
from unittest.mock import AsyncMock

from chainflow.flow import Flow


def make_user(uid=1001):
    return SimpleNamespace(id=uid, is_bot=False, first_name=f"user{uid}")


def make_message(text="hello", uid=1001, **extra):
    user = make_user(uid)
    return SimpleNamespace(
        text=text,
        from_user=user,
        chat=SimpleNamespace(id=uid, type="private"),
        answer=AsyncMock(),
        **extra,
    )


@pytest.fixture
def bot():
    """Stands in for aiogram.Bot; only send_message is used."""
    fake = AsyncMock()
    fake.send_message = AsyncMock(return_value=None)
    return fake


@pytest.fixture
def user():
    return make_user()


@pytest.fixture
def message_factory():
    return make_message


@pytest.fixture
def flow(bot):
    return Flow("test-flow", bot)
