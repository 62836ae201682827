from unittest.mock import MagicMock

import pytest
import requests

from conftest import make_expense, make_share
from splitboard.core.notification_service import (
    DiscordNotifier,
    NullNotifier,
    build_notifier,
    format_expense,
    split_message,
)
from splitboard.errors import ConfigError, NotificationError
from splitboard.splitwise.schemas import Expense


def three_way_expense():
    return Expense.from_payload(make_expense(101, description="Dinner", cost="90.00", users=[
        make_share(1, "Ada", "Lovelace", "90.00", "30.00"),
        make_share(2, "Alan", "Turing", "0.00", "30.00"),
        make_share(3, "Grace", None, "0.00", "30.00"),
    ]))


def test_format_expense_layout():
    text = format_expense(three_way_expense(), "https://dashboard.test/")

    assert text.split("\n") == [
        "New expense: Dinner",
        "Amount: 90.00 CAD",
        "Ada Lovelace (paid: 90.00 CAD, owed: 30.00 CAD)",
        "Alan Turing (paid: 0.00 CAD, owed: 30.00 CAD)",
        "Grace (paid: 0.00 CAD, owed: 30.00 CAD)",
        "View details: https://dashboard.test/",
    ]


def test_format_expense_has_one_line_per_participant():
    lines = format_expense(three_way_expense(), "").split("\n")
    participant_lines = [line for line in lines if "(paid:" in line]
    assert len(participant_lines) == 3


def test_split_message_respects_limit_and_keeps_lines():
    text = "\n".join(f"line {i:03d}" for i in range(50))

    chunks = split_message(text, 100)

    assert all(len(c) <= 100 for c in chunks)
    assert "\n".join(chunks) == text


def test_split_message_keeps_blank_lines():
    text = "\nfirst\n\nsecond\n" + "\n".join("z" * 30 for _ in range(6))

    chunks = split_message(text, 100)

    assert len(chunks) > 1
    assert "\n".join(chunks) == text
    assert chunks[0].startswith("\nfirst\n\nsecond")


def test_split_message_wraps_overlong_line():
    chunks = split_message("x" * 250, 100)
    assert [len(c) for c in chunks] == [100, 100, 50]


@pytest.fixture
def post(monkeypatch):
    mock = MagicMock()
    mock.return_value.ok = True
    mock.return_value.status_code = 204
    monkeypatch.setattr(requests, "post", mock)
    return mock


def test_discord_send_posts_content(post):
    notifier = DiscordNotifier("https://discord.test/webhook")

    assert notifier.send("hello") is True

    post.assert_called_once()
    args, kwargs = post.call_args
    assert args[0] == "https://discord.test/webhook"
    assert kwargs["json"] == {"content": "hello"}
    assert kwargs["timeout"] == 10.0


def test_discord_send_splits_long_messages(post):
    notifier = DiscordNotifier("https://discord.test/webhook")
    text = "\n".join("y" * 90 for _ in range(50))

    notifier.send(text)

    assert post.call_count > 1
    for call in post.call_args_list:
        assert len(call.kwargs["json"]["content"]) <= DiscordNotifier.MAX_CONTENT_LENGTH


@pytest.mark.parametrize("text", ["", "   ", "\n\n"])
def test_blank_text_is_a_no_op(post, text):
    assert DiscordNotifier("https://discord.test/webhook").send(text) is False
    post.assert_not_called()


def test_missing_webhook_is_config_error(post, monkeypatch):
    monkeypatch.delenv("DISCORD_WEBHOOK_URL", raising=False)
    with pytest.raises(ConfigError):
        DiscordNotifier().send("hello")
    post.assert_not_called()


def test_webhook_rejection_raises_notification_error(post):
    post.return_value.ok = False
    post.return_value.status_code = 429
    with pytest.raises(NotificationError):
        DiscordNotifier("https://discord.test/webhook").send("hello")


def test_transport_failure_raises_notification_error(post):
    post.side_effect = requests.exceptions.ConnectionError("refused")
    with pytest.raises(NotificationError):
        DiscordNotifier("https://discord.test/webhook").send("hello")


def test_build_notifier_honours_disabled_flag():
    assert isinstance(build_notifier({"NOTIFICATIONS_ENABLED": False}), NullNotifier)
    notifier = build_notifier({"NOTIFICATIONS_ENABLED": True, "DISCORD_WEBHOOK_URL": "https://discord.test/webhook"})
    assert isinstance(notifier, DiscordNotifier)
    assert notifier.webhook_url == "https://discord.test/webhook"


def test_null_notifier_never_sends(post):
    assert NullNotifier().send("hello") is False
    post.assert_not_called()
