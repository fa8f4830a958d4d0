from __future__ import annotations

import logging

import pytest

from crustbot import slack_bot
from crustbot.config import ConfigError

from .conftest import ANSWERS


class FakeBoltApp:
    def __init__(self):
        self.listeners = {}
        self.error_handler = None

    def event(self, name):
        def register(fn):
            self.listeners[name] = fn
            return fn
        return register

    def error(self, fn):
        self.error_handler = fn
        return fn


@pytest.fixture()
def handler(resolver):
    app = FakeBoltApp()
    slack_bot.register_handlers(app, resolver)
    assert app.error_handler is slack_bot.handle_error
    return app.listeners["message"]


def test_replies_with_resolved_answer(handler):
    replies = []
    handler(event={"text": "Which region values exist?", "user": "U1", "channel": "C1"}, say=replies.append)
    assert replies == [ANSWERS["region"]]


def test_missing_text_gets_fallback(handler):
    replies = []
    handler(event={"user": "U1", "channel": "C1"}, say=replies.append)
    assert replies == [ANSWERS["fallback"]]


@pytest.mark.parametrize("event", [{"bot_id": "B1", "text": "hi"}, {"subtype": "message_changed", "text": "hi"}])
def test_ignores_bot_and_subtyped_messages(handler, event):
    replies = []
    handler(event=event, say=replies.append)
    assert replies == []


def test_send_failure_is_logged_not_raised(handler, caplog):
    def broken_say(text):
        raise RuntimeError("channel_not_found")

    with caplog.at_level(logging.ERROR, logger="crustbot.slack"):
        handler(event={"text": "hello there", "channel": "C9"}, say=broken_say)
    assert "failed to send reply channel=C9" in caplog.text


def test_error_handler_logs(caplog):
    with caplog.at_level(logging.ERROR, logger="crustbot.slack"):
        slack_bot.handle_error(RuntimeError("socket closed"))
    assert "socket closed" in caplog.text


def test_main_exits_with_error_without_tokens(monkeypatch):
    for name in ("SLACK_BOT_TOKEN", "SLACK_SIGNING_SECRET", "SLACK_APP_TOKEN"):
        monkeypatch.setenv(name, "")
    monkeypatch.setattr(slack_bot, "load_env", lambda: None)
    assert slack_bot.main() == 1


def test_create_slack_app_requires_tokens(resolver, monkeypatch):
    monkeypatch.setattr(slack_bot, "load_env", lambda: None)
    for name in ("SLACK_BOT_TOKEN", "SLACK_SIGNING_SECRET", "SLACK_APP_TOKEN"):
        monkeypatch.delenv(name, raising=False)
    with pytest.raises(ConfigError):
        slack_bot.create_slack_app(slack_bot.load_settings(), resolver)
