from __future__ import annotations

"""Slack front end: answers incoming messages with the shared resolver over Socket Mode."""

import logging
import sys
from typing import Any, Callable, Dict, Optional

from slack_bolt import App
from slack_bolt.adapter.socket_mode import SocketModeHandler

from .config import ConfigError, Settings, load_env, load_settings
from .logging_setup import configure_logging
from .resolver import ResponseResolver
from .resource_loader import ResourceLoader

logger = logging.getLogger("crustbot.slack")


def should_ignore(event: Dict[str, Any]) -> bool:
    """Skip bot-authored messages and subtyped events (edits, joins) to prevent loops."""
    return bool(event.get("bot_id") or event.get("subtype"))


def build_message_handler(resolver: ResponseResolver) -> Callable[..., None]:
    """Purpose: Create the Bolt listener that answers one message event.
    Inputs/Outputs: Input is the shared resolver; output is a listener taking
        (event, say).
    Side Effects / State: The listener posts a reply through say().
    Dependencies: Uses should_ignore and ResponseResolver.resolve.
    Failure Modes: Errors while replying are logged and not re-raised, so one bad
        delivery does not stop the bot.
    If Removed: The bot receives messages but never answers.
    Testing Notes: Call the listener with a fake say and inspect the reply.
    """

    def handle_message(event: Dict[str, Any], say: Callable[[str], Any]) -> None:
        # Loop guard first; then answer exactly like the web adapter.
        if should_ignore(event):
            logger.debug("ignoring bot or subtyped message subtype=%s", event.get("subtype"))
            return
        text = event.get("text") or ""
        logger.info("message user=%s channel=%s chars=%s", event.get("user"), event.get("channel"), len(text))
        try:
            say(resolver.resolve(text))
        except Exception:
            logger.exception("failed to send reply channel=%s", event.get("channel"))

    return handle_message


def handle_error(error: Exception, body: Optional[Dict[str, Any]] = None) -> None:
    """Global Bolt error handler: log and continue."""
    logger.error("slack error: %s", error, exc_info=error)


def register_handlers(app: Any, resolver: ResponseResolver) -> None:
    """Attach the message listener and global error handler to a Bolt app."""
    app.event("message")(build_message_handler(resolver))
    app.error(handle_error)


def create_slack_app(settings: Settings, resolver: ResponseResolver) -> App:
    """Purpose: Build a Bolt App wired to the resolver.
    Inputs/Outputs: Inputs are Settings and the resolver; output is a Bolt App.
    Side Effects / State: None beyond constructing the client.
    Dependencies: Uses slack_bolt.App and register_handlers.
    Failure Modes: Missing tokens raise ConfigError before Bolt is touched.
    If Removed: main() has nothing to run.
    Testing Notes: Covered through register_handlers with a fake app.
    """
    # Validate credentials, then wire listeners.
    settings.require_slack()
    app = App(token=settings.slack_bot_token, signing_secret=settings.slack_signing_secret)
    register_handlers(app, resolver)
    return app


def main() -> int:
    """Start the Slack bot in Socket Mode; returns a process exit status."""
    load_env()
    settings = load_settings()
    configure_logging(settings.log_level)
    logger.info(
        "env check: SLACK_BOT_TOKEN=%s SLACK_SIGNING_SECRET=%s SLACK_APP_TOKEN=%s",
        bool(settings.slack_bot_token),
        bool(settings.slack_signing_secret),
        bool(settings.slack_app_token),
    )
    try:
        static_data = ResourceLoader.from_settings(settings).load()
        resolver = ResponseResolver.from_settings(static_data, settings)
        app = create_slack_app(settings, resolver)
        logger.info("starting Slack bot in Socket Mode")
        SocketModeHandler(app, settings.slack_app_token).start()
    except ConfigError as exc:
        logger.error("%s", exc)
        return 1
    except Exception:
        logger.exception("failed to start Slack bot")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
