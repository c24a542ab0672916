"""
Telegram Notification Provider.

Sends alert messages through the Telegram Bot API.

Setup:
1. Talk to @BotFather to create a bot and get its token
2. Save the token to a file (default ~/.secret/telegram.bot.token)
3. Add @RawDataBot to the target chat to find out its chat id

Reference:
- https://core.telegram.org/bots/api#sendmessage
"""

import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

import requests

from src.agents.shard_limit.shard_limit.services.exceptions import (
    NotificationError,
    TokenFileError,
)

logger = logging.getLogger(__name__)

DEFAULT_TOKEN_FILE = "~/.secret/telegram.bot.token"


def resolve_token_path(path: str) -> str:
    """Expand ``~/`` to the current user's home and make the path absolute.

    Args:
        path: Token file path as configured

    Returns:
        Absolute path

    Raises:
        TokenFileError: If the home directory cannot be determined
    """
    if path.startswith("~/"):
        expanded = os.path.expanduser(path)
        if expanded == path:
            raise TokenFileError(f"cannot resolve home directory for {path!r}")
        path = expanded
    return os.path.abspath(path)


def load_bot_token(path: str) -> str:
    """Read a bot token from a file.

    A single trailing newline is dropped.

    Args:
        path: Token file path, ``~/`` allowed

    Returns:
        Bot token

    Raises:
        TokenFileError: If the file cannot be read or is empty
    """
    token_path = resolve_token_path(path)
    try:
        with open(token_path, encoding="utf-8") as f:
            token = f.read()
    except OSError as e:
        raise TokenFileError(f"Failed to read telegram token from file {token_path!r}: {e}") from e

    if token.endswith("\n"):
        token = token[:-1]
    if not token.strip():
        raise TokenFileError(f"Telegram token file {token_path!r} is empty")

    logger.info(f"Telegram token loaded from {token_path}")
    return token


@dataclass
class TelegramMessage:
    """Outgoing Telegram text message."""

    chat_id: Union[int, str]
    text: str
    parse_mode: Optional[str] = "Markdown"

    def to_payload(self) -> Dict[str, Any]:
        """Convert to sendMessage request body."""
        payload: Dict[str, Any] = {"chat_id": self.chat_id, "text": self.text}
        if self.parse_mode:
            payload["parse_mode"] = self.parse_mode
        return payload


class TelegramNotifier:
    """
    Telegram bot message sender.

    Usage:
        notifier = TelegramNotifier.from_token_file("~/.secret/telegram.bot.token")
        notifier.get_me()
        notifier.send_message(TelegramMessage(chat_id=-100123, text="hello"))
    """

    API_URL = "https://api.telegram.org/bot{token}/{method}"

    def __init__(self, bot_token: str, timeout: float = 10.0):
        """Initialize Telegram notifier.

        Args:
            bot_token: Bot API token
            timeout: Per-request timeout in seconds
        """
        if not bot_token:
            raise NotificationError("Telegram bot token is empty")
        self._bot_token = bot_token
        self.timeout = timeout
        self.bot_username: Optional[str] = None

    @classmethod
    def from_token_file(cls, path: str = DEFAULT_TOKEN_FILE, timeout: float = 10.0) -> "TelegramNotifier":
        """Create a notifier with the token read from a file."""
        return cls(load_bot_token(path), timeout=timeout)

    def _url(self, method: str) -> str:
        return self.API_URL.format(token=self._bot_token, method=method)

    def _redact(self, text: str) -> str:
        """Strip the bot token from error text (request URLs embed it)."""
        return text.replace(self._bot_token, "<token>")

    def _call(self, method: str, payload: Optional[Dict[str, Any]] = None) -> Any:
        """Call a Bot API method.

        Args:
            method: API method name
            payload: JSON body (GET when None)

        Returns:
            The ``result`` field of the API response

        Raises:
            NotificationError: On transport errors or unsuccessful responses
        """
        try:
            if payload is None:
                response = requests.get(self._url(method), timeout=self.timeout)
            else:
                response = requests.post(self._url(method), json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise NotificationError(
                f"Telegram {method} request failed: {self._redact(str(e))}"
            ) from e

        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        if response.status_code != requests.codes.ok or not body.get("ok"):
            description = body.get("description") or "no description"
            raise NotificationError(
                f"Telegram {method} failed: status={response.status_code}, {description}"
            )

        return body.get("result")

    def get_me(self) -> Dict[str, Any]:
        """Validate the token and fetch the bot's identity.

        Returns:
            Bot user object
        """
        me = self._call("getMe") or {}
        self.bot_username = me.get("username")
        logger.info(f"Authorized on telegram account {self.bot_username}")
        return me

    def send_message(self, message: TelegramMessage) -> Dict[str, Any]:
        """Send a text message.

        Args:
            message: Message to deliver

        Returns:
            Sent message object
        """
        result = self._call("sendMessage", message.to_payload()) or {}
        logger.info(
            f"Telegram message sent to chat {message.chat_id} "
            f"(message_id={result.get('message_id')})"
        )
        return result
