"""
gridreport/notify.py

Delivery of finished report text to a Discord channel over the REST API.

Responsibilities
----------------
- Build a `DiscordChannel` from the `DISCORD_TOKEN` / `CHANNEL_ID`
  environment variables.
- Split messages longer than Discord's per-message limit on line boundaries.
- POST each part in order; log failures without retrying.

Environment Variables
---------------------
DISCORD_TOKEN
    Bot token used in the `Authorization: Bot <token>` header.
CHANNEL_ID
    Numeric id of the destination channel.
"""

from __future__ import annotations

import os
import sys

import requests
from dotenv import load_dotenv
from loguru import logger

# Load `.env` for local development.
load_dotenv()

API_BASE = "https://discord.com/api/v10"
MESSAGE_LIMIT = 2000  # characters per Discord message
HTTP_TIMEOUT = 30  # seconds


def split_message(text: str, limit: int = MESSAGE_LIMIT) -> list[str]:
    """Split ``text`` into parts of at most ``limit`` characters.

    Parts break at newlines where possible; a single line longer than
    ``limit`` is cut into fixed-size pieces.
    """
    if len(text) <= limit:
        return [text]

    parts: list[str] = []
    # None means no line is pending; "" is a pending blank line.
    current: str | None = None
    for line in text.split("\n"):
        while len(line) > limit:
            if current is not None:
                parts.append(current)
                current = None
            parts.append(line[:limit])
            line = line[limit:]
        if current is None:
            current = line
        elif len(current) + 1 + len(line) > limit:
            parts.append(current)
            current = line
        else:
            current = f"{current}\n{line}"
    if current is not None:
        parts.append(current)
    return parts


class DiscordChannel:
    """A single Discord text channel reachable with a bot token."""

    def __init__(self, token: str, channel_id: int, limit: int = MESSAGE_LIMIT):
        self.token = token
        self.channel_id = channel_id
        self.limit = limit

    @property
    def url(self) -> str:
        return f"{API_BASE}/channels/{self.channel_id}/messages"

    def send(self, text: str) -> bool:
        """Post ``text``, split as needed. Returns True if every part landed."""
        headers = {"Authorization": f"Bot {self.token}"}
        for part in split_message(text, self.limit):
            # Discord rejects empty content.
            if not part.strip():
                continue
            try:
                r = requests.post(self.url, json={"content": part}, headers=headers, timeout=HTTP_TIMEOUT)
                r.raise_for_status()
            except requests.RequestException as exc:
                logger.error("Error sending message to channel {}: {}", self.channel_id, exc)
                return False
        return True


def get_channel() -> DiscordChannel:
    """Create the delivery channel from the environment.

    Side Effects:
        Exits the process with status 2 if ``DISCORD_TOKEN`` or
        ``CHANNEL_ID`` is missing, or ``CHANNEL_ID`` is not an integer.
    """
    token = os.environ.get("DISCORD_TOKEN")
    if not token:
        print("ERROR: DISCORD_TOKEN is not set", file=sys.stderr)
        sys.exit(2)
    raw_id = os.environ.get("CHANNEL_ID", "")
    try:
        channel_id = int(raw_id)
    except ValueError:
        print(f"ERROR: CHANNEL_ID is missing or invalid: {raw_id!r}", file=sys.stderr)
        sys.exit(2)
    return DiscordChannel(token, channel_id)
