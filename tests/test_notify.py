"""Tests for Discord delivery."""

from __future__ import annotations

import pytest
import requests

from gridreport import notify


class DummyResponse:
    def __init__(self, status_code=200):
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


def test_split_message_short_text_untouched():
    """Messages within the limit are sent as-is."""

    assert notify.split_message("hello\nworld", limit=20) == ["hello\nworld"]


def test_split_message_breaks_on_lines():
    """Long messages split at line boundaries, preserving order."""

    lines = [str(i) * 50 for i in range(6)]
    text = "\n".join(lines)

    parts = notify.split_message(text, limit=120)

    assert all(len(p) <= 120 for p in parts)
    assert "\n".join(parts) == text
    assert len(parts) == 3


def test_split_message_cuts_overlong_line():
    """A single line above the limit is cut into fixed-size pieces."""

    parts = notify.split_message("ab\n" + "x" * 25, limit=10)

    assert parts == ["ab", "x" * 10, "x" * 10, "x" * 5]

    # A blank line right after a cut line is kept.
    assert notify.split_message("x" * 20 + "\n\nfoo", limit=10) == ["x" * 10, "x" * 10, "\nfoo"]


def test_split_message_keeps_blank_lines():
    """Blank lines survive splitting and rejoin to the original text."""

    text = "aaaa\n\nbbbb\ncccc"

    parts = notify.split_message(text, limit=10)

    assert parts == ["aaaa\n\nbbbb", "cccc"]
    assert "\n".join(parts) == text


def test_send_posts_each_part(monkeypatch):
    """Every part is posted in order with the bot authorization header."""

    posted = []

    def fake_post(url, json, headers, timeout):
        posted.append(json["content"])
        assert url == "https://discord.com/api/v10/channels/42/messages"
        assert headers == {"Authorization": "Bot tok"}
        assert timeout == notify.HTTP_TIMEOUT
        return DummyResponse()

    monkeypatch.setattr(notify.requests, "post", fake_post)

    ok = notify.DiscordChannel("tok", 42, limit=10).send("aaaa\nbbbb\ncccc")

    assert ok is True
    assert posted == ["aaaa\nbbbb", "cccc"]


def test_send_reports_failure_without_retry(monkeypatch):
    """A rejected post returns False and is not retried."""

    attempts = 0

    def fake_post(url, json, headers, timeout):
        nonlocal attempts
        attempts += 1
        return DummyResponse(401)

    monkeypatch.setattr(notify.requests, "post", fake_post)

    assert notify.DiscordChannel("tok", 1).send("hi") is False
    assert attempts == 1


def test_send_network_error(monkeypatch):
    """Transport errors are reported as a failed delivery."""

    def fake_post(url, json, headers, timeout):
        raise requests.ConnectionError("down")

    monkeypatch.setattr(notify.requests, "post", fake_post)

    assert notify.DiscordChannel("tok", 1).send("hi") is False


def test_get_channel_from_env(monkeypatch):
    """Token and channel id are read from the environment."""

    monkeypatch.setenv("DISCORD_TOKEN", "tok")
    monkeypatch.setenv("CHANNEL_ID", "123")

    channel = notify.get_channel()

    assert channel.token == "tok"
    assert channel.channel_id == 123


def test_get_channel_missing_token(monkeypatch, capsys):
    """A missing token exits with status 2 and a clear message."""

    monkeypatch.delenv("DISCORD_TOKEN", raising=False)

    with pytest.raises(SystemExit) as exc:
        notify.get_channel()

    assert exc.value.code == 2
    assert "ERROR: DISCORD_TOKEN is not set" in capsys.readouterr().err


@pytest.mark.parametrize("raw", [None, "", "general"])
def test_get_channel_bad_channel_id(monkeypatch, capsys, raw):
    """A missing or non-numeric channel id exits with status 2."""

    monkeypatch.setenv("DISCORD_TOKEN", "tok")
    if raw is None:
        monkeypatch.delenv("CHANNEL_ID", raising=False)
    else:
        monkeypatch.setenv("CHANNEL_ID", raw)

    with pytest.raises(SystemExit) as exc:
        notify.get_channel()

    assert exc.value.code == 2
    assert "CHANNEL_ID" in capsys.readouterr().err


def test_send_skips_blank_parts(monkeypatch):
    """Parts holding only blank lines are not posted."""

    posted = []

    def fake_post(url, json, headers, timeout):
        posted.append(json["content"])
        return DummyResponse()

    monkeypatch.setattr(notify.requests, "post", fake_post)

    ok = notify.DiscordChannel("tok", 1, limit=10).send("\n" + "y" * 12)

    assert ok is True
    assert posted == ["y" * 10, "yy"]
