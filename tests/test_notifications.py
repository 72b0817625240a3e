"""
Discord webhook delivery never raises into the caller.
"""
import httpx

from codeclub.core import config
from codeclub.features.notifications import discord


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


async def test_missing_webhook_is_skipped():
    embed = discord.build_embed("Title", "Body", discord.COLOR_INFO)
    assert await discord.send_webhook(None, embed) is False


async def test_successful_delivery_posts_embed():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(204)

    embed = discord.build_embed("Title", "Body", discord.COLOR_SUCCESS, [{"name": "Role", "value": "MEMBER"}])
    async with _client(handler) as http:
        assert await discord.send_webhook("https://discord.test/hook", embed, http=http) is True

    assert len(seen) == 1
    assert b'"title":"Title"' in seen[0].content.replace(b" ", b"")


async def test_failed_delivery_is_logged_not_raised():
    async with _client(lambda request: httpx.Response(500)) as http:
        embed = discord.build_embed("Title", "Body", discord.COLOR_WARNING)
        assert await discord.send_webhook("https://discord.test/hook", embed, http=http) is False


async def test_notifications_disabled_without_configuration(monkeypatch):
    monkeypatch.setattr(config, "DISCORD_WEBHOOK_NEW_USERS", None)
    monkeypatch.setattr(config, "DISCORD_WEBHOOK_PROJECT_APPROVALS", None)
    assert await discord.notify_new_user_signup("ada", "ada@example.com") is False
    assert await discord.notify_project_approved("Club site", "ada") is False


async def test_rejections_post_to_their_own_webhooks(monkeypatch):
    sent = []

    async def record(webhook_url, embed, http=None):
        sent.append((webhook_url, embed))
        return True

    monkeypatch.setattr(discord, "send_webhook", record)
    monkeypatch.setattr(config, "DISCORD_WEBHOOK_REJECTIONS", "https://discord.test/rejections")
    monkeypatch.setattr(config, "DISCORD_WEBHOOK_PROJECT_REJECTIONS", "https://discord.test/project-rejections")

    assert await discord.notify_user_rejected("ada", "Not a club member") is True
    assert await discord.notify_project_rejected("Club site", "ada") is True

    (user_url, user_embed), (project_url, project_embed) = sent
    assert user_url == "https://discord.test/rejections"
    assert user_embed["color"] == discord.COLOR_DANGER
    assert "**ada**" in user_embed["description"]
    assert user_embed["fields"] == [{"name": "Reason", "value": "Not a club member"}]
    assert project_url == "https://discord.test/project-rejections"
    assert "**Club site** by ada" in project_embed["description"]
    assert "fields" not in project_embed


async def test_rejections_disabled_without_configuration(monkeypatch):
    monkeypatch.setattr(config, "DISCORD_WEBHOOK_REJECTIONS", None)
    monkeypatch.setattr(config, "DISCORD_WEBHOOK_PROJECT_REJECTIONS", None)
    assert await discord.notify_user_rejected("ada") is False
    assert await discord.notify_project_rejected("Club site", "ada") is False
