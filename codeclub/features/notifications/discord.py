"""
Discord webhook notifications.

Each event type posts to its own webhook. A missing webhook URL disables
that notification; delivery failures are logged and never raised, so they
cannot break the request that triggered them.
"""
from datetime import datetime, timezone
from typing import Any
import httpx

from codeclub.core import config
from codeclub.utils import get_logger


log = get_logger(__name__)

COLOR_INFO = 0x3B82F6
COLOR_SUCCESS = 0x10B981
COLOR_WARNING = 0xF59E0B
COLOR_DANGER = 0xEF4444

WEBHOOK_TIMEOUT_SECONDS = 10.0


def build_embed(title: str, description: str, color: int, fields: list[dict[str, Any]] | None = None) -> dict[str, Any]:
    embed = {
        "title": title,
        "description": description,
        "color": color,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    if fields:
        embed["fields"] = fields
    return embed


async def send_webhook(
    webhook_url: str | None,
    embed: dict[str, Any],
    http: httpx.AsyncClient | None = None,
) -> bool:
    """
    Post one embed to a Discord webhook.

    Returns:
        True if Discord accepted the message
    """
    if not webhook_url:
        log.debug(f"Webhook not configured, skipping {embed.get('title')!r}")
        return False

    payload = {"embeds": [embed]}
    try:
        if http is not None:
            response = await http.post(webhook_url, json=payload)
        else:
            async with httpx.AsyncClient(timeout=WEBHOOK_TIMEOUT_SECONDS) as client:
                response = await client.post(webhook_url, json=payload)
        response.raise_for_status()
    except httpx.HTTPError as e:
        log.warning(f"Discord webhook failed for {embed.get('title')!r}: {e}")
        return False
    return True


async def notify_new_user_signup(username: str, email: str | None = None) -> bool:
    fields = [{"name": "Username", "value": username, "inline": True}]
    if email:
        fields.append({"name": "Email", "value": email, "inline": True})
    embed = build_embed(
        "New member awaiting approval",
        f"**{username}** signed in for the first time.\nReview: {config.APP_URL}/admin",
        COLOR_WARNING,
        fields,
    )
    return await send_webhook(config.DISCORD_WEBHOOK_NEW_USERS, embed)


async def notify_user_approved(username: str, role: str) -> bool:
    embed = build_embed(
        "Member approved",
        f"Welcome **{username}** to the club!",
        COLOR_SUCCESS,
        [{"name": "Role", "value": role, "inline": True}],
    )
    return await send_webhook(config.DISCORD_WEBHOOK_APPROVALS, embed)


async def notify_user_rejected(username: str, reason: str | None = None) -> bool:
    fields = [{"name": "Reason", "value": reason}] if reason else None
    embed = build_embed(
        "Member rejected",
        f"**{username}** was moved back to pending.",
        COLOR_DANGER,
        fields,
    )
    return await send_webhook(config.DISCORD_WEBHOOK_REJECTIONS, embed)


async def notify_new_project_submission(title: str, username: str) -> bool:
    embed = build_embed(
        "New project submitted",
        f"**{title}** by {username} is waiting for review.\nReview: {config.APP_URL}/admin",
        COLOR_INFO,
    )
    return await send_webhook(config.DISCORD_WEBHOOK_NEW_PROJECTS, embed)


async def notify_project_approved(title: str, username: str) -> bool:
    embed = build_embed(
        "Project approved",
        f"**{title}** by {username} is now live.\n{config.APP_URL}/projects",
        COLOR_SUCCESS,
    )
    return await send_webhook(config.DISCORD_WEBHOOK_PROJECT_APPROVALS, embed)


async def notify_project_rejected(title: str, username: str, reason: str | None = None) -> bool:
    fields = [{"name": "Reason", "value": reason}] if reason else None
    embed = build_embed(
        "Project not approved",
        f"**{title}** by {username} was sent back for changes.",
        COLOR_DANGER,
        fields,
    )
    return await send_webhook(config.DISCORD_WEBHOOK_PROJECT_REJECTIONS, embed)
