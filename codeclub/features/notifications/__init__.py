"""
Outbound notifications for moderation events.
"""
from codeclub.features.notifications.discord import (
    notify_new_project_submission,
    notify_new_user_signup,
    notify_project_approved,
    notify_project_rejected,
    notify_user_approved,
    notify_user_rejected,
)

__all__ = [
    "notify_new_project_submission",
    "notify_new_user_signup",
    "notify_project_approved",
    "notify_project_rejected",
    "notify_user_approved",
    "notify_user_rejected",
]
