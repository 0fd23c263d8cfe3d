"""
Notification dispatcher — matches transitions against user preferences
and sends alerts.

For every run it:

1.  Loads all stored preferences.
2.  Matches each newly available slot to the preferences for exactly
    that date, time and location.
3.  Groups the matches by email, so a user gets at most one message.
4.  Sends one digest email per user with all of their matching slots.
"""

from __future__ import annotations

import html
import logging
from collections.abc import Iterable
from datetime import date

from courtwatch import db
from courtwatch.models import SlotKey, TransitionSlot, UserNotification, UserPreference
from courtwatch.services.booking_links import booking_link, format_location_name
from courtwatch.services.canonical import normalize_time
from courtwatch.services.email import send_email

logger = logging.getLogger(__name__)


def _long_date(date_str: str) -> str:
    d = date.fromisoformat(date_str)
    return f"{d:%A} {d.day} {d:%B %Y}"


def _short_date(date_str: str) -> str:
    d = date.fromisoformat(date_str)
    return f"{d:%a} {d.day} {d:%b}"


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'' if count == 1 else 's'}"


# ── Message content ───────────────────────────────────────────────────────


def build_subject(slots: list[TransitionSlot]) -> str:
    if len(slots) == 1:
        slot = slots[0]
        return f"Tennis Court Available - {_long_date(slot.date)} at {slot.time[:5]}"
    return f"{len(slots)} Tennis Courts Now Available"


def _build_slot_block(slot: TransitionSlot) -> str:
    link = booking_link(slot.location, slot.date, slot.time)
    if link.url:
        action = (
            f'<a href="{html.escape(link.url)}" style="background-color:#0066cc;color:white;'
            f'padding:8px 16px;text-decoration:none;border-radius:4px;display:inline-block">'
            f"Book on {link.label}</a>"
        )
    else:
        action = '<span style="color:#666">Booking link unavailable for this provider</span>'

    return f"""
        <div style="background-color:#f9f9f9;padding:12px;margin:8px 0;border-left:4px solid #0066cc">
          <p style="margin:4px 0"><strong>📅 {_long_date(slot.date)}</strong></p>
          <p style="margin:4px 0"><strong>🕐 {slot.time[:5]}</strong></p>
          <p style="margin:4px 0"><strong>📍 {html.escape(format_location_name(slot.location))}</strong></p>
          <p style="margin:4px 0"><strong>🎾 {_plural(slot.current_spaces, 'space')} available</strong></p>
          <p style="margin:8px 0 4px 0">{action}</p>
        </div>"""


def build_html_body(slots: list[TransitionSlot]) -> str:
    """Simple HTML body listing every matched slot with a booking link."""
    multiple = len(slots) > 1
    intro = (
        f"Great news! {len(slots)} tennis court slots you requested are now available:"
        if multiple
        else "A tennis court slot you requested is now available:"
    )
    blocks = "".join(_build_slot_block(s) for s in slots)
    return f"""
    <div style="font-family:Arial,sans-serif;max-width:600px;margin:0 auto">
      <h2>🎾 Tennis Court{'s' if multiple else ''} Available</h2>
      <p>{intro}</p>
      {blocks}
      <p style="color:#666;font-size:14px;margin-top:24px;border-top:1px solid #eee;padding-top:16px">
        You're receiving this because you signed up for notifications for
        {'these time slots' if multiple else 'this time slot'}.
      </p>
    </div>
    """


CONFIRMATION_SUBJECT = "Tennis Booking Preferences Confirmed"


def build_confirmation_html(rows: list[tuple[str, str, str]]) -> str:
    """Body of the receipt sent after a preference submission; rows are (date, time, location)."""
    items = "<br/>".join(
        f"• {html.escape(format_location_name(location))}: {_long_date(date_str)} at {time_str[:5]}"
        for date_str, time_str, location in rows
    )
    return f"""
    <div style="font-family:Arial,sans-serif;max-width:600px;margin:0 auto">
      <h2>Tennis Booking Preferences Confirmed</h2>
      <p>We've received your tennis court booking preferences. Here are the times you selected:</p>
      <div style="background-color:#f8f9fa;padding:16px;border-left:4px solid #007bff;margin:16px 0">
        <strong>Your Selected Time Preferences:</strong><br/>
        {items}
      </div>
      <p>You'll receive an email if any of these slots become available.</p>
    </div>
    """


def format_notification_summary(notifications: list[UserNotification]) -> str:
    if not notifications:
        return "No notifications sent - no matching preferences found."

    total = sum(len(n.slots) for n in notifications)
    lines = [
        f"🎉 NOTIFICATIONS SENT ({_plural(len(notifications), 'user')}, {_plural(total, 'slot')}):",
        "=" * 60,
    ]
    for index, notification in enumerate(notifications, start=1):
        lines.append(f"{index}. 📧 {notification.email} ({_plural(len(notification.slots), 'court')})")
        for slot in notification.slots:
            lines.append(
                f"   🎾 {_short_date(slot.date)} at {slot.time[:5]} "
                f"({slot.current_spaces} spaces) - {slot.location}"
            )
    lines.append("=" * 60)
    return "\n".join(lines)


# ── Dispatcher ────────────────────────────────────────────────────────────


class PreferenceNotifier:
    """Notifies users whose preferences match newly available slots."""

    async def get_user_preferences(self) -> list[UserPreference]:
        try:
            return await db.list_preferences()
        except Exception:
            logger.exception("Error fetching user preferences")
            return []

    @staticmethod
    def match_preferences(
        transitions: Iterable[TransitionSlot],
        preferences: Iterable[UserPreference],
    ) -> list[UserNotification]:
        """Group transitions by the email of every preference with the same key."""
        emails_by_key: dict[SlotKey, list[str]] = {}
        for pref in preferences:
            pref_time = normalize_time(pref.time)
            if pref_time is None:
                logger.warning("⚠️  Ignoring preference with invalid time %r for %s", pref.time, pref.email)
                continue
            emails = emails_by_key.setdefault((pref.date, pref_time, pref.location), [])
            if pref.email not in emails:
                emails.append(pref.email)

        grouped: dict[str, UserNotification] = {}
        for slot in transitions:
            for email in emails_by_key.get(slot.key, []):
                grouped.setdefault(email, UserNotification(email=email)).slots.append(slot)
        return list(grouped.values())

    async def send_notification_emails(self, notifications: list[UserNotification]) -> int:
        """
        Send one email per notification. Returns how many were attempted.

        A failure for one recipient is logged and the rest are still sent.
        """
        for notification in notifications:
            slots = sorted(notification.slots, key=lambda s: (s.date, s.time))
            try:
                await send_email(notification.email, build_subject(slots), build_html_body(slots))
                logger.info(
                    "📧 Notification sent to %s for %s",
                    notification.email, _plural(len(slots), "court"),
                )
            except Exception:
                logger.exception("❌ Failed to send email to %s", notification.email)
        return len(notifications)

    async def notify(self, transitions: list[TransitionSlot]) -> int:
        preferences = await self.get_user_preferences()
        if not preferences:
            logger.info("📋 No user preferences found")
            return 0

        notifications = self.match_preferences(transitions, preferences)
        if not notifications:
            logger.info("📋 No user preferences match the newly available courts")
            return 0

        sent = await self.send_notification_emails(notifications)
        logger.info("\n%s", format_notification_summary(notifications))
        return sent


# Module-level singleton
notifier = PreferenceNotifier()
