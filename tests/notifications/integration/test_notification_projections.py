"""Integration tests for the UserNotifications feed projection."""

from notifications.notification.helpers import create_internal_notification, create_notifications_for_user
from notifications.notification.notification import Notification, NotificationType
from notifications.projections.user_notifications import UserNotifications, unread_count, user_feed
from protean import current_domain


def _system(user_id, title="Heads up", email_address=None):
    return create_notifications_for_user(
        user_id=user_id,
        notification_type=NotificationType.SYSTEM.value,
        context={"title": title, "message": "Maintenance at 2am", "action_url": "/status"},
        email_address=email_address,
    )


class TestUserNotificationsProjection:
    def test_in_app_copy_lands_in_feed(self):
        [nid] = _system("user-pj-1")
        entry = current_domain.repository_for(UserNotifications).get(nid)
        assert entry.user_id == "user-pj-1"
        assert entry.title == "Heads up"
        assert entry.action_url == "/status"
        assert entry.action_label == "Learn More"
        assert entry.is_read is False

    def test_email_copy_stays_out_of_feed(self):
        _system("user-pj-2", email_address="pj2@example.com")
        assert len(user_feed("user-pj-2")) == 1

    def test_internal_alerts_stay_out_of_feed(self):
        create_internal_notification(
            notification_type=NotificationType.REPORT_ALERT.value,
            context={"business_name": "Shady Bar", "reason": "Fake Reviews", "severity": "high"},
        )
        assert current_domain.repository_for(UserNotifications)._dao.query.all().total == 0

    def test_read_updates_entry(self):
        [nid] = _system("user-pj-3")
        repo = current_domain.repository_for(Notification)
        n = repo.get(nid)
        n.mark_read()
        repo.add(n)

        entry = current_domain.repository_for(UserNotifications).get(nid)
        assert entry.is_read is True
        assert entry.read_at is not None
        assert unread_count("user-pj-3") == 0

    def test_dismiss_removes_entry(self):
        [nid] = _system("user-pj-4")
        repo = current_domain.repository_for(Notification)
        n = repo.get(nid)
        n.dismiss()
        repo.add(n)
        assert user_feed("user-pj-4") == []

    def test_unread_only_and_limit(self):
        first = _system("user-pj-5", title="One")[0]
        _system("user-pj-5", title="Two")
        _system("user-pj-5", title="Three")
        repo = current_domain.repository_for(Notification)
        n = repo.get(first)
        n.mark_read()
        repo.add(n)

        assert [e.title for e in user_feed("user-pj-5", unread_only=True)] == ["Three", "Two"]
        assert len(user_feed("user-pj-5", limit=1)) == 1
        assert unread_count("user-pj-5") == 2
