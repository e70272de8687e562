"""Template registry — maps NotificationType to template classes.

Each template knows its default channels and how to render title, message
and call-to-action from event context data.
"""

from notifications.notification.notification import NotificationType
from notifications.templates.achievement import AchievementTemplate
from notifications.templates.community_activity import CommunityActivityTemplate
from notifications.templates.nearby_rating import NearbyRatingTemplate
from notifications.templates.new_business import NewBusinessTemplate
from notifications.templates.report_alert import ReportAlertTemplate
from notifications.templates.report_received import ReportReceivedTemplate
from notifications.templates.report_resolved import ReportResolvedTemplate
from notifications.templates.score_update import ScoreUpdateTemplate
from notifications.templates.system import SystemTemplate

TEMPLATE_REGISTRY: dict[str, type] = {
    NotificationType.NEW_BUSINESS.value: NewBusinessTemplate,
    NotificationType.SCORE_UPDATE.value: ScoreUpdateTemplate,
    NotificationType.ACHIEVEMENT.value: AchievementTemplate,
    NotificationType.COMMUNITY_ACTIVITY.value: CommunityActivityTemplate,
    NotificationType.SYSTEM.value: SystemTemplate,
    NotificationType.NEARBY_RATING.value: NearbyRatingTemplate,
    NotificationType.REPORT_RECEIVED.value: ReportReceivedTemplate,
    NotificationType.REPORT_RESOLVED.value: ReportResolvedTemplate,
    NotificationType.REPORT_ALERT.value: ReportAlertTemplate,
}


def get_template(notification_type: str):
    """Look up a template class by notification type string."""
    template_cls = TEMPLATE_REGISTRY.get(notification_type)
    if template_cls is None:
        raise ValueError(f"No template registered for notification type: {notification_type}")
    return template_cls
