"""Mixed workload scenario.

Combines rating, browsing and notification journeys with weights that
model a community review app: mostly reads, steady rating writes, and a
trickle of reports.
"""

from locust import HttpUser, between

from loadtests.scenarios.browse import BrowseMapTaskSet
from loadtests.scenarios.notifications import NotificationInboxJourney
from loadtests.scenarios.ratings import (
    CookieVisitorJourney,
    RateNeighbourhoodJourney,
    ReportBusinessJourney,
)


class MixedWorkloadUser(HttpUser):
    """Realistic mixed workload across both domains.

    Browsing (45%): nearby/top/search reads against the score projection.
    Rating (40%): registered raters and cookie visitors.
    Notifications (10%): inbox reads and preference changes.
    Reports (5%): reports fan out to reporter and operations notifications.
    """

    wait_time = between(0.5, 3.0)
    tasks = {
        BrowseMapTaskSet: 9,
        RateNeighbourhoodJourney: 5,
        CookieVisitorJourney: 3,
        NotificationInboxJourney: 2,
        ReportBusinessJourney: 1,
    }


class RatingBurstUser(HttpUser):
    """Write-only burst: every user rates a fresh neighbourhood back to back."""

    wait_time = between(0.1, 0.5)
    tasks = [RateNeighbourhoodJourney]
