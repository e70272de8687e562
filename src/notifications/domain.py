"""Notifications bounded context — in-app, email and push messages for Welcome Winks users.

Consumes events published by the Ratings domain (business ratings,
achievements, business reports) and turns them into per-user
notifications. Tracks read/dismissed state for the in-app feed, honors
each user's topic and channel preferences, and dispatches email and push
copies through channel adapters.
"""

import structlog
from protean.domain import Domain

notifications = Domain(name="notifications")

logger = structlog.get_logger(__name__)
