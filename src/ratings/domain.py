"""Ratings bounded context — Businesses, survey ratings and the Winks Score.

Handles business registration, survey rating submission and revision,
scoring configuration, per-device review limits, business score
aggregation, achievements, business reports and the admin review tools
(search, removal, suspicious activity detection).
"""

from protean.domain import Domain

from ratings.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

ratings = Domain(name="ratings")
