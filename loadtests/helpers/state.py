"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance maintains its own state; nothing is shared across users.
State tracks ids returned by creation endpoints so follow-up operations can
reference them.
"""

from dataclasses import dataclass, field


@dataclass
class RaterState:
    """Tracks a simulated rater moving between businesses."""

    user_id: str | None = None
    device_id: str | None = None
    business_ids: list[str] = field(default_factory=list)
    business_names: dict[str, str] = field(default_factory=dict)
    rating_ids: list[str] = field(default_factory=list)
