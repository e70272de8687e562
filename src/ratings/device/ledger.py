"""DeviceReviewLedger — which businesses a device (cookie account) has reviewed.

Cookie accounts have no login, so one-review-per-business is enforced per
device. Entries older than a year no longer block a new review, and only
the most recent entries are kept.
"""

import json
from datetime import UTC, datetime, timedelta

from protean.fields import DateTime, Identifier, Integer, Text
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from ratings.domain import logger, ratings

REVIEW_EXPIRY = timedelta(days=365)
MAX_ENTRIES = 1000


def _parse(timestamp: str) -> datetime:
    value = datetime.fromisoformat(timestamp)
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value


@ratings.aggregate
class DeviceReviewLedger:
    device_id = Identifier(identifier=True, required=True)
    entries = Text()  # JSON: [{business_id, user_id, reviewed_at}]
    entry_count = Integer(default=0)
    updated_at = DateTime()

    @classmethod
    def open(cls, device_id):
        return cls(device_id=device_id, entries=json.dumps([]), entry_count=0, updated_at=datetime.now(UTC))

    def _entries(self) -> list[dict]:
        return json.loads(self.entries) if self.entries else []

    def _store(self, entries):
        self.entries = json.dumps(entries)
        self.entry_count = len(entries)
        self.updated_at = datetime.now(UTC)

    def has_reviewed(self, business_id, now=None) -> bool:
        now = now or datetime.now(UTC)
        return any(
            entry["business_id"] == str(business_id) and now - _parse(entry["reviewed_at"]) < REVIEW_EXPIRY
            for entry in self._entries()
        )

    def mark_reviewed(self, business_id, user_id=None, now=None):
        if self.has_reviewed(business_id, now):
            return

        now = now or datetime.now(UTC)
        entries = [e for e in self._entries() if e["business_id"] != str(business_id)]
        entries.append(
            {
                "business_id": str(business_id),
                "user_id": str(user_id) if user_id else None,
                "reviewed_at": now.isoformat(),
            }
        )
        entries.sort(key=lambda e: e["reviewed_at"], reverse=True)
        self._store(entries[:MAX_ENTRIES])

    def forget_business(self, business_id):
        self._store([e for e in self._entries() if e["business_id"] != str(business_id)])

    def clear(self):
        self._store([])

    def reviewed_businesses(self) -> list[str]:
        return [e["business_id"] for e in self._entries()]

    def reviewed_many_recently(self, hours=24, max_reviews=10, now=None) -> bool:
        """True when the device reviewed at least ``max_reviews`` businesses in the last ``hours``."""
        now = now or datetime.now(UTC)
        window = timedelta(hours=hours)
        recent = [e for e in self._entries() if now - _parse(e["reviewed_at"]) <= window]
        return len(recent) >= max_reviews


@ratings.command(part_of="DeviceReviewLedger")
class ClearDeviceReviews:
    device_id = Identifier(required=True)


@ratings.command(part_of="DeviceReviewLedger")
class ForgetReviewedBusiness:
    device_id = Identifier(required=True)
    business_id = Identifier(required=True)


@ratings.command_handler(part_of=DeviceReviewLedger)
class DeviceReviewLedgerHandler:
    @handle(ClearDeviceReviews)
    def clear_device_reviews(self, command):
        repo = current_domain.repository_for(DeviceReviewLedger)
        ledger = repo.get(command.device_id)
        ledger.clear()
        repo.add(ledger)
        logger.info("Device review ledger cleared", device_id=str(command.device_id))

    @handle(ForgetReviewedBusiness)
    def forget_reviewed_business(self, command):
        repo = current_domain.repository_for(DeviceReviewLedger)
        ledger = repo.get(command.device_id)
        ledger.forget_business(command.business_id)
        repo.add(ledger)


def ledger_for(device_id) -> DeviceReviewLedger | None:
    results = current_domain.repository_for(DeviceReviewLedger)._dao.query.filter(device_id=str(device_id)).all()
    return results.items[0] if results.items else None
