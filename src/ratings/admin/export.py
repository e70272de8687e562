"""Admin data export of businesses, reviews and reports as JSON or CSV.

CSV output holds one section per dataset, each introduced by a
``=== NAME ===`` line and its own header row.
"""

import csv
import io
import json
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from ratings.admin.review_search import ReviewFilter, search_reviews
from ratings.business.business import Business
from ratings.domain import logger
from ratings.projections.business_score import BusinessScore
from ratings.report.report import BusinessReport


class ExportFormat(Enum):
    JSON = "json"
    CSV = "csv"


@dataclass(frozen=True)
class ExportOptions:
    include_businesses: bool = True
    include_reviews: bool = True
    include_reports: bool = False
    date_from: datetime | None = None
    date_to: datetime | None = None
    format: str = ExportFormat.JSON.value


BUSINESS_COLUMNS = ["id", "name", "address", "average_score", "total_ratings", "created_at"]
REVIEW_COLUMNS = [
    "id",
    "business_name",
    "business_id",
    "user_id",
    "ip_address",
    "total_score",
    "welcoming_level",
    "account_type",
    "status",
    "created_at",
]
REPORT_COLUMNS = [
    "id",
    "business_id",
    "business_name",
    "reported_by",
    "reporter_account_type",
    "reason",
    "description",
    "severity",
    "status",
    "created_at",
    "updated_at",
]


def _aware(moment):
    if moment is None:
        return None
    return moment if moment.tzinfo else moment.replace(tzinfo=UTC)


def _in_range(moment, options: ExportOptions) -> bool:
    if moment is None:
        return options.date_from is None and options.date_to is None
    moment = _aware(moment)
    if options.date_from and moment < _aware(options.date_from):
        return False
    if options.date_to and moment > _aware(options.date_to):
        return False
    return True


def _iso(moment) -> str | None:
    return moment.isoformat() if moment else None


def export_businesses(options: ExportOptions) -> list[dict]:
    businesses = current_domain.repository_for(Business)._dao.query.order_by("name").limit(None).all().items
    scores = {
        str(s.business_id): s for s in current_domain.repository_for(BusinessScore)._dao.query.limit(None).all().items
    }
    rows = []
    for business in businesses:
        if not _in_range(business.created_at, options):
            continue
        score = scores.get(str(business.business_id))
        rows.append(
            {
                "id": str(business.business_id),
                "name": business.name,
                "address": business.address,
                "average_score": score.average_score if score else None,
                "total_ratings": score.total_ratings if score else 0,
                "created_at": _iso(business.created_at),
            }
        )
    return rows


def export_reviews(options: ExportOptions) -> list[dict]:
    reviews = search_reviews(
        ReviewFilter(date_from=options.date_from, date_to=options.date_to, include_removed=True), limit=None
    )
    return [
        {
            "id": r.id,
            "business_name": r.business_name,
            "business_id": r.business_id,
            "user_id": r.user_id,
            "ip_address": r.user_ip_address,
            "total_score": r.total_score,
            "welcoming_level": r.welcoming_level,
            "account_type": r.user_account_type,
            "status": r.status,
            "created_at": _iso(r.created_at),
        }
        for r in reviews
    ]


def export_reports(options: ExportOptions) -> list[dict]:
    reports = current_domain.repository_for(BusinessReport)._dao.query.order_by("-created_at").limit(None).all().items
    return [
        {
            "id": str(r.id),
            "business_id": str(r.business_id),
            "business_name": r.business_name,
            "reported_by": str(r.reported_by),
            "reporter_account_type": r.reporter_account_type,
            "reason": r.reason,
            "description": r.description,
            "severity": r.severity,
            "status": r.status,
            "created_at": _iso(r.created_at),
            "updated_at": _iso(r.updated_at),
        }
        for r in reports
        if _in_range(r.created_at, options)
    ]


def _to_csv(datasets: dict[str, list[dict]]) -> str:
    columns = {"businesses": BUSINESS_COLUMNS, "reviews": REVIEW_COLUMNS, "reports": REPORT_COLUMNS}
    buffer = io.StringIO()
    for index, (name, rows) in enumerate(datasets.items()):
        if index:
            buffer.write("\n")
        buffer.write(f"=== {name.upper()} ===\n")
        writer = csv.DictWriter(buffer, fieldnames=columns[name], lineterminator="\n")
        writer.writeheader()
        writer.writerows(rows)
    return buffer.getvalue()


def export_data(options: ExportOptions | None = None) -> str:
    options = options or ExportOptions()
    try:
        fmt = ExportFormat(options.format)
    except ValueError:
        raise ValidationError({"format": [f"Unknown export format: {options.format}"]}) from None

    datasets: dict[str, list[dict]] = {}
    if options.include_businesses:
        datasets["businesses"] = export_businesses(options)
    if options.include_reviews:
        datasets["reviews"] = export_reviews(options)
    if options.include_reports:
        datasets["reports"] = export_reports(options)

    logger.info("Admin export", format=fmt.value, **{name: len(rows) for name, rows in datasets.items()})
    if fmt is ExportFormat.CSV:
        return _to_csv(datasets)
    return json.dumps(datasets, indent=2)
