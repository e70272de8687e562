"""Ratings domain API package."""

from ratings.api.routes import admin_router, business_router, rating_router, report_router, scoring_router

__all__ = ["business_router", "rating_router", "scoring_router", "report_router", "admin_router"]
