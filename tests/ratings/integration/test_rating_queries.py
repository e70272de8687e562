"""Integration tests for read-side lookups over businesses and ratings."""

import json

import pytest
from protean import current_domain
from ratings.admin.review_search import ReviewFilter, find_suspicious_reviews, search_reviews
from ratings.business.business import Business
from ratings.business.queries import businesses_near, score_for, search_businesses_by_name, top_rated_businesses
from ratings.business.registration import RegisterBusiness
from ratings.projections.business_score import BusinessScore
from ratings.rating.queries import (
    business_ratings,
    nearby_raters,
    rating_statistics,
    reviewer_stats,
    user_ratings,
)
from ratings.rating.rating import Rating
from ratings.rating.refresh import RefreshBusinessScores
from ratings.rating.removal import RemoveRating
from ratings.rating.scoring import QUESTION_KEYS
from ratings.rating.submission import SubmitRating

MOST_WELCOMING = {
    "trump_welcome": "No",
    "obama_welcome": "Yes",
    "person_of_color_comfort": "Yes",
    "lgbtq_safety": "Yes",
    "undocumented_safety": "Yes",
    "firearm_normal": "No",
}
ALL_PROBABLY = {key: "Probably" for key in QUESTION_KEYS}

# Roughly 0.35 miles apart along a Manhattan avenue; the third is across the river.
HERE = (40.7484, -73.9857)
CLOSE_BY = (40.7535, -73.9832)
FAR_AWAY = (40.6892, -74.0445)


def _register(place_id, coords, name=None):
    current_domain.process(
        RegisterBusiness(
            place_id=place_id, name=name or f"Business {place_id}", latitude=coords[0], longitude=coords[1]
        ),
        asynchronous=False,
    )


def _rate(place_id, user_id, answers=MOST_WELCOMING, ip=None):
    return current_domain.process(
        SubmitRating(business_id=place_id, user_id=user_id, answers=json.dumps(answers), user_ip_address=ip),
        asynchronous=False,
    )


class TestBusinessesNear:
    def test_closest_first_within_radius(self):
        _register("place-q-far", FAR_AWAY)
        _register("place-q-close", CLOSE_BY)
        _register("place-q-here", HERE)

        nearby = businesses_near(HERE[0], HERE[1], radius_km=2)
        assert [b.business_id for b in nearby] == ["place-q-here", "place-q-close"]

    def test_limit(self):
        _register("place-q-l1", HERE)
        _register("place-q-l2", CLOSE_BY)
        assert len(businesses_near(HERE[0], HERE[1], radius_km=5, limit=1)) == 1


class TestScores:
    def test_unrated_business_has_no_score(self):
        _register("place-q-unrated", HERE)
        assert score_for("place-q-unrated") is None

    def test_top_rated_ordering(self):
        _register("place-q-top1", HERE)
        _register("place-q-top2", CLOSE_BY)
        _rate("place-q-top1", "user-top-a", ALL_PROBABLY)
        _rate("place-q-top2", "user-top-a", MOST_WELCOMING)

        top = top_rated_businesses(limit=10)
        assert [str(s.business_id) for s in top][:2] == ["place-q-top2", "place-q-top1"]


class TestSearchBusinesses:
    def test_prefix_match_case_insensitive(self):
        _register("place-q-s1", HERE, name="Joe's Coffee")
        _register("place-q-s2", CLOSE_BY, name="Joella Bakery")
        _register("place-q-s3", FAR_AWAY, name="Best Joe Diner")

        names = [b.name for b in search_businesses_by_name("joe")]
        assert names == ["Joe's Coffee", "Joella Bakery"]

    def test_blank_term(self):
        assert search_businesses_by_name("   ") == []


class TestRatingLookups:
    def test_business_and_user_ratings(self):
        _register("place-q-r1", HERE)
        _register("place-q-r2", CLOSE_BY)
        _rate("place-q-r1", "user-r-a")
        _rate("place-q-r1", "user-r-b")
        _rate("place-q-r2", "user-r-a")

        assert len(business_ratings("place-q-r1")) == 2
        assert {str(r.business_id) for r in user_ratings("user-r-a")} == {"place-q-r1", "place-q-r2"}

    def test_reviewer_stats(self):
        _register("place-q-st1", HERE)
        _register("place-q-st2", CLOSE_BY)
        _rate("place-q-st1", "user-stats", MOST_WELCOMING)
        _rate("place-q-st2", "user-stats", ALL_PROBABLY)

        stats = reviewer_stats("user-stats")
        assert stats.total_ratings == 2
        assert stats.businesses_rated == 2
        assert stats.highest_score == 4.998
        assert stats.high_score_ratings == 1
        assert stats.average_score == pytest.approx(3.892)
        assert stats.last_rated_at is not None

    def test_reviewer_stats_for_unknown_user(self):
        stats = reviewer_stats("user-nobody")
        assert stats.total_ratings == 0
        assert stats.average_score == 0.0

    def test_rating_statistics(self):
        _register("place-q-all", HERE)
        _rate("place-q-all", "user-all-a", MOST_WELCOMING)
        removed = _rate("place-q-all", "user-all-b", ALL_PROBABLY)
        current_domain.process(RemoveRating(rating_id=removed, removed_by="admin-1"), asynchronous=False)

        stats = rating_statistics()
        assert stats.total_ratings == 2
        assert stats.active_ratings == 1
        assert stats.removed_ratings == 1
        assert stats.by_level["very-welcoming"] == 1
        assert stats.by_level["moderately-welcoming"] == 0
        assert stats.unique_users == 1


class TestNearbyRaters:
    def test_raters_of_nearby_businesses(self):
        _register("place-n-here", HERE)
        _register("place-n-close", CLOSE_BY)
        _register("place-n-far", FAR_AWAY)
        _rate("place-n-close", "user-n-neighbour")
        _rate("place-n-far", "user-n-distant")
        _rate("place-n-here", "user-n-regular")

        business = current_domain.repository_for(Business).get("place-n-here")
        raters = nearby_raters(business, exclude_user_id="user-n-rater")

        by_user = {r["user_id"]: r["distance_miles"] for r in raters}
        assert set(by_user) == {"user-n-regular", "user-n-neighbour"}
        assert by_user["user-n-regular"] == 0.0
        assert 0.2 < by_user["user-n-neighbour"] < 0.6

    def test_excludes_the_rater(self):
        _register("place-n-self", HERE)
        _rate("place-n-self", "user-n-self")
        business = current_domain.repository_for(Business).get("place-n-self")
        assert nearby_raters(business, exclude_user_id="user-n-self") == []

    def test_removed_ratings_do_not_count(self):
        _register("place-n-rem", HERE)
        rating_id = _rate("place-n-rem", "user-n-removed")
        current_domain.process(RemoveRating(rating_id=rating_id, removed_by="admin-1"), asynchronous=False)
        business = current_domain.repository_for(Business).get("place-n-rem")
        assert nearby_raters(business) == []

    def test_capped_at_ten(self):
        _register("place-n-busy", HERE)
        for i in range(12):
            _rate("place-n-busy", f"user-n-busy-{i}")
        business = current_domain.repository_for(Business).get("place-n-busy")
        assert len(nearby_raters(business)) == 10


class TestAdminReviewSearch:
    def test_enriched_with_business(self):
        _register("place-adm-1", HERE, name="Searchable Deli")
        _rate("place-adm-1", "user-adm-1", ip="198.51.100.44")

        reviews = search_reviews(ReviewFilter(user_id="user-adm-1"))
        assert len(reviews) == 1
        assert reviews[0].business_name == "Searchable Deli"
        assert reviews[0].user_ip_address == "198.51.100.44"

    def test_filters(self):
        _register("place-adm-2", HERE, name="Filter Pizza")
        _register("place-adm-3", CLOSE_BY, name="Other Pasta")
        _rate("place-adm-2", "user-adm-a", MOST_WELCOMING, ip="198.51.100.50")
        _rate("place-adm-3", "user-adm-b", ALL_PROBABLY, ip="198.51.100.51")

        assert [r.business_name for r in search_reviews(ReviewFilter(business_name="pizza"))] == ["Filter Pizza"]
        assert [r.user_id for r in search_reviews(ReviewFilter(ip_address="100.51"))] == ["user-adm-b"]
        assert [r.user_id for r in search_reviews(ReviewFilter(min_score=4.0))] == ["user-adm-a"]
        assert [r.user_id for r in search_reviews(ReviewFilter(max_score=3.0))] == ["user-adm-b"]

    def test_removed_reviews_hidden_unless_requested(self):
        _register("place-adm-4", HERE)
        rating_id = _rate("place-adm-4", "user-adm-rm")
        current_domain.process(RemoveRating(rating_id=rating_id, removed_by="admin-1"), asynchronous=False)

        assert search_reviews(ReviewFilter(business_id="place-adm-4")) == []
        found = search_reviews(ReviewFilter(business_id="place-adm-4", include_removed=True))
        assert [r.status for r in found] == ["Removed"]

    def test_unregistered_business_shown_as_unknown(self):
        _register("place-adm-5", HERE)
        _rate("place-adm-5", "user-adm-5")
        repo = current_domain.repository_for(Business)
        repo._dao.delete(repo.get("place-adm-5"))

        reviews = search_reviews(ReviewFilter(user_id="user-adm-5"))
        assert reviews[0].business_name == "Unknown Business"

    def test_suspicious_shared_ip(self):
        for i in range(4):
            _register(f"place-sus-{i}", HERE)
            _rate(f"place-sus-{i}", f"user-sus-{i}", ALL_PROBABLY, ip="198.51.100.99")

        activity = find_suspicious_reviews()
        assert len(activity.duplicate_ips) == 4
        assert activity.total_flagged >= 4



def _seed_ratings(business_id, count, answers=ALL_PROBABLY):
    """Store ratings directly, skipping projectors, to build up large tables quickly."""
    repo = current_domain.repository_for(Rating)
    for i in range(count):
        rating = Rating.submit(business_id=business_id, user_id=f"user-bulk-{business_id}-{i}", answers=answers)
        rating._events.clear()
        repo.add(rating)


class TestLargeTables:
    def test_top_rated_considers_every_scored_business(self):
        repo = current_domain.repository_for(BusinessScore)
        for i in range(150):
            repo.add(BusinessScore(business_id=f"place-big-{i:03d}", average_score=2.0, total_ratings=1))
        repo.add(BusinessScore(business_id="place-big-best", average_score=4.9, total_ratings=3))

        top = top_rated_businesses(limit=5)
        assert str(top[0].business_id) == "place-big-best"
        assert len(top) == 5

    def test_top_rated_breaks_ties_on_rating_count(self):
        repo = current_domain.repository_for(BusinessScore)
        repo.add(BusinessScore(business_id="place-tie-few", average_score=4.0, total_ratings=2))
        repo.add(BusinessScore(business_id="place-tie-many", average_score=4.0, total_ratings=9))

        assert [str(s.business_id) for s in top_rated_businesses(limit=2)] == ["place-tie-many", "place-tie-few"]

    def test_business_average_counts_every_rating(self):
        _register("place-big-avg", HERE)
        _seed_ratings("place-big-avg", 130)

        current_domain.process(RefreshBusinessScores(business_id="place-big-avg"), asynchronous=False)
        assert score_for("place-big-avg").total_ratings == 130

    def test_statistics_count_every_rating(self):
        _seed_ratings("place-big-stats", 120)

        stats = rating_statistics()
        assert stats.total_ratings == 120
        assert stats.by_level["moderately-welcoming"] == 120
