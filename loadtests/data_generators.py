"""Faker-based data generators for Locust load test scenarios.

Payloads pass the domain's validation rules (coordinate ranges, the four
survey answers, known report reasons) and match the field names expected
by the API's Pydantic request schemas.
"""

import random
import uuid

from faker import Faker

fake = Faker()

# Businesses cluster around a few metro centres so nearby queries and
# nearby-rater fan-out see realistic density.
METRO_CENTRES = [
    (40.7128, -74.0060),  # New York
    (34.0522, -118.2437),  # Los Angeles
    (41.8781, -87.6298),  # Chicago
    (29.7604, -95.3698),  # Houston
]

QUESTION_KEYS = [
    "trump_welcome",
    "obama_welcome",
    "person_of_color_comfort",
    "lgbtq_safety",
    "undocumented_safety",
    "firearm_normal",
]
ANSWERS = ["Yes", "Probably", "ProbablyNot", "No"]

CHAIN_BUSINESS_NAMES = ["Starbucks", "McDonald's", "Dunkin'", "Subway"]


def place_id() -> str:
    """Places-style identifier like 'ChIJ-LT-a1b2c3d4e5'."""
    return f"ChIJ-LT-{uuid.uuid4().hex[:10]}"


def user_id() -> str:
    return f"user-lt-{uuid.uuid4().hex[:8]}"


def cookie_user_id() -> str:
    return f"cookie_{uuid.uuid4().hex[:12]}"


def device_id() -> str:
    return f"device-lt-{uuid.uuid4().hex[:8]}"


def coordinates(spread: float = 0.05) -> tuple[float, float]:
    """A point within roughly ``spread`` degrees of a metro centre."""
    lat, lng = random.choice(METRO_CENTRES)
    return (
        round(lat + random.uniform(-spread, spread), 6),
        round(lng + random.uniform(-spread, spread), 6),
    )


def business_data(chain: bool = False) -> dict:
    """Generate RegisterBusinessRequest payload."""
    latitude, longitude = coordinates()
    name = random.choice(CHAIN_BUSINESS_NAMES) if chain else f"{fake.last_name()}'s {fake.word().capitalize()}"
    return {
        "place_id": place_id(),
        "name": name,
        "address": fake.street_address(),
        "latitude": latitude,
        "longitude": longitude,
        "places_data": {
            "types": random.choice([["restaurant"], ["cafe"], ["bar"], ["store"]]),
            "rating": round(random.uniform(3.0, 5.0), 1),
            "user_ratings_total": random.randint(5, 2000),
        },
    }


def answers(lean: str | None = None) -> dict:
    """One answer per survey question.

    ``lean`` of "welcoming" or "unwelcoming" skews the answers so score
    distributions are not uniform noise.
    """
    if lean == "welcoming":
        weights = [6, 3, 1, 1]
    elif lean == "unwelcoming":
        weights = [1, 1, 3, 6]
    else:
        weights = [1, 1, 1, 1]
    return {key: random.choices(ANSWERS, weights=weights)[0] for key in QUESTION_KEYS}


def rating_data(business_id: str, rater_id: str, device: str | None = None) -> dict:
    """Generate SubmitRatingRequest payload."""
    return {
        "business_id": business_id,
        "user_id": rater_id,
        "user_account_type": "cookie" if rater_id.startswith("cookie_") else "full",
        "answers": answers(random.choice(["welcoming", "unwelcoming", None])),
        "user_ip_address": fake.ipv4_public(),
        "device_id": device,
    }


def report_data(business_id: str, business_name: str, reporter_id: str) -> dict:
    """Generate SubmitReportRequest payload."""
    return {
        "business_id": business_id,
        "business_name": business_name,
        "reported_by": reporter_id,
        "reporter_account_type": "full",
        "reporter_email": fake.free_email(),
        "reporter_ip_address": fake.ipv4_public(),
        "reason": random.choice(["fake_reviews", "spam_reviews"]),
        "description": fake.paragraph(nb_sentences=3),
    }


def topic_switches() -> dict:
    """Generate UpdateTopicsRequest payload with a couple of topics flipped."""
    topics = ["new_businesses_nearby", "score_updates", "community_activity", "achievements", "system_updates"]
    return {topic: random.random() > 0.3 for topic in random.sample(topics, k=2)}
