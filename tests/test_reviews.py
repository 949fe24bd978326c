"""Tests for review and claim logic."""

import pytest

from jamguide.core.claims import Claim, ClaimRequestError, ClaimStatus, build_claim, pending_first
from jamguide.core.reviews import (
    Review,
    ReviewError,
    average,
    build_review,
    format_rating,
    summarize_reviews,
)


@pytest.fixture
def reviews():
    return [
        Review(id=1, jam_id=9, overall_rating=5, networking_rating=4, info_accuracy_rating=None, happened=True),
        Review(id=2, jam_id=9, overall_rating=3, networking_rating=None, info_accuracy_rating=None, happened=False),
        Review(id=3, jam_id=9, overall_rating=4, networking_rating=2, info_accuracy_rating=None, happened=None),
    ]


class TestAverage:
    def test_ignores_missing(self):
        assert average([4, None, 2]) == 3

    def test_none_when_empty(self):
        assert average([]) is None
        assert average([None, None]) is None

    def test_format_rating(self):
        assert format_rating(None) == "--"
        assert format_rating(4.25) == "4.2"
        assert format_rating(4) == "4.0"


class TestSummarizeReviews:
    def test_summary(self, reviews):
        s = summarize_reviews(reviews)
        assert s.count == 3
        assert s.overall == 4
        assert s.networking == 3
        assert s.accuracy is None
        assert s.checkins == 1
        assert s.negative_checkins == 1

    def test_no_reviews(self):
        s = summarize_reviews([])
        assert s.count == 0
        assert s.overall is None


class TestReview:
    def test_from_row(self):
        review = Review.from_row({"id": 1, "jam_id": 2, "overall_rating": 5, "happened": False})
        assert review.overall_rating == 5
        assert review.happened_label == "Reported not happening"

    @pytest.mark.parametrize("happened,label", [
        (True, "Happening recently"),
        (False, "Reported not happening"),
        (None, "Status unknown"),
    ])
    def test_happened_label(self, happened, label):
        assert Review(id=1, jam_id=1, happened=happened).happened_label == label

    def test_format_date(self):
        assert Review(id=1, jam_id=1, created_at="2025-01-05T12:00:00+00:00").format_date() == "Jan 05, 2025"
        assert Review(id=1, jam_id=1, created_at="bad").format_date() == ""
        assert Review(id=1, jam_id=1).format_date() == ""


class TestBuildReview:
    def test_defaults(self):
        payload = build_review(9)
        assert payload == {
            "jam_id": 9,
            "overall_rating": 4,
            "networking_rating": 4,
            "info_accuracy_rating": 4,
            "happened": True,
            "comments": None,
            "display_name": None,
        }

    def test_trims_text_and_maps_happened(self):
        payload = build_review(9, happened="unknown", display_name="  Sam ", comments=" great ")
        assert payload["happened"] is None
        assert payload["display_name"] == "Sam"
        assert payload["comments"] == "great"

    def test_rating_out_of_range(self):
        with pytest.raises(ReviewError, match="overall"):
            build_review(9, overall=6)

    def test_unknown_happened(self):
        with pytest.raises(ReviewError):
            build_review(9, happened="maybe")


class TestClaims:
    def test_from_row_with_join(self):
        claim = Claim.from_row(
            {"id": 1, "jam_id": 2, "user_id": "u", "status": "approved", "jams": {"event_name": "Jam"}}
        )
        assert claim.status is ClaimStatus.APPROVED
        assert claim.event_name == "Jam"
        assert claim.is_pending is False

    def test_missing_status_is_pending(self):
        claim = Claim.from_row({"id": 1, "jam_id": 2, "user_id": "u"})
        assert claim.is_pending is True
        assert claim.event_name is None

    def test_build_claim(self):
        assert build_claim(2, "u", " 555-1234 ", None) == {
            "jam_id": 2,
            "user_id": "u",
            "phone_number": "555-1234",
            "notes": "",
        }

    def test_build_claim_requires_phone(self):
        with pytest.raises(ClaimRequestError, match="phone"):
            build_claim(2, "u", "  ")

    def test_pending_first(self):
        claims = [
            Claim(id=1, jam_id=1, user_id="a", status=ClaimStatus.REJECTED),
            Claim(id=2, jam_id=1, user_id="b"),
            Claim(id=3, jam_id=1, user_id="c", status=ClaimStatus.APPROVED),
            Claim(id=4, jam_id=1, user_id="d"),
        ]
        assert [c.id for c in pending_first(claims)] == [2, 4, 1, 3]
