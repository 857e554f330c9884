"""
Tests for the matching router (/api/matching).

Covers:
- POST /find with the real engine
- POST /run, POST /quotes/{id}/rematch, GET /quotes/{id} delegation
- Match feedback submission, listing and statistics
- Request validation (422)
"""

import json

from fastapi import status

from src.domain.quoting.value_objects import FeedbackStatistics, MatchFeedback
from src.domain.quoting.value_objects.quote_match import MatchedQuoteSummary, QuoteMatch
from src.domain.shared.exceptions import MatchNotFoundError


# ============================================================================
# POST /api/matching/find
# ============================================================================


def test_find_returns_ranked_matches(client, query_payload, candidates_payload):
    """Test stateless matching with the real engine."""
    response = client.post(
        "/api/matching/find",
        json={"query": query_payload, "candidates": candidates_payload, "min_score": 0.5},
    )

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["count"] == 1
    match = data["matches"][0]
    assert match["matched_quote_id"] == 2
    assert match["similarity_score"] == 0.6923
    assert match["suggested_price"] == 2200.0
    assert set(match["match_criteria"]) == {
        "origin",
        "destination",
        "cargo_type",
        "weight",
        "dimensions",
        "service_type",
        "hazmat",
        "pieces",
    }


def test_find_with_weight_override(client, query_payload, candidates_payload):
    """Test a weight table override in the request body."""
    response = client.post(
        "/api/matching/find",
        json={
            "query": query_payload,
            "candidates": candidates_payload,
            "min_score": 0.0,
            "weights": {"service_type": 1.0},
        },
    )

    scores = [match["similarity_score"] for match in response.json()["matches"]]
    assert scores == [1.0, 0.0]


def test_find_with_empty_pool(client, query_payload):
    """Test matching against an empty candidate pool."""
    response = client.post("/api/matching/find", json={"query": query_payload})

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"matches": [], "count": 0}


def test_find_rejects_invalid_threshold(client, query_payload):
    """Test 422 for min_score outside 0-1."""
    response = client.post(
        "/api/matching/find", json={"query": query_payload, "min_score": 2}
    )

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_find_rejects_negative_weight(client, query_payload, candidates_payload):
    """Test 400 INVALID_MATCHING_CONFIG for a negative weight."""
    response = client.post(
        "/api/matching/find",
        json={"query": query_payload, "candidates": candidates_payload, "weights": {"origin": -1}},
    )

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["code"] == "INVALID_MATCHING_CONFIG"


def test_find_rejects_nan_weight(client, query_payload, candidates_payload):
    """Test 400 INVALID_MATCHING_CONFIG for a NaN weight."""
    body = json.dumps({"query": query_payload, "candidates": candidates_payload})
    body = body[:-1] + ', "weights": {"origin": NaN, "service_type": 0.1}}'

    response = client.post(
        "/api/matching/find", content=body, headers={"Content-Type": "application/json"}
    )

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["code"] == "INVALID_MATCHING_CONFIG"


def test_find_with_oversized_cargo_weight(client, query_payload, candidates_payload):
    """Test that a cargo weight beyond float range is treated as missing."""
    query = {**query_payload, "cargo_weight": 10**400}

    response = client.post(
        "/api/matching/find", json={"query": query, "candidates": candidates_payload}
    )

    assert response.status_code == status.HTTP_200_OK
    for match in response.json()["matches"]:
        assert match["match_criteria"]["weight"] == 0.0


# ============================================================================
# POST /api/matching/run
# ============================================================================


def test_run_delegates_to_use_case(client, mock_quote_matching_use_case):
    """Test that POST /run passes the command to the use case."""
    response = client.post(
        "/api/matching/run", json={"quote_ids": [1, 1, 2], "min_score": 0.6}
    )

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["matches_created"] == 1
    command = mock_quote_matching_use_case.process_new_quotes.await_args.args[0]
    assert command.quote_ids == [1, 2]
    assert command.min_score == 0.6


def test_run_requires_quote_ids(client):
    """Test 422 for an empty quote id list."""
    response = client.post("/api/matching/run", json={"quote_ids": []})

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


# ============================================================================
# REMATCH / STORED MATCHES
# ============================================================================


def test_rematch_without_body_uses_defaults(client, mock_quote_matching_use_case):
    """Test rematch with default options."""
    response = client.post("/api/matching/quotes/7/rematch")

    assert response.status_code == status.HTTP_200_OK
    mock_quote_matching_use_case.rematch_quote.assert_awaited_once_with(
        7, min_score=None, max_matches=None
    )


def test_rematch_with_options(client, mock_quote_matching_use_case):
    """Test rematch with threshold and cap overrides."""
    client.post("/api/matching/quotes/7/rematch", json={"min_score": 0.8, "max_matches": 3})

    mock_quote_matching_use_case.rematch_quote.assert_awaited_once_with(
        7, min_score=0.8, max_matches=3
    )


def test_get_stored_matches(client, mock_quote_matching_use_case):
    """Test reading stored matches with query filters."""
    mock_quote_matching_use_case.get_matches.return_value = [
        QuoteMatch(
            source_quote_id=7,
            matched_quote_id=2,
            similarity_score=0.9,
            suggested_price=2200.0,
            price_confidence=1.0,
            matched_quote=MatchedQuoteSummary(origin="Savannah, USA", destination="Chicago, USA"),
        )
    ]

    response = client.get("/api/matching/quotes/7?limit=5&min_score=0.5")

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["count"] == 1
    mock_quote_matching_use_case.get_matches.assert_awaited_once_with(7, limit=5, min_score=0.5)


def test_get_stored_matches_validates_limit(client):
    """Test 422 for limit below 1."""
    response = client.get("/api/matching/quotes/7?limit=0")

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


# ============================================================================
# MATCH FEEDBACK
# ============================================================================


def test_submit_feedback_returns_created(client, mock_match_feedback_use_case):
    """Test 201 and use case delegation for feedback."""
    mock_match_feedback_use_case.submit_feedback.return_value = MatchFeedback(
        source_quote_id=7,
        matched_quote_id=2,
        rating=1,
        feedback_reason="good_match",
        actual_price_used=2250,
        user_id="dispatcher-7",
    )

    response = client.post(
        "/api/matching/quotes/7/matches/2/feedback",
        json={
            "rating": 1,
            "feedback_reason": "good_match",
            "actual_price_used": 2250,
            "user_id": "dispatcher-7",
        },
    )

    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["rating"] == 1
    assert data["feedback_reason"] == "good_match"
    source_id, matched_id, command = mock_match_feedback_use_case.submit_feedback.await_args.args
    assert (source_id, matched_id) == (7, 2)
    assert command.user_id == "dispatcher-7"


def test_submit_feedback_for_unknown_match_is_not_found(client, mock_match_feedback_use_case):
    """Test 404 MATCH_NOT_FOUND for feedback on an unknown match."""
    mock_match_feedback_use_case.submit_feedback.side_effect = MatchNotFoundError(7, 99)

    response = client.post("/api/matching/quotes/7/matches/99/feedback", json={"rating": -1})

    assert response.status_code == status.HTTP_404_NOT_FOUND
    data = response.json()
    assert data["code"] == "MATCH_NOT_FOUND"
    assert data["details"]["matched_quote_id"] == 99


def test_submit_feedback_validates_body(client, mock_match_feedback_use_case):
    """Test 422 for invalid ratings, reasons and prices."""
    invalid_bodies = [
        {"rating": 0},
        {"rating": 5},
        {"rating": 1, "feedback_reason": "too_cheap"},
        {"rating": 1, "actual_price_used": -10},
        {},
    ]

    for body in invalid_bodies:
        response = client.post("/api/matching/quotes/7/matches/2/feedback", json=body)
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY, body

    mock_match_feedback_use_case.submit_feedback.assert_not_awaited()


def test_get_match_feedback(client, mock_match_feedback_use_case):
    """Test listing feedback on a match."""
    mock_match_feedback_use_case.get_feedback.return_value = [
        MatchFeedback(source_quote_id=7, matched_quote_id=2, rating=-1, feedback_reason="wrong_route")
    ]

    response = client.get("/api/matching/quotes/7/matches/2/feedback")

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["count"] == 1
    mock_match_feedback_use_case.get_feedback.assert_awaited_once_with(7, 2)


def test_get_feedback_statistics(client, mock_match_feedback_use_case):
    """Test statistics filtered by algorithm version."""
    mock_match_feedback_use_case.get_statistics.return_value = FeedbackStatistics(
        total_feedback=4, thumbs_up=3, thumbs_down=1, approval_rate=0.75, algorithm_version="v1"
    )

    response = client.get("/api/matching/feedback/stats?algorithm_version=v1")

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["approval_rate"] == 0.75
    mock_match_feedback_use_case.get_statistics.assert_awaited_once_with(algorithm_version="v1")


def test_get_feedback_statistics_without_filter(client, mock_match_feedback_use_case):
    """Test statistics over all algorithm versions."""
    response = client.get("/api/matching/feedback/stats")

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["total_feedback"] == 0
    mock_match_feedback_use_case.get_statistics.assert_awaited_once_with(algorithm_version=None)
