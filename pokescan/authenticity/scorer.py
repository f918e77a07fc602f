"""Heuristic authenticity scoring for a parsed card."""

from ..core.constants import (
    AUTHENTIC_CONFIDENCE,
    CONFIDENCE_HIGH,
    CONFIDENCE_MEDIUM,
    ISSUE_MISSING_INFO,
    ISSUE_NOT_IN_DATABASE,
    MISSING_INFO_CONFIDENCE,
    NOT_IN_DATABASE_CONFIDENCE,
)
from ..core.types import AuthenticityChecks, AuthenticityResult, CardInfo


def build_checks(card_info: CardInfo) -> AuthenticityChecks:
    return AuthenticityChecks(
        has_name=bool(card_info.name),
        has_set_number=bool(card_info.set_number),
        has_hp=bool(card_info.hp),
    )


def score_authenticity(card_info: CardInfo, found_in_database: bool) -> AuthenticityResult:
    """
    Score a card's authenticity from its parsed fields.

    Missing structural data and a database miss short-circuit to fixed low
    confidences; otherwise confidence is the fraction of passed checks.
    The database lookup itself happens in the caller.
    """
    checks = build_checks(card_info)

    if not checks.has_name or not checks.has_set_number:
        return AuthenticityResult(
            is_authentic=False,
            confidence=MISSING_INFO_CONFIDENCE,
            issues=[ISSUE_MISSING_INFO],
            checks=checks,
        )

    if not found_in_database:
        return AuthenticityResult(
            is_authentic=False,
            confidence=NOT_IN_DATABASE_CONFIDENCE,
            issues=[ISSUE_NOT_IN_DATABASE],
            checks=checks,
        )

    confidence = checks.passed / checks.total
    return AuthenticityResult(
        is_authentic=confidence > AUTHENTIC_CONFIDENCE,
        confidence=confidence,
        issues=[],
        checks=checks,
    )


def authenticity_label(result: AuthenticityResult) -> str:
    if result.confidence >= CONFIDENCE_HIGH:
        return "Highly Likely Authentic"
    if result.confidence >= CONFIDENCE_MEDIUM:
        return "Possibly Authentic"
    return "Likely Fake"
