"""Reduction tips per activity category."""

from __future__ import annotations

from ecotrack.core.models import Category, Suggestion

SUGGESTIONS: dict[Category, tuple[Suggestion, ...]] = {
    Category.TRANSPORT: (
        Suggestion("Use public transportation", -0.5, "medium"),
        Suggestion("Carpool with colleagues", -0.3, "easy"),
        Suggestion("Walk or bike for short trips", -0.8, "easy"),
        Suggestion("Consider an electric vehicle", -1.2, "hard"),
    ),
    Category.ELECTRICITY: (
        Suggestion("Switch to LED bulbs", -0.2, "easy"),
        Suggestion("Use renewable energy", -0.4, "medium"),
        Suggestion("Unplug unused electronics", -0.1, "easy"),
        Suggestion("Install solar panels", -0.8, "hard"),
    ),
    Category.FOOD: (
        Suggestion("Reduce meat consumption", -0.6, "medium"),
        Suggestion("Buy local produce", -0.3, "easy"),
        Suggestion("Avoid food waste", -0.4, "medium"),
        Suggestion("Grow your own vegetables", -0.2, "hard"),
    ),
    Category.WASTE: (
        Suggestion("Recycle more", -0.3, "easy"),
        Suggestion("Compost organic waste", -0.2, "medium"),
        Suggestion("Use reusable containers", -0.1, "easy"),
        Suggestion("Buy in bulk to reduce packaging", -0.2, "medium"),
    ),
}


def get_suggestions(
    category: str | Category | None,
    current_footprint: float = 0.0,
) -> list[Suggestion]:
    """Fixed, ordered tips for a category; unknown categories get none.

    current_footprint is accepted for future personalization and does not
    affect the result.
    """
    cat = Category.parse(category)
    if cat is None:
        return []
    return list(SUGGESTIONS.get(cat, ()))
