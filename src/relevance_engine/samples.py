"""Bundled example text pairs covering high, medium and low relevance."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True, slots=True)
class SampleCase:
    id: str
    name: str
    primary: str
    secondary: str


SAMPLE_CASES: Tuple[SampleCase, ...] = (
    SampleCase(
        id="high-relevance",
        name="High Relevance Example",
        primary=(
            "We completed the financial audit for Q2 2025. The audit found that our AWS cloud costs "
            "increased by 34% due to the new recommendation engine. Microsoft has approached us for a "
            "potential partnership on their Azure platform which could reduce our costs. Sarah Johnson "
            "from the product team mentioned we should discuss this at the next board meeting."
        ),
        secondary=(
            "I'm preparing the Q2 financial review presentation for the board meeting next week. Need "
            "to include cost breakdown for all cloud services including AWS. Sarah Johnson said she "
            "would provide input on the product roadmap section. Also need to research alternative "
            "cloud providers for cost comparison."
        ),
    ),
    SampleCase(
        id="medium-relevance",
        name="Medium Relevance Example",
        primary=(
            "The development team has identified a performance issue with the database queries in our "
            "recommendation system. The slow queries appear during peak traffic hours (2-4pm) and are "
            "affecting page load times. We're considering implementing a caching layer using Redis to "
            "mitigate the issue."
        ),
        secondary=(
            "I'm working on the customer satisfaction report for Q2. Our NPS scores dropped by 3 points "
            "in the afternoon hours, with customers mentioning slow loading times as a primary "
            "complaint. We should discuss this with the technical team to understand if there are any "
            "known performance issues."
        ),
    ),
    SampleCase(
        id="low-relevance",
        name="Low Relevance Example",
        primary=(
            "The marketing team just finalized the new campaign for our consumer product line. The "
            "focus will be on sustainability and eco-friendly packaging. We've hired a new design "
            "agency to help with the creative assets. The campaign launches next month on social media "
            "platforms."
        ),
        secondary=(
            "Our engineering team is working on resolving the critical performance issues in the "
            "backend database. We've identified that the query optimization layer needs refactoring. "
            "John suggested we might need to upgrade our PostgreSQL instance to handle the increased "
            "load from the recommendation engine."
        ),
    ),
)


def get_sample(sample_id: str) -> SampleCase:
    for case in SAMPLE_CASES:
        if case.id == sample_id:
            return case
    raise KeyError(sample_id)
