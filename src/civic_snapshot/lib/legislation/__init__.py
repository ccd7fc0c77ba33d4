"""Legislation library — bill records, categorization and impact scoring.

Public API:
    - Bill, BillPage, Pagination: Upstream bill records
    - BillCategory, Impact, ScoredBill: Derived classification
    - categorize: Bill -> BillCategory
    - score_impact / score_bill / score_bills / sort_by_impact: Impact scoring
    - OpenStatesBillsProvider: Open States ``/bills`` provider
"""

from civic_snapshot.lib.legislation.base import (
    IMPACT_RANK,
    Bill,
    BillCategory,
    BillPage,
    Impact,
    Pagination,
    ScoredBill,
    ScoredBillPage,
    parse_api_datetime,
)
from civic_snapshot.lib.legislation.categorizer import CATEGORY_RULES, categorize
from civic_snapshot.lib.legislation.impact import score_bill, score_bills, score_impact, sort_by_impact
from civic_snapshot.lib.legislation.open_states import OpenStatesBillsProvider

__all__ = [
    "CATEGORY_RULES",
    "IMPACT_RANK",
    "Bill",
    "BillCategory",
    "BillPage",
    "Impact",
    "OpenStatesBillsProvider",
    "Pagination",
    "ScoredBill",
    "ScoredBillPage",
    "categorize",
    "parse_api_datetime",
    "score_bill",
    "score_bills",
    "score_impact",
    "sort_by_impact",
]
