"""Keyword-based bill categorization."""

from civic_snapshot.lib.legislation.base import Bill, BillCategory

# Ordered rules, first match wins
CATEGORY_RULES: tuple[tuple[BillCategory, tuple[str, ...]], ...] = (
    (BillCategory.HOUSING, ("housing",)),
    (BillCategory.TRANSIT, ("transportation", "transit")),
    (BillCategory.SAFETY, ("public safety", "safety", "police")),
    (BillCategory.CONSTRUCTION, ("infrastructure", "construction")),
    (BillCategory.CAMPUS, ("education", "school")),
)


def categorize(bill: Bill) -> BillCategory:
    """Assign a display category from the bill's subjects and title.

    Each rule matches when any keyword is a case-insensitive substring of a
    subject or of the title. Bills matching no rule are ``misc``.
    """
    haystacks = [s.lower() for s in bill.subject]
    haystacks.append(bill.title.lower())

    for category, keywords in CATEGORY_RULES:
        if any(keyword in text for keyword in keywords for text in haystacks):
            return category
    return BillCategory.MISC
