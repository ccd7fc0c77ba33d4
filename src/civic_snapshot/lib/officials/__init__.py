"""Officials library — legislator records, lookup and ranking.

Public API:
    - Legislator, CurrentRole, Office, PeoplePage: Normalized person records
    - OpenStatesPeopleProvider: Open States ``/people`` and ``/people.geo`` provider
    - rank_legislators / legislator_sort_key: Senators first, then by name
"""

from civic_snapshot.lib.officials.base import CurrentRole, Legislator, Office, PeoplePage
from civic_snapshot.lib.officials.open_states import OpenStatesPeopleProvider
from civic_snapshot.lib.officials.ranking import is_senator, legislator_sort_key, rank_legislators

__all__ = [
    "CurrentRole",
    "Legislator",
    "Office",
    "OpenStatesPeopleProvider",
    "PeoplePage",
    "is_senator",
    "legislator_sort_key",
    "rank_legislators",
]
