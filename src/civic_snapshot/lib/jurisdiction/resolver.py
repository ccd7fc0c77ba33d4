"""Map free-form state names and abbreviations to Open States jurisdictions."""

from civic_snapshot.lib.upstream.errors import InvalidStateError

JURISDICTION_TEMPLATE = "ocd-jurisdiction/country:us/state:{code}/government"

# Two-letter code -> display name for the 50 states + DC
STATE_NAMES: dict[str, str] = {
    "al": "Alabama",
    "ak": "Alaska",
    "az": "Arizona",
    "ar": "Arkansas",
    "ca": "California",
    "co": "Colorado",
    "ct": "Connecticut",
    "de": "Delaware",
    "dc": "District of Columbia",
    "fl": "Florida",
    "ga": "Georgia",
    "hi": "Hawaii",
    "id": "Idaho",
    "il": "Illinois",
    "in": "Indiana",
    "ia": "Iowa",
    "ks": "Kansas",
    "ky": "Kentucky",
    "la": "Louisiana",
    "me": "Maine",
    "md": "Maryland",
    "ma": "Massachusetts",
    "mi": "Michigan",
    "mn": "Minnesota",
    "ms": "Mississippi",
    "mo": "Missouri",
    "mt": "Montana",
    "ne": "Nebraska",
    "nv": "Nevada",
    "nh": "New Hampshire",
    "nj": "New Jersey",
    "nm": "New Mexico",
    "ny": "New York",
    "nc": "North Carolina",
    "nd": "North Dakota",
    "oh": "Ohio",
    "ok": "Oklahoma",
    "or": "Oregon",
    "pa": "Pennsylvania",
    "ri": "Rhode Island",
    "sc": "South Carolina",
    "sd": "South Dakota",
    "tn": "Tennessee",
    "tx": "Texas",
    "ut": "Utah",
    "vt": "Vermont",
    "va": "Virginia",
    "wa": "Washington",
    "wv": "West Virginia",
    "wi": "Wisconsin",
    "wy": "Wyoming",
}

# Lookup keyed by both abbreviation and full lowercase name
_STATE_LOOKUP: dict[str, str] = {
    **{code: code for code in STATE_NAMES},
    **{name.lower(): code for code, name in STATE_NAMES.items()},
}


def resolve_state_code(state: str) -> str:
    """Resolve a state name or abbreviation to its lowercase two-letter code.

    Args:
        state: Free-form state input, e.g. "MA", " massachusetts ".

    Returns:
        Two-letter lowercase code, e.g. "ma".

    Raises:
        InvalidStateError: If the input is not a recognized state or DC.
    """
    code = _STATE_LOOKUP.get(state.strip().lower())
    if code is None:
        raise InvalidStateError(state)
    return code


def resolve_jurisdiction(state: str) -> str:
    """Resolve a state name or abbreviation to an Open States jurisdiction ID.

    Args:
        state: Free-form state input.

    Returns:
        Jurisdiction string, e.g. "ocd-jurisdiction/country:us/state:ma/government".

    Raises:
        InvalidStateError: If the input is not a recognized state or DC.
    """
    return JURISDICTION_TEMPLATE.format(code=resolve_state_code(state))


def state_name(state: str) -> str:
    """Return the display name for a state name or abbreviation."""
    return STATE_NAMES[resolve_state_code(state)]
