"""Normalization of weather station names for display."""
from typing import Optional


def capitalize(text: str) -> str:
    """
    Capitalize A String Like This.

    The first letter of every whitespace separated run is upper cased and
    the rest of its letters lower cased. Anything that isn't a letter is
    left alone.
    """
    chars = []
    capitalize_next = True
    for char in text:
        if char.isalpha():
            chars.append(char.upper() if capitalize_next else char.lower())
            capitalize_next = False
        elif char.isspace():
            chars.append(char)
            capitalize_next = True
        else:
            chars.append(char)
    return "".join(chars)


def _is_single_case(text: str) -> bool:
    has_upper = any(char.isupper() for char in text)
    has_lower = any(char.islower() for char in text)
    return has_upper != has_lower


def _prettify_once(pretty: str) -> str:
    if _is_single_case(pretty):
        pretty = capitalize(pretty)

    # "ANGELHOLM (SWE-A" -> "ANGELHOLM"
    left_paren = pretty.find("(")
    if left_paren > 0 and ")" not in pretty:
        pretty = pretty[:left_paren].rstrip()

    # "Coeur d'Alene, Coeur d'Alene Air Terminal" -> "Coeur d'Alene Air Terminal"
    left, separator, right = pretty.partition(", ")
    if separator and right.startswith(left):
        pretty = right

    return pretty


def prettify_station_name(ugly: Optional[str]) -> Optional[str]:
    """
    Prettify a station name from the weather service.

    Args:
        ugly: Raw station name, may be None

    Returns:
        Display name, or None if there is no usable name
    """
    if ugly is None:
        return None

    pretty = ugly.strip()
    if not pretty:
        return None

    # Cutting and collapsing can expose a single case name or another
    # repeated prefix, so keep going until nothing changes
    while True:
        previous = pretty
        pretty = _prettify_once(pretty)
        if pretty == previous:
            return pretty
