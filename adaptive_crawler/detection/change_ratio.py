import difflib
from typing import Optional

from adaptive_crawler.detection.fingerprint import semantic_lines


def calculate_change_ratio(static_soup, rendered_soup) -> Optional[float]:
    """
    Returns how much the rendered document differs from the static one (0.0 - 1.0),
    or None when either document has no body content to compare.

    Deterministic for identical inputs: both sides are reduced to semantic lines
    (whitespace, attribute order, scripts and comments ignored) and compared with difflib.
    """
    if static_soup is None or rendered_soup is None:
        return None

    static_lines = semantic_lines(static_soup)
    rendered_lines = semantic_lines(rendered_soup)

    if not static_lines or not rendered_lines:
        return None

    sm = difflib.SequenceMatcher(None, static_lines, rendered_lines, autojunk=False)
    return round(1.0 - sm.ratio(), 4)
