"""
Default rendering type detection handler and dataset entry checker.
Used by the CLI; library users usually pass their own.
"""

from adaptive_crawler.detection.models import DetectionInput, RenderingType

CHANGE_RATIO_THRESHOLD = 0.2
MUTATION_THRESHOLD = 50
MUTATION_CHANGE_RATIO_THRESHOLD = 0.05

# Mount points of common SPA frameworks (React, Vue, Angular, Next.js)
SPA_ROOT_SELECTOR = "#root, #app, #__next, app-root"


def is_static_shell(soup) -> bool:
    """
    True when the statically fetched document has nothing to extract yet:
    no body, a body without text, or an empty SPA mount point.
    """
    if soup is None or soup.body is None:
        return True

    if not soup.body.get_text(strip=True):
        return True

    for mount in soup.select(SPA_ROOT_SELECTOR):
        if not mount.get_text(strip=True) and mount.find(True) is None:
            return True

    return False


def detect_rendering_type(detection: DetectionInput) -> RenderingType:
    """
    FLOW: Different extracted records or more links found in the browser -> rendering required.
    Static markup is an empty shell -> rendering required.
    Otherwise decide on how far the rendered DOM moved away from the static one.

    Links are compared by count: both runs resolve relative links against their own
    base URL, which differs whenever the browser followed a redirect.
    """
    browser = detection.browser_run_result
    http_only = detection.http_only_run_result

    if browser.dataset_entries != http_only.dataset_entries:
        return RenderingType.REQUIRES_RENDERING

    if len(set(browser.enqueued_links)) > len(set(http_only.enqueued_links)):
        return RenderingType.REQUIRES_RENDERING

    if is_static_shell(detection.static_soup):
        return RenderingType.REQUIRES_RENDERING

    ratio = detection.change_ratio
    if ratio is None:
        return RenderingType.REQUIRES_RENDERING

    if ratio > CHANGE_RATIO_THRESHOLD:
        return RenderingType.REQUIRES_RENDERING

    if detection.mutation_count > MUTATION_THRESHOLD and ratio > MUTATION_CHANGE_RATIO_THRESHOLD:
        return RenderingType.REQUIRES_RENDERING

    return RenderingType.STATIC_ONLY


def check_dataset_entry(entry) -> bool:
    """A record is trustworthy if it is a non-empty dict with at least one non-blank value."""
    if not isinstance(entry, dict) or not entry:
        return False

    for value in entry.values():
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        if isinstance(value, (list, tuple, dict)) and not value:
            continue
        return True
    return False
