import re

_SCHEME = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.\-]*:")


def normalize_url(path: str | None, base_url: str) -> str | None:
    """Resolves a scraped link against the source's base URL.

    Absolute URLs (anything with a scheme) are returned unchanged, so applying
    this twice gives the same result as applying it once.

    Args:
        path: The href as found in the page.
        base_url: Scheme and host of the source, e.g. "https://nycc.org".

    Returns:
        The absolute URL, or None if there is no link.

    Example:
        >>> normalize_url("rides/123", "https://nycc.org/")
        'https://nycc.org/rides/123'
    """
    if path is None:
        return None

    path = path.strip()
    if not path:
        return None

    if _SCHEME.match(path):
        return path

    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"
