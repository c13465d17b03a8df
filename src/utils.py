"""Utility functions for the auto-ingress controller."""

from collections.abc import Iterable, Mapping

from constants import PUBLIC_LABEL, PUBLIC_VALUE


def is_public(labels: Mapping[str, str] | None) -> bool:
    """Check if a label set carries the public marker.

    Only the exact value "true" counts. "false", "", "True" and a missing
    label are all treated as not public.
    """
    if not labels:
        return False
    return labels.get(PUBLIC_LABEL) == PUBLIC_VALUE


def normalize_domain(domain: str) -> str:
    """Strip whitespace, a wildcard prefix and surrounding dots from a domain.

    Example: '*.example.com.' -> 'example.com'
    """
    domain = domain.strip()
    if domain.startswith("*."):
        domain = domain[2:]
    return domain.strip(".")


def format_keys(keys: Iterable[object]) -> str:
    """Render inventory keys as a sorted, comma separated string for logging."""
    rendered = sorted(str(key) for key in keys)
    return "[" + ", ".join(rendered) + "]"
