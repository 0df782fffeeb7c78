"""
Read-only resource link listings.
"""

from .resource_links import (
    RESOURCE_KINDS,
    ResourceKind,
    ResourceLinkListing,
    ResourceType,
    all_listings,
    education_labels,
    listing_for,
)

__all__ = [
    'RESOURCE_KINDS',
    'ResourceKind',
    'ResourceLinkListing',
    'ResourceType',
    'all_listings',
    'education_labels',
    'listing_for',
]
