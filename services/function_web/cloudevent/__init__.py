"""
Cloud events package.

Header conventions, immutable attribute bundles and the default attributes
provider.
"""

from .attributes import CloudEventAttributes
from .provider import DefaultCloudEventAttributesProvider

__all__ = [
    "CloudEventAttributes",
    "DefaultCloudEventAttributesProvider",
]
