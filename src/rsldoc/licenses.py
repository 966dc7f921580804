"""
Constructs licenses with sensible defaults, optionally specialised by archetype.

Archetypes are registered once, in the ``ARCHETYPES`` table below.
Each one maps to a pure function that overlays its policy onto a default license.
"""
from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any, Callable, Iterable, Mapping, Optional

from rsldoc.models import (Content, LegalTerms, LegalType, License, Payment,
                           PaymentType, Permissions, RslData)
from rsldoc.utils import new_license_id

logger = logging.getLogger(__name__)

DEFAULT_CURRENCY = 'USD'
"""Currency set on every new license."""

COMMERCIAL_PAYMENT_TYPES = (PaymentType.PURCHASE.value, PaymentType.SUBSCRIPTION.value)
"""Payment types a commercial license may use."""


class UnknownLicenseType(ValueError):
    """Raised when a license is requested for an archetype that is not registered."""
    pass


def default_license(
        name: Optional[str] = None,
        existing: int = 0,
        currency: Optional[str] = None
    ) -> License:
    """
    Returns a new license with empty permits / prohibits, free payment and no legal terms.

    :param name: Label for the license, defaults to "License Option N"
    :type name: str, optional
    :param existing: Number of licenses already on the content, used in the default name.
    :type existing: int, optional
    :param currency: Currency for the payment block, defaults to DEFAULT_CURRENCY
    :type currency: str, optional
    :return: A new License.
    :rtype: License
    """
    return License(
        id = new_license_id(),
        name = name or f'License Option {existing + 1}',
        permits = Permissions(),
        prohibits = Permissions(),
        payment = Payment(
            type = PaymentType.FREE.value,
            currency = currency or DEFAULT_CURRENCY
        ),
        legal = []
    )

##############
# Archetypes #
##############

def _free(license: License, usage: Iterable[str] = None, **_) -> None:
    if usage:
        license.permits.usage = list(usage)

def _commercial(license: License,
        payment_type: str = PaymentType.PURCHASE.value,
        amount: Optional[str] = None,
        **_
    ) -> None:
    payment_type = getattr(payment_type, 'value', payment_type)
    if payment_type not in COMMERCIAL_PAYMENT_TYPES:
        raise ValueError(
            f'Commercial licenses must use one of {COMMERCIAL_PAYMENT_TYPES}, not {payment_type!r}')
    license.payment.type = payment_type
    if amount:
        license.payment.amount = str(amount)
    license.permits.usage = ['all']
    license.permits.user = ['commercial']

def _educational(license: License, **_) -> None:
    license.permits.usage = ['ai-train', 'search']
    license.permits.user = ['education']
    license.legal.append(LegalTerms(LegalType.DISCLAIMER.value, ['as-is', 'no-warranty']))

def _research(license: License, non_commercial_only: bool = True, **_) -> None:
    license.permits.usage = ['ai-train', 'ai-input']
    license.permits.user = (
        ['non-commercial'] if non_commercial_only else ['education', 'non-commercial'])


ARCHETYPES: Mapping[str, Callable[..., None]] = MappingProxyType({
    'free': _free,
    'commercial': _commercial,
    'educational': _educational,
    'research': _research
})
"""Maps archetype names to the function applying their policy to a default license."""


def create_license(archetype: str = 'free', **options: Any) -> License:
    """
    Creates a new license, populated by the policy of *archetype*.

    Recognised options are ``name``, ``existing`` and ``currency`` for every archetype,
    ``usage`` for free licenses, ``payment_type`` and ``amount`` for commercial ones,
    and ``non_commercial_only`` for research licenses. Other options are ignored.

    :param archetype: One of the keys of ARCHETYPES, defaults to 'free'
    :type archetype: str, optional
    :raises UnknownLicenseType: If *archetype* is not registered.
    :return: A new License.
    :rtype: License
    """
    try:
        overlay = ARCHETYPES[archetype]
    except (KeyError, TypeError):
        raise UnknownLicenseType(f'Unknown license type: {archetype!r}')

    license = default_license(
        options.pop('name', None),
        options.pop('existing', 0),
        options.pop('currency', None)
    )
    overlay(license, **options)
    return license


def contents_from_links(
        links: Iterable[Mapping[str, Any]],
        archetype: str = 'free',
        **options: Any
    ) -> list[Content]:
    """
    Creates a Content for each link record returned by the crawler,
    each with a single license of the given archetype.
    Records without a URL are skipped.

    :param links: Dictionaries with a *url* key and optionally *lastModified*.
    :type links: Iterable[Mapping[str, Any]]
    :param archetype: The archetype of the license to attach, defaults to 'free'
    :type archetype: str, optional
    :return: A list of Content, in the order of *links*.
    :rtype: list[Content]
    """
    contents = []
    for link in links:
        url = link.get('url')
        if not url:
            logger.warning(f'Skipping crawled link with no URL: {dict(link)}')
            continue
        contents.append(Content(url, RslData(
            last_modified = link.get('lastModified') or None,
            licenses = [create_license(archetype, **options)]
        )))
    logger.debug(f'Created {len(contents)} contents from crawled links')
    return contents
