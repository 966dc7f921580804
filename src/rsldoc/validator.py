"""
Checks contents for structural and semantic problems before an RSL document is built.

Two levels of validation are available:

* ``basic`` checks that each content has a URL and at least one license, and each license an ID.
* ``comprehensive`` runs the basic checks, then checks URLs, emails,
  conflicting permits and prohibits, and payment terms.

Validation is advisory. Building a document does not require it to pass.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Callable, Iterable, Mapping, Optional, Union

from rsldoc.models import Content, License, Metadata, Payment, PaymentType, value_of
from rsldoc.utils import valid_email, valid_url

logger = logging.getLogger(__name__)

###########
# Results #
###########

class Severity(str, Enum):
    ERROR = 'error'
    WARNING = 'warning'
    INFO = 'info'

class ValidationLevel(str, Enum):
    BASIC = 'basic'
    COMPREHENSIVE = 'comprehensive'


@dataclass(frozen = True)
class ValidationResult:
    """
    A single finding.
    """
    type: Severity
    message: str
    context: Optional[str] = None
    """The content / license the finding refers to."""

    def __post_init__(self) -> None:
        object.__setattr__(self, 'type', Severity(self.type))

    def to_dict(self) -> dict:
        result = {'type': self.type.value, 'message': self.message}
        if self.context is not None:
            result['context'] = self.context
        return result


@dataclass
class ValidationReport:
    """
    The findings of a validation run.
    """
    results: list[ValidationResult] = field(default_factory = list)

    @property
    def errors(self) -> list[str]:
        return [result.message for result in self.results if result.type == Severity.ERROR]

    @property
    def warnings(self) -> list[str]:
        return [result.message for result in self.results if result.type == Severity.WARNING]

    @property
    def is_valid(self) -> bool:
        """True if there are no error findings. Warnings do not affect validity."""
        return not self.errors

    def to_dict(self) -> dict:
        return {
            'isValid': self.is_valid,
            'errors': self.errors,
            'warnings': self.warnings,
            'results': [result.to_dict() for result in self.results]
        }

#########
# Basic #
#########

def validate_basic(contents: list[Content]) -> list[ValidationResult]:
    """
    Checks that each content has a URL and licenses, and that each license has an ID.
    An empty list of contents yields a single error and no further checks.

    :param contents: The contents to check.
    :type contents: list[Content]
    :return: The findings, in order.
    :rtype: list[ValidationResult]
    """
    if not contents:
        return [ValidationResult(Severity.ERROR, 'No content provided for RSL generation')]

    results = []
    for index, content in enumerate(contents):
        if not content.url:
            results.append(ValidationResult(
                Severity.ERROR, f'Content at index {index} is missing URL'))

        if not content.rsl.licenses:
            results.append(ValidationResult(
                Severity.ERROR, f'Content "{content.url}" has no licenses configured'))

        for license_index, license in enumerate(content.rsl.licenses):
            if not license.id:
                results.append(ValidationResult(
                    Severity.ERROR,
                    f'License at index {license_index} for "{content.url}" is missing ID',
                    content.url
                ))
    return results

#################
# Comprehensive #
#################

def _check_license(license: License, context: str) -> Iterable[ValidationResult]:
    permitted = license.permits.usage if license.permits else []
    prohibited = license.prohibits.usage if license.prohibits else []
    conflicts = [usage for usage in permitted if usage in prohibited]
    if conflicts:
        yield ValidationResult(
            Severity.ERROR,
            'License has conflicting permits and prohibits for usage: ' + ', '.join(map(str, conflicts)),
            context
        )

    if license.payment is not None:
        yield from _check_payment(license.payment, context)

    if not license.declares_rights:
        yield ValidationResult(
            Severity.WARNING, 'License has no permits or prohibits defined', context)

def _check_payment(payment: Payment, context: str) -> Iterable[ValidationResult]:
    payment_type = value_of(payment.type)
    if payment_type != PaymentType.FREE.value:
        if not (payment.amount or payment.custom_url or payment.standard_urls):
            yield ValidationResult(
                Severity.WARNING,
                f'Payment type "{payment_type}" specified but no payment details provided',
                context
            )
        if payment.amount and not payment.currency:
            yield ValidationResult(
                Severity.ERROR, 'Payment amount specified but currency is missing', context)

    for index, url in enumerate(payment.standard_urls):
        if not valid_url(url):
            yield ValidationResult(
                Severity.WARNING,
                f'Standard payment URL {index + 1} may not be properly formatted: {url}',
                context
            )

    if payment.custom_url and not valid_url(payment.custom_url):
        yield ValidationResult(
            Severity.WARNING,
            f'Custom payment URL may not be properly formatted: {payment.custom_url}',
            context
        )

METADATA_URLS = (
    ('schema_url', 'Schema URL'),
    ('contact_url', 'Contact URL'),
    ('terms_url', 'Terms URL')
)
"""Metadata attributes holding URLs, with their display names."""

def _check_metadata(metadata: Metadata, context: str) -> Iterable[ValidationResult]:
    for attr, label in METADATA_URLS:
        url = getattr(metadata, attr)
        if url and not valid_url(url):
            yield ValidationResult(
                Severity.WARNING, f'{label} may not be properly formatted: {url}', context)

    if metadata.contact_email and not valid_email(metadata.contact_email):
        yield ValidationResult(
            Severity.WARNING,
            f'Contact email may not be properly formatted: {metadata.contact_email}',
            context
        )

def _check_content(content: Content) -> Iterable[ValidationResult]:
    if content.url and not valid_url(content.url):
        yield ValidationResult(
            Severity.WARNING,
            f'URL "{content.url}" may not be properly formatted',
            content.url
        )

    for index, license in enumerate(content.rsl.licenses):
        yield from _check_license(license, f'{content.url} - License {index + 1}')

    if content.rsl.metadata is not None:
        yield from _check_metadata(content.rsl.metadata, f'{content.url} - Metadata')

def validate_comprehensive(contents: list[Content]) -> list[ValidationResult]:
    """
    Runs the basic checks, followed by the semantic checks for each content.

    :param contents: The contents to check.
    :type contents: list[Content]
    :return: The findings, basic findings first.
    :rtype: list[ValidationResult]
    """
    results = validate_basic(contents)
    for content in contents:
        results.extend(_check_content(content))
    return results

############
# Dispatch #
############

VALIDATORS: Mapping[ValidationLevel, Callable[[list[Content]], list[ValidationResult]]] = (
    MappingProxyType({
        ValidationLevel.BASIC: validate_basic,
        ValidationLevel.COMPREHENSIVE: validate_comprehensive
    })
)
"""Maps each validation level to the function performing it."""


def validate(
        contents: Iterable[Content],
        level: Union[ValidationLevel, str] = ValidationLevel.BASIC
    ) -> ValidationReport:
    """
    Validates *contents* at the given level.

    :param contents: The contents to validate.
    :type contents: Iterable[Content]
    :param level: 'basic' or 'comprehensive', defaults to basic
    :type level: Union[ValidationLevel, str], optional
    :raises ValueError: If *level* is not a known validation level.
    :return: A report of the findings.
    :rtype: ValidationReport
    """
    report = ValidationReport(VALIDATORS[ValidationLevel(level)](list(contents)))
    logger.debug(
        f'{ValidationLevel(level).value} validation found '
        f'{len(report.errors)} errors and {len(report.warnings)} warnings')
    return report
