from pytest import fixture
from rsldoc.models import (Content, LegalTerms, License, Metadata, Payment,
                           Permissions, RslData)

@fixture
def content_url() -> str:
    return 'https://example.com/articles/first-post'

@fixture
def fallback_url() -> str:
    return 'https://example.com'

@fixture
def free_license() -> License:
    return License(
        id = 'L1',
        permits = Permissions(usage = ['search']),
        payment = Payment(type = 'free')
    )

@fixture
def full_license() -> License:
    return License(
        id = 'L2',
        name = 'Paid training',
        permits = Permissions(usage = ['ai-train', 'search'], geo = ['US']),
        prohibits = Permissions(user = ['commercial']),
        payment = Payment(
            type = 'purchase',
            standard_urls = ['https://example.com/pricing'],
            custom_url = 'https://example.com/custom',
            amount = '10',
            currency = 'USD'
        ),
        legal = [LegalTerms('warranty', ['ownership', 'authority'])]
    )

@fixture
def full_metadata() -> Metadata:
    return Metadata(
        schema_url = 'https://schema.org/Article',
        copyright_holder = 'Example Inc',
        copyright_type = 'organization',
        contact_email = 'legal@example.com',
        contact_url = 'https://example.com/contact',
        terms_url = 'https://example.com/terms'
    )

@fixture
def minimal_content(free_license: License) -> Content:
    return Content('https://ex.com/a', RslData(licenses = [free_license]))

@fixture
def full_content(content_url: str, full_license: License, full_metadata: Metadata) -> Content:
    return Content(content_url, RslData(
        license_server = 'https://license.example.com',
        encrypted = True,
        last_modified = '2025-09-15',
        licenses = [full_license],
        metadata = full_metadata
    ))

@fixture
def contents(minimal_content: Content, full_content: Content) -> list[Content]:
    return [full_content, minimal_content]
