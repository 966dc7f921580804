import pytest
from rsldoc import validator
from rsldoc.models import Content, License, Metadata, Payment, Permissions, RslData
from rsldoc.validator import Severity, ValidationLevel
from fixtures import *


def single(license: License, metadata: Metadata = None, url: str = 'https://ex.com/a') -> list[Content]:
    return [Content(url, RslData(licenses = [license], metadata = metadata))]


class TestBasic:

    @pytest.mark.parametrize('level', list(ValidationLevel))
    def test_empty(self, level):
        report = validator.validate([], level)
        assert report.is_valid is False
        assert report.errors == ['No content provided for RSL generation']
        assert len(report.results) == 1

    def test_minimal_valid(self, minimal_content: Content):
        report = validator.validate([minimal_content])
        assert report.is_valid
        assert report.results == []

    def test_missing_url(self, free_license: License):
        report = validator.validate(single(free_license, url = ''))
        assert report.errors == ['Content at index 0 is missing URL']

    def test_no_licenses(self):
        report = validator.validate([Content('https://ex.com/a')])
        assert report.errors == ['Content "https://ex.com/a" has no licenses configured']

    def test_missing_id(self):
        report = validator.validate(single(License('')))
        [result] = report.results
        assert result.type is Severity.ERROR
        assert result.message == 'License at index 0 for "https://ex.com/a" is missing ID'
        assert result.context == 'https://ex.com/a'

    def test_basic_ignores_semantics(self):
        license = License('L1', permits = Permissions(usage = ['ai-train']),
            prohibits = Permissions(usage = ['ai-train']))
        assert validator.validate(single(license, url = 'not a url')).is_valid


class TestComprehensive:

    def comprehensive(self, contents: list[Content]) -> validator.ValidationReport:
        return validator.validate(contents, 'comprehensive')

    def test_superset(self, contents: list[Content]):
        contents.append(Content('', RslData(licenses = [License('')])))
        basic = validator.validate(contents, ValidationLevel.BASIC)
        comprehensive = validator.validate(contents, ValidationLevel.COMPREHENSIVE)
        assert set(basic.results) <= set(comprehensive.results)
        assert comprehensive.results[:len(basic.results)] == basic.results

    def test_full_content_valid(self, full_content: Content):
        report = self.comprehensive([full_content])
        assert report.results == []

    def test_conflict(self):
        license = License('L1', permits = Permissions(usage = ['ai-train', 'search']),
            prohibits = Permissions(usage = ['ai-train']))
        report = self.comprehensive(single(license))
        assert len(report.errors) == 1
        assert 'ai-train' in report.errors[0]
        assert 'search' not in report.errors[0]
        assert report.results[0].context == 'https://ex.com/a - License 1'

    def test_amount_without_currency(self):
        license = License('L1', permits = Permissions(usage = ['all']),
            payment = Payment(type = 'purchase', amount = '10'))
        report = self.comprehensive(single(license))
        assert report.errors == ['Payment amount specified but currency is missing']

    def test_amount_with_currency(self):
        license = License('L1', permits = Permissions(usage = ['all']),
            payment = Payment(type = 'purchase', amount = '10', currency = 'USD'))
        assert self.comprehensive(single(license)).results == []

    def test_payment_without_details(self):
        license = License('L1', permits = Permissions(usage = ['all']),
            payment = Payment(type = 'subscription'))
        report = self.comprehensive(single(license))
        assert report.is_valid
        assert report.warnings == [
            'Payment type "subscription" specified but no payment details provided']

    def test_free_payment_needs_no_details(self, free_license: License):
        assert self.comprehensive(single(free_license)).results == []

    def test_no_rights(self):
        report = self.comprehensive(single(License('L1', permits = Permissions())))
        assert report.is_valid
        assert report.warnings == ['License has no permits or prohibits defined']

    def test_malformed_urls(self, free_license: License):
        free_license.payment = Payment(type = 'free',
            standard_urls = ['https://ok.com', 'not a url'], custom_url = 'http://')
        metadata = Metadata(schema_url = 'schema', contact_url = 'https://ok.com',
            terms_url = '://terms')
        report = self.comprehensive(single(free_license, metadata, url = 'ex.com/a'))

        assert report.is_valid
        assert report.warnings == [
            'URL "ex.com/a" may not be properly formatted',
            'Standard payment URL 2 may not be properly formatted: not a url',
            'Custom payment URL may not be properly formatted: http://',
            'Schema URL may not be properly formatted: schema',
            'Terms URL may not be properly formatted: ://terms'
        ]

    @pytest.mark.parametrize('email, valid', [
        ('legal@example.com', True),
        ('legal@example', False),
        ('legal example@ex.com', False),
        ('@ex.com', False)
    ])
    def test_email(self, free_license: License, email: str, valid: bool):
        report = self.comprehensive(single(free_license, Metadata(contact_email = email)))
        assert report.is_valid
        assert bool(report.warnings) is not valid


class TestReport:

    def test_to_dict(self):
        report = validator.ValidationReport([
            validator.ValidationResult(Severity.ERROR, 'bad', 'ctx'),
            validator.ValidationResult(Severity.WARNING, 'meh'),
            validator.ValidationResult(Severity.INFO, 'fyi')
        ])
        assert report.to_dict() == {
            'isValid': False,
            'errors': ['bad'],
            'warnings': ['meh'],
            'results': [
                {'type': 'error', 'message': 'bad', 'context': 'ctx'},
                {'type': 'warning', 'message': 'meh'},
                {'type': 'info', 'message': 'fyi'}
            ]
        }

    def test_unknown_level(self, minimal_content: Content):
        with pytest.raises(ValueError):
            validator.validate([minimal_content], 'strict')

    def test_plain_string_severity(self):
        report = validator.ValidationReport([
            validator.ValidationResult('error', 'bad'),
            validator.ValidationResult('warning', 'meh')
        ])
        assert report.errors == ['bad']
        assert report.warnings == ['meh']
        assert report.is_valid is False
        assert report.results[0].type is Severity.ERROR

    def test_unknown_severity(self):
        with pytest.raises(ValueError):
            validator.ValidationResult('fatal', 'bad')

    def test_numeric_tokens(self):
        license = License('L1', permits = Permissions(usage = [1, 'search']),
            prohibits = Permissions(usage = [1]))
        report = validator.validate(single(license), 'comprehensive')
        assert report.errors == ['License has conflicting permits and prohibits for usage: 1']
