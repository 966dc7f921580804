from rsldoc import builder, models, parser
from rsldoc.models import Content, LegalTerms, License, Metadata, Payment, Permissions, RslData
from fixtures import *

FULL_DOCUMENT = '''<?xml version="1.0" encoding="UTF-8"?>
<rsl xmlns="https://rslstandard.org/rsl">
  <content url="https://example.com/articles/first-post" server="https://license.example.com" encrypted="true" lastmod="2025-09-15">
    <license>
      <permits type="usage">ai-train,search</permits>
      <permits type="geo">US</permits>
      <prohibits type="user">commercial</prohibits>
      <payment type="purchase">
        <standard>https://example.com/pricing</standard>
        <custom>https://example.com/custom</custom>
        <amount currency="USD">10</amount>
      </payment>
      <legal type="warranty">ownership,authority</legal>
    </license>
    <schema>https://schema.org/Article</schema>
    <copyright type="organization" contactEmail="legal@example.com" contactUrl="https://example.com/contact">Example Inc</copyright>
    <terms>https://example.com/terms</terms>
  </content>
</rsl>'''


class TestBuildDocument:

    def test_empty(self):
        assert builder.build_document([]) == (
            '<?xml version="1.0" encoding="UTF-8"?>\n'
            '<rsl xmlns="https://rslstandard.org/rsl">\n'
            '  <!-- No content selected for licensing -->\n'
            '</rsl>'
        )
        assert builder.build_document([]) == builder.EMPTY_DOCUMENT

    def test_full(self, full_content: Content):
        assert builder.build_document([full_content]) == FULL_DOCUMENT

    def test_minimal(self, minimal_content: Content):
        xml = builder.build_document([minimal_content])
        assert '<content url="https://ex.com/a">' in xml
        assert '<permits type="usage">search</permits>' in xml
        assert '<payment type="free"/>' in xml

    def test_content_order(self, contents: list[Content]):
        xml = builder.build_document(contents)
        assert xml.index(contents[0].url) < xml.index(contents[1].url)

    def test_encrypted_false(self, minimal_content: Content):
        minimal_content.rsl.encrypted = False
        xml = builder.build_document([minimal_content])
        assert 'encrypted' not in xml

    def test_no_licenses(self):
        xml = builder.build_document([Content('https://ex.com/a')])
        assert '  <content url="https://ex.com/a"></content>' in xml.splitlines()
        assert '<license' not in xml

    def test_escaping(self):
        content = Content('https://ex.com/?a=1&b="2"', RslData(licenses = [
            License('L1', permits = Permissions(usage = ['<all>']))
        ]))
        xml = builder.build_document([content])
        assert '<content url="https://ex.com/?a=1&amp;b=&quot;2&quot;">' in xml
        assert '<permits type="usage">&lt;all&gt;</permits>' in xml


class TestLicenseTag:

    def test_empty_permissions(self):
        license = License('L1', permits = Permissions(), prohibits = Permissions())
        assert builder.render(builder.license_tag(license)) == '<license></license>'

    def test_amount_needs_currency(self):
        license = License('L1', payment = Payment(type = 'purchase', amount = '10'))
        assert builder.render(builder.license_tag(license)) == (
            '<license>\n'
            '  <payment type="purchase"/>\n'
            '</license>'
        )

    def test_currency_without_amount(self):
        payment = Payment(type = 'free', currency = 'USD')
        assert builder.render(builder.payment_tag(payment)) == '<payment type="free"/>'

    def test_amount(self):
        payment = Payment(type = 'purchase', amount = '10', currency = 'USD')
        assert builder.render(builder.payment_tag(payment)) == (
            '<payment type="purchase">\n'
            '  <amount currency="USD">10</amount>\n'
            '</payment>'
        )

    def test_untyped_payment(self):
        assert builder.payment_tag(Payment(type = '')) is None

    def test_legal_without_terms(self):
        license = License('L1', legal = [LegalTerms('disclaimer', [])])
        assert builder.render(builder.license_tag(license)) == (
            '<license>\n'
            '  <legal type="disclaimer"/>\n'
            '</license>'
        )

    def test_prefix(self, free_license: License):
        assert builder.render(builder.license_tag(free_license, 'rsl')) == (
            '<rsl:license>\n'
            '  <rsl:permits type="usage">search</rsl:permits>\n'
            '  <rsl:payment type="free"/>\n'
            '</rsl:license>'
        )


class TestMetadataTags:

    def test_none(self):
        assert builder.metadata_tags(None) == []
        assert builder.metadata_tags(Metadata()) == []

    def test_copyright_self_closing(self):
        tags = builder.metadata_tags(Metadata(contact_email = 'a@b.com'))
        assert [builder.render(tag) for tag in tags] == ['<copyright contactEmail="a@b.com"/>']

    def test_copyright_holder(self):
        tags = builder.metadata_tags(Metadata(copyright_holder = 'Jane Doe'))
        assert [builder.render(tag) for tag in tags] == ['<copyright>Jane Doe</copyright>']

    def test_order(self, full_metadata: Metadata):
        names = [tag.name for tag in builder.metadata_tags(full_metadata)]
        assert names == ['schema', 'copyright', 'terms']


class TestValueConversion:

    def test_numbers(self):
        content = Content('https://ex.com/a', RslData(last_modified = 20250101, licenses = [
            License('L1', permits = Permissions(geo = [36]),
                payment = Payment(type = 'purchase', amount = 10, currency = 'USD'))
        ]))
        xml = builder.build_document([content])
        assert '<content url="https://ex.com/a" lastmod="20250101">' in xml
        assert '<permits type="geo">36</permits>' in xml
        assert '<amount currency="USD">10</amount>' in xml

    def test_numbers_from_json(self, fallback_url: str):
        contents = models.contents_from_list([{
            'url': 'https://ex.com/a',
            'lastModified': 20250101,
            'licenses': [{'id': 'L1', 'payment': {'type': 'purchase', 'amount': 10, 'currency': 'USD'}}]
        }])
        [content] = parser.parse_document(builder.build_document(contents), fallback_url)
        assert content.rsl.last_modified == '20250101'
        assert (content.licenses[0].payment.amount, content.licenses[0].payment.currency) == ('10', 'USD')

    def test_control_characters(self, fallback_url: str):
        content = Content('https://ex.com/a\x0b', RslData(licenses = [
            License('L1', permits = Permissions(usage = ['a\x01i-train', 'search\x1f']))
        ], metadata = Metadata(copyright_holder = 'Example\x00 Inc')))
        xml = builder.build_document([content])
        assert '<content url="https://ex.com/a">' in xml
        assert '<permits type="usage">ai-train,search</permits>' in xml

        [parsed] = parser.parse_document(xml, fallback_url)
        assert parsed.url == 'https://ex.com/a'
        assert parsed.licenses[0].permits.usage == ['ai-train', 'search']
        assert parsed.rsl.metadata.copyright_holder == 'Example Inc'

    def test_whitespace_kept(self):
        tag = builder.new_tag('legal', {'type': 'warranty'}, 'ownership,\tauthority')
        assert builder.render(tag) == '<legal type="warranty">ownership,\tauthority</legal>'
