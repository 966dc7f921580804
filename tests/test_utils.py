import os

import pytest
from rsldoc import utils


@pytest.mark.parametrize('text, tokens', [
    ('ai-train,search', ['ai-train', 'search']),
    (' ai-train , , search ,', ['ai-train', 'search']),
    ('', []),
    (None, [])
])
def test_split_tokens(text, tokens):
    assert utils.split_tokens(text) == tokens


def test_join_tokens():
    assert utils.join_tokens(['ai-train', 'search']) == 'ai-train,search'
    assert utils.join_tokens([]) == ''


@pytest.mark.parametrize('url, valid', [
    ('https://example.com', True),
    ('http://example.com/path?query=1#frag', True),
    ('mailto:legal@example.com', True),
    ('urn:isbn:0451450523', True),
    ('file:///var/www/license.xml', True),
    ('example.com', False),
    ('/relative/path', False),
    ('http://', False),
    ('https://example.com:port', False),
    ('https://exa mple.com', False),
    ('1http://example.com', False),
    ('', False),
    (None, False)
])
def test_valid_url(url, valid):
    assert utils.valid_url(url) is valid


@pytest.mark.parametrize('email, valid', [
    ('legal@example.com', True),
    ('first.last+rsl@sub.example.co', True),
    ('legal@example', False),
    ('legal@@example.com', False),
    ('legal @example.com', False)
])
def test_valid_email(email, valid):
    assert utils.valid_email(email) is valid


def test_new_license_id():
    license_id = utils.new_license_id()
    assert license_id.startswith('license-')
    assert license_id != utils.new_license_id()


def test_write_text(workdir, randstr):
    utils.write_text(randstr, 'out.txt')
    assert os.path.exists('out.txt')
    with open('out.txt') as stream:
        assert stream.read() == randstr


def test_write_stdout(capsys, randstr):
    utils.write_text(randstr)
    assert capsys.readouterr().out == randstr + '\n'


def test_xml_text():
    assert utils.xml_text('a\x00b\x08c\x0bd\x1fe￾') == 'abcde'
    assert utils.xml_text('tab\tnewline\ncr\r') == 'tab\tnewline\ncr\r'
    assert utils.xml_text(10) == '10'


@pytest.mark.parametrize('document, stripped', [
    ('<?xml version="1.0" encoding="UTF-16"?><rsl/>', '<rsl/>'),
    ('﻿<?xml version="1.0"?>\n<rsl/>', '\n<rsl/>'),
    ('<?xml-stylesheet href="a.xsl"?><rsl/>', '<?xml-stylesheet href="a.xsl"?><rsl/>'),
    ('<rsl/><?xml version="1.0"?>', '<rsl/><?xml version="1.0"?>')
])
def test_xml_declaration_pattern(document, stripped):
    assert utils.xml_declaration_pattern.sub('', document, count = 1) == stripped
