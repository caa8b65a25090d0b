"""
canonical_key / parse_price_suffix：纯函数，不需要数据库。
"""
from decimal import Decimal

import pytest

from labintake.matching import canonical_key, parse_price_suffix


class TestCanonicalKey:

    @pytest.mark.parametrize('raw, expected', [
        ('Hemoglobin A1c', 'hemoglobin a1c'),
        ('Lipid Panel (Cholesterol)', 'lipid panel cholesterol'),
        ('lipid-panel-cholesterol', 'lipid panel cholesterol'),
        ('  Annual   Check-Up  Panel ', 'annual check up panel'),
        ('Testosterone Free & Total', 'testosterone free total'),
        ('CBC w/Differential', 'cbc w differential'),
        ('H. pylori', 'h pylori'),
        ('Thyroid Panel - $99', 'thyroid panel'),
        ('thyroid-panel-$99', 'thyroid panel'),
        ('Comprehensive STD Panel [Hep B & C]', 'comprehensive std panel hep b c'),
        ('snake_case_name', 'snake case name'),
    ])
    def test_examples(self, raw, expected):
        assert canonical_key(raw) == expected

    @pytest.mark.parametrize('raw', [
        '',
        '   ',
        '$$$',
        '-$140',
        'Vitamin D 25-Hydroxy',
        'Respiratory pathogens panel (Virus and Bacterial)',
        'ÉCOLE Niño (test)',
        'İstanbul panel',
        'a--b__c  ((d))',
        'price 10 $ 20 $30',
    ])
    def test_idempotent(self, raw):
        once = canonical_key(raw)
        assert canonical_key(once) == once

    def test_none_is_empty(self):
        assert canonical_key(None) == ''

    def test_formatting_drift_converges(self):
        variants = [
            'Drug Screening and Confirmation',
            'drug-screening-and-confirmation',
            'DRUG SCREENING AND CONFIRMATION - $140',
            'drug-screening-and-confirmation-$140',
        ]
        assert len({canonical_key(v) for v in variants}) == 1


class TestParsePriceSuffix:

    def test_splits_name_and_price(self):
        name, price = parse_price_suffix('drug-screening-and-confirmation-$140')
        assert name == 'drug screening and confirmation'
        assert price == Decimal('140')

    def test_plain_name_has_no_price(self):
        assert parse_price_suffix('Hemoglobin A1c') == ('Hemoglobin A1c', None)

    def test_decimal_price_is_not_a_suffix(self):
        # 只认 "-$<integer>"
        name, price = parse_price_suffix('thyroid-panel-$99.50')
        assert price is None
        assert name == 'thyroid-panel-$99.50'

    def test_strips_whitespace(self):
        assert parse_price_suffix('  hcg-$40 ') == ('hcg', Decimal('40'))
