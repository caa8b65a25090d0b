"""
Unit tests for extract_fields 和它的取值辅助函数。

纯 Python，不需要数据库。
"""
from datetime import date

import pytest

from labintake.intake.fields import (
    DEFAULT_FIELD_CANDIDATES,
    FieldMap,
    extract_fields,
    first_text,
    parse_date,
    parse_time_slot,
    split_test_names,
)


class TestCandidateLookup:

    def test_first_candidate_wins(self):
        form = {'patient_name': 'Second', 'mf-patient-name': 'First'}
        assert extract_fields(form).patient_name == 'First'

    def test_blank_candidate_skipped(self):
        form = {'mf-patient-name': '   ', 'patient_name': 'Jane Doe'}
        assert extract_fields(form).patient_name == 'Jane Doe'

    def test_value_trimmed(self):
        assert extract_fields({'phone': '  555-0100 '}).patient_phone == '555-0100'

    def test_non_string_values_ignored(self):
        assert first_text({'name': 42, 'full_name': 'Jane'}, ('name', 'full_name')) == 'Jane'

    def test_all_fields_missing(self):
        fields = extract_fields({})
        assert fields.patient_name is None
        assert fields.date_of_order is None
        assert fields.test_names == []

    def test_metform_keys(self):
        form = {
            'mf-patient-name': 'Jane Doe',
            'mf-physician-name': 'Dr. Who',
            'mf-clinic-address': '1 Main St',
            'mf-test-category-name': 'drug-testing',
        }
        fields = extract_fields(form)
        assert fields.patient_name == 'Jane Doe'
        assert fields.physician_name == 'Dr. Who'
        assert fields.clinic_address == '1 Main St'
        assert fields.category_hint == 'drug-testing'


class TestTestNames:

    @pytest.mark.parametrize('raw, expected', [
        ('A, B ,C', ['A', 'B', 'C']),
        ('A,,  ,B', ['A', 'B']),
        (['A', 2, '', None, ' B '], ['A', '2', 'B']),
        (None, []),
        (17, []),
    ])
    def test_split(self, raw, expected):
        assert split_test_names(raw) == expected

    def test_list_value_from_form(self):
        fields = extract_fields({'mf-tests': ['HCG', 'TSH']})
        assert fields.test_names == ['HCG', 'TSH']

    def test_first_truthy_candidate(self):
        form = {'mf-tests-selection': '', 'tests': 'HCG, TSH'}
        assert extract_fields(form).test_names == ['HCG', 'TSH']


class TestOverrides:

    def test_override_replaces_candidates(self):
        field_map = FieldMap.with_overrides({'patient_name': ['nombre']})
        form = {'nombre': 'Juana', 'mf-patient-name': 'Jane'}
        assert extract_fields(form, field_map).patient_name == 'Juana'

    def test_string_override(self):
        field_map = FieldMap.with_overrides({'test_names': 'lab_tests'})
        assert field_map.keys_for('test_names') == ('lab_tests',)

    def test_other_fields_keep_defaults(self):
        field_map = FieldMap.with_overrides({'patient_name': ['nombre']})
        assert field_map.keys_for('patient_phone') == DEFAULT_FIELD_CANDIDATES['patient_phone']

    def test_unknown_field_ignored(self):
        field_map = FieldMap.with_overrides({'favourite_colour': ['colour']})
        assert 'favourite_colour' not in field_map.candidates


class TestDates:

    @pytest.mark.parametrize('raw, expected', [
        ('1985-03-20', date(1985, 3, 20)),
        ('19850320', date(1985, 3, 20)),
        ('03/20/1985', date(1985, 3, 20)),
        (' 2025-02-10 ', date(2025, 2, 10)),
    ])
    def test_formats(self, raw, expected):
        assert parse_date(raw) == expected

    @pytest.mark.parametrize('raw', ['', None, 'next tuesday', '2025-13-45', '20251345'])
    def test_unparseable(self, raw):
        assert parse_date(raw) is None

    def test_unparseable_date_stored_as_null(self):
        fields = extract_fields({'dob': 'yesterday', 'mf-select-date': '2025-02-10'})
        assert fields.patient_dob is None
        assert fields.schedule_date == date(2025, 2, 10)


class TestTimeSlots:

    @pytest.mark.parametrize('raw, expected', [
        ('09:20', '09:20'),
        ('9:20', '09:20'),
        ('9:20 AM', '09:20'),
        ('2:40 pm', '14:40'),
        ('12:00 p.m.', '12:00'),
        ('16:40', '16:40'),
    ])
    def test_valid_slots(self, raw, expected):
        assert parse_time_slot(raw) == expected

    @pytest.mark.parametrize('raw', ['08:40', '17:00', '09:10', '5 pm', 'morning', ''])
    def test_outside_slots(self, raw):
        assert parse_time_slot(raw) is None

    def test_invalid_slot_stored_as_null(self):
        assert extract_fields({'mf-available-slots': '07:00'}).schedule_time is None
