import unittest

from screens.institutions.db import Institution
from screens.institutions.utils import (
    CODE_LENGTH_MSG,
    CODE_TAKEN_MSG,
    NAME_REQUIRED_MSG,
    SortOption,
    collation_key,
    filter_institutions,
    generate_unique_code,
    is_code_unique,
    normalize_code,
    sort_institutions,
    validate_institution_form,
)


def _inst(inst_id, name, code):
    return Institution(id=inst_id, institution=name, faculty_code=code)


class TestFilter(unittest.TestCase):
    def setUp(self):
        self.rows = [
            _inst("1", "Colegio Rioclaro", "ABC123"),
            _inst("2", "Liceo Norte", "XY12AB"),
            _inst("3", "Escuela Sur", "QWERTY"),
        ]

    def test_empty_and_blank_terms_return_input(self):
        self.assertIs(filter_institutions(self.rows, ""), self.rows)
        self.assertIs(filter_institutions(self.rows, "   "), self.rows)

    def test_matches_name_case_insensitively(self):
        result = filter_institutions(self.rows, "rIOCLARO")
        self.assertEqual([r.id for r in result], ["1"])

    def test_matches_code(self):
        result = filter_institutions(self.rows, "12ab")
        self.assertEqual([r.id for r in result], ["2"])

    def test_name_or_code(self):
        # "e" is in every name; "ab" hits two codes
        self.assertEqual(len(filter_institutions(self.rows, "e")), 3)
        self.assertEqual({r.id for r in filter_institutions(self.rows, "ab")}, {"1", "2"})

    def test_no_match(self):
        self.assertEqual(filter_institutions(self.rows, "zzz"), [])

    def test_result_is_exact_subset(self):
        term = "o"
        expected = [
            r for r in self.rows
            if term in r.institution.lower() or term in r.faculty_code.lower()
        ]
        self.assertEqual(filter_institutions(self.rows, term), expected)


class TestSort(unittest.TestCase):
    def setUp(self):
        self.rows = [
            _inst("1", "beta", "CCC333"),
            _inst("2", "Alpha", "AAA111"),
            _inst("3", "álamo", "BBB222"),
            _inst("4", "alpha", "aaa000"),
        ]

    def test_alphabetical(self):
        result = sort_institutions(self.rows, SortOption.ALPHABETICAL)
        self.assertEqual([r.institution for r in result], ["álamo", "alpha", "Alpha", "beta"])

    def test_reverse_alphabetical_is_exact_reverse(self):
        asc = sort_institutions(self.rows, SortOption.ALPHABETICAL)
        desc = sort_institutions(self.rows, SortOption.REVERSE_ALPHABETICAL)
        self.assertEqual(desc, list(reversed(asc)))

    def test_code_ascending_and_descending(self):
        asc = sort_institutions(self.rows, "code-asc")
        self.assertEqual([r.faculty_code for r in asc], ["aaa000", "AAA111", "BBB222", "CCC333"])
        desc = sort_institutions(self.rows, "code-desc")
        self.assertEqual([r.faculty_code for r in desc], ["CCC333", "BBB222", "AAA111", "aaa000"])

    def test_every_option_is_ordered_by_key(self):
        fields = {
            SortOption.ALPHABETICAL: ("institution", False),
            SortOption.REVERSE_ALPHABETICAL: ("institution", True),
            SortOption.CODE_ASC: ("faculty_code", False),
            SortOption.CODE_DESC: ("faculty_code", True),
        }
        for option, (field, descending) in fields.items():
            keys = [collation_key(getattr(r, field)) for r in sort_institutions(self.rows, option)]
            pairs = zip(keys, keys[1:])
            if descending:
                self.assertTrue(all(a >= b for a, b in pairs), option)
            else:
                self.assertTrue(all(a <= b for a, b in pairs), option)

    def test_does_not_mutate_input(self):
        before = list(self.rows)
        sort_institutions(self.rows, SortOption.CODE_DESC)
        self.assertEqual(self.rows, before)

    def test_unknown_option_returns_copy(self):
        result = sort_institutions(self.rows, "by-size")
        self.assertEqual(result, self.rows)
        self.assertIsNot(result, self.rows)

    def test_missing_values_sort_first(self):
        rows = [_inst("1", "Zeta", "Z"), _inst("2", "", "")]
        self.assertEqual(sort_institutions(rows, SortOption.ALPHABETICAL)[0].id, "2")


class TestCodes(unittest.TestCase):
    def setUp(self):
        self.rows = [_inst("1", "A", "XY12AB"), _inst("2", "B", "QWERTY")]

    def test_normalize_code(self):
        self.assertEqual(normalize_code(" abc123 "), "ABC123")
        self.assertEqual(normalize_code(None), "")

    def test_is_code_unique(self):
        self.assertFalse(is_code_unique("XY12AB", self.rows))
        self.assertTrue(is_code_unique("XY12AB", self.rows, exclude_id="1"))
        self.assertTrue(is_code_unique("NEW001", self.rows))

    def test_generate_unique_code_skips_taken_codes(self):
        draws = iter(["XY12AB", "QWERTY", "XY12AB", "FRESH1"])
        code = generate_unique_code(self.rows, generator=lambda: next(draws))
        self.assertEqual(code, "FRESH1")


class TestValidation(unittest.TestCase):
    def setUp(self):
        self.rows = [_inst("1", "Liceo Norte", "XY12AB")]

    def test_valid(self):
        self.assertIsNone(validate_institution_form("Colegio", "abc123", self.rows))

    def test_name_required(self):
        self.assertEqual(validate_institution_form("   ", "ABC123", self.rows), NAME_REQUIRED_MSG)

    def test_code_length(self):
        for code in ("", "   ", "ABC12", "ABC1234"):
            self.assertEqual(validate_institution_form("Colegio", code, self.rows), CODE_LENGTH_MSG, code)

    def test_duplicate_code_is_case_insensitive(self):
        self.assertEqual(validate_institution_form("Colegio", "xy12ab", self.rows), CODE_TAKEN_MSG)

    def test_own_code_allowed_when_editing(self):
        self.assertIsNone(validate_institution_form("Liceo", "XY12AB", self.rows, exclude_id="1"))

    def test_name_checked_before_code(self):
        self.assertEqual(validate_institution_form("", "", self.rows), NAME_REQUIRED_MSG)


if __name__ == "__main__":
    unittest.main()
