import unittest

from app.services.field_keys import derive_field_key


class DeriveFieldKeyTests(unittest.TestCase):
    def test_lowercases_and_joins_words(self):
        self.assertEqual(derive_field_key("Email"), "email")
        self.assertEqual(derive_field_key("First Name"), "first_name")

    def test_collapses_runs_of_separators(self):
        self.assertEqual(derive_field_key("Phone -- (mobile)"), "phone_mobile")
        self.assertEqual(derive_field_key("a...b___c"), "a_b_c")

    def test_strips_leading_and_trailing_separators(self):
        self.assertEqual(derive_field_key("  What is your age? "), "what_is_your_age")
        self.assertEqual(derive_field_key("!!!"), "")

    def test_non_ascii_letters_are_separators(self):
        self.assertEqual(derive_field_key("Café Name"), "caf_name")

    def test_empty_label_yields_empty_key(self):
        self.assertEqual(derive_field_key(""), "")
        self.assertEqual(derive_field_key(None), "")

    def test_is_idempotent(self):
        for label in ["First Name", "  Age (years) ", "E-mail address!", "x", "Q1: rate us 1-5"]:
            key = derive_field_key(label)
            self.assertEqual(derive_field_key(key), key)


if __name__ == "__main__":
    unittest.main()
