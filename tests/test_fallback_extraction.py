"""
Tests for rule-based extraction.
"""
import unittest
import sys
import os
import logging

# Add parent directory to path to allow imports
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from models.state import CaseType
from pipeline.fallback_extraction import (
    CASE_TYPE_CONFIDENCE,
    COUNTY_CONFIDENCE,
    STATE_CONFIDENCE,
    extract,
)

# Disable logging during tests
logging.disable(logging.CRITICAL)

class TestStateRules(unittest.TestCase):
    """Tests for state detection."""

    def test_end_of_text_abbreviation(self):
        parsed = extract("I need a lawyer in Monroe NY")
        self.assertEqual(parsed.state, "New York")
        self.assertEqual(parsed.confidence.state, STATE_CONFIDENCE)

    def test_full_state_name(self):
        parsed = extract("I got a DUI in Los Angeles California")
        self.assertEqual(parsed.state, "California")
        self.assertIsNone(parsed.county)
        self.assertEqual(parsed.case_type, CaseType.CRIMINAL)

    def test_comma_qualified_abbreviation(self):
        parsed = extract("I was arrested in Columbus, OH")
        self.assertEqual(parsed.state, "Ohio")
        self.assertEqual(parsed.case_type, CaseType.CRIMINAL)

    def test_misspelt_state_after_comma_kept_raw(self):
        """A near miss is left for the location corrector to repair."""
        parsed = extract("I need a lawyer in Los Angelos, Calfornia")
        self.assertEqual(parsed.state, "Calfornia")
        self.assertEqual(parsed.confidence.state, STATE_CONFIDENCE)

    def test_district_of_columbia(self):
        self.assertEqual(extract("I need help in Washington, DC").state, "District of Columbia")

    def test_washington_state(self):
        self.assertEqual(extract("I live in Seattle Washington").state, "Washington")

    def test_lowercase_word_abbreviation_ignored(self):
        """Words like "me" or "in" are not read as states."""
        parsed = extract("Can you help me")
        self.assertIsNone(parsed.state)

    def test_uppercase_collision_abbreviation_at_end(self):
        self.assertEqual(extract("I live in Portland ME").state, "Maine")

    def test_courtesy_title_not_a_state(self):
        self.assertIsNone(extract("Ms. Jones rear-ended me").state)

    def test_uppercase_title_abbreviation_at_end(self):
        self.assertEqual(extract("I live in Jackson MS").state, "Mississippi")

    def test_bare_abbreviation_mid_sentence(self):
        self.assertEqual(extract("I was hurt in TX last week").state, "Texas")


class TestCountyRules(unittest.TestCase):
    """Tests for county detection."""

    def test_county_with_suffix(self):
        parsed = extract("Actually, I'm in Orange County")
        self.assertEqual(parsed.county, "Orange County")
        self.assertIsNone(parsed.state)
        self.assertIsNone(parsed.case_type)
        self.assertEqual(parsed.confidence.county, COUNTY_CONFIDENCE)
        self.assertEqual(parsed.confidence.state, 0.0)

    def test_multi_word_county(self):
        parsed = extract("The accident happened in San Bernardino County")
        self.assertEqual(parsed.county, "San Bernardino County")
        self.assertEqual(parsed.case_type, CaseType.PERSONAL_INJURY)

    def test_hyphenated_county_casing(self):
        parsed = extract("I got a DUI in Miami-Dade County, Florida")
        self.assertEqual(parsed.county, "Miami-Dade County")
        self.assertEqual(parsed.state, "Florida")

    def test_incident_words_never_become_counties(self):
        self.assertIsNone(extract("someone got killed in my county").county)
        self.assertIsNone(extract("it happened in the county").county)

    def test_short_candidate_rejected(self):
        self.assertIsNone(extract("at a county fair").county)

    def test_city_county_implies_state(self):
        parsed = extract("I was in an accident in Honolulu")
        self.assertEqual(parsed.county, "Honolulu County")
        self.assertEqual(parsed.state, "Hawaii")
        self.assertEqual(parsed.case_type, CaseType.PERSONAL_INJURY)

    def test_explicit_state_kept_over_city_county(self):
        parsed = extract("I was in Denver but I live in Texas")
        self.assertEqual(parsed.county, "Denver County")
        self.assertEqual(parsed.state, "Texas")


class TestCaseTypeRules(unittest.TestCase):
    """Tests for case type detection inside extraction."""

    def test_dui_priority(self):
        parsed = extract("DUI after a car accident in Texas")
        self.assertEqual(parsed.case_type, CaseType.CRIMINAL)
        self.assertEqual(parsed.confidence.case_type, CASE_TYPE_CONFIDENCE)

    def test_nothing_found(self):
        parsed = extract("hello there")
        self.assertTrue(parsed.is_empty())
        self.assertEqual(parsed.confidence.county, 0.0)
        self.assertEqual(parsed.confidence.state, 0.0)
        self.assertEqual(parsed.confidence.case_type, 0.0)


if __name__ == '__main__':
    unittest.main()
