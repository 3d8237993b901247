"""
Tests for the known chemical reference list.

Tests verify:
- Fuzzy name matching (containment or three shared words)
- Scanned fields overlay known data without erasing it
- The bundled list loads
"""
from core.scan.known_chemicals import (
    find_known_chemical,
    fuzzy_match,
    load_known_chemicals,
    merge_label_data,
)


class TestFuzzyMatch:

    def test_containment_either_way(self):
        assert fuzzy_match("Simple Green", "Simple Green All-Purpose Cleaner") is True
        assert fuzzy_match("CLOROX REGULAR BLEACH 121 OZ", "Clorox Regular Bleach") is True

    def test_three_shared_words(self):
        assert fuzzy_match(
            "Zep Industrial Citrus Degreasers Heavy",
            "Zep Heavy-Duty Citrus Degreaser"
        ) is True

    def test_two_shared_words_is_not_enough(self):
        assert fuzzy_match("Citrus Degreaser Spray", "Zep Heavy-Duty Citrus Degreaser") is False

    def test_short_words_are_ignored(self):
        assert fuzzy_match("3M Go To It", "3M Go To Super It") is False

    def test_empty_name_never_matches(self):
        assert fuzzy_match("", "Clorox Regular Bleach") is False
        assert fuzzy_match("   ", "Clorox Regular Bleach") is False


class TestFindKnownChemical:

    def test_first_match_wins(self):
        known = [
            {"product_name": "Acetone Technical Grade"},
            {"product_name": "Acetone Pure"},
        ]

        assert find_known_chemical("acetone", known) is known[0]

    def test_no_match(self):
        assert find_known_chemical("Acme Floor Wax", load_known_chemicals()) is None


class TestMergeLabelData:

    def test_scanned_values_override_known(self):
        known = {"product_name": "Clorox Regular Bleach", "signal_word": "DANGER", "un_number": None}
        scanned = {"product_name": "Clorox Bleach", "signal_word": "WARNING", "un_number": "UN1791"}

        merged = merge_label_data(known, scanned)

        assert merged == {"product_name": "Clorox Bleach", "signal_word": "WARNING", "un_number": "UN1791"}

    def test_empty_scanned_values_keep_known(self):
        known = {
            "signal_word": "DANGER",
            "pictogram_codes": ["GHS05"],
            "storage_requirements": "Store below 25C",
        }
        scanned = {"signal_word": None, "pictogram_codes": [], "storage_requirements": "  "}

        assert merge_label_data(known, scanned) == known

    def test_nested_objects_merge_by_key(self):
        known = {"first_aid": {"eyes": "Rinse", "skin": "Wash", "inhalation": "Fresh air"}}
        scanned = {"first_aid": {"eyes": "Rinse for 15 minutes", "skin": None}}

        merged = merge_label_data(known, scanned)

        assert merged["first_aid"] == {
            "eyes": "Rinse for 15 minutes",
            "skin": "Wash",
            "inhalation": "Fresh air",
        }

    def test_known_data_is_not_mutated(self):
        known = {"first_aid": {"eyes": "Rinse"}, "signal_word": "DANGER"}

        merge_label_data(known, {"first_aid": {"eyes": "Flush"}, "signal_word": "WARNING"})

        assert known == {"first_aid": {"eyes": "Rinse"}, "signal_word": "DANGER"}


class TestLoadKnownChemicals:

    def test_bundled_list(self):
        chemicals = load_known_chemicals()

        assert len(chemicals) == 20
        bleach = find_known_chemical("Clorox Regular Bleach", chemicals)
        assert bleach["manufacturer"]
        assert bleach["signal_word"] in ("DANGER", "WARNING")

    def test_custom_path(self, tmp_path):
        path = tmp_path / "chemicals.yaml"
        path.write_text(
            "chemicals:\n"
            "  - product_name: Test Solvent\n"
            "    manufacturer: Acme\n"
            "  - manufacturer: Nameless\n"
        )

        chemicals = load_known_chemicals(str(path))

        assert chemicals == [{"product_name": "Test Solvent", "manufacturer": "Acme"}]
