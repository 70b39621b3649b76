import re

from backend.app.parsers.make_model import MAKE_CATALOG, MakeModel, _entry, parse_make_model


def test_parses_year_make_model_trim():
    assert parse_make_model("2020 Honda Civic LX", "2020") == MakeModel("Honda", "Civic", "LX")


def test_multi_word_trim_is_joined_with_single_spaces():
    result = parse_make_model("2019   Toyota  RAV4 XLE   Premium AWD", "2019")
    assert result == MakeModel("Toyota", "RAV4", "XLE Premium AWD")


def test_make_match_is_case_insensitive_and_uses_catalog_spelling():
    assert parse_make_model("2018 bmw x5 xDrive40i", "2018").make == "BMW"


def test_make_can_appear_after_model_text():
    result = parse_make_model("Mustang GT by Ford 2015", "2015")
    assert result.make == "Ford"
    assert result.model == "Mustang"
    assert result.trim == "GT by"


def test_aliases_map_to_canonical_make():
    assert parse_make_model("2017 Chevy Tahoe LT", "2017") == MakeModel("Chevrolet", "Tahoe", "LT")
    assert parse_make_model("2012 VW Jetta", "2012") == MakeModel("Volkswagen", "Jetta", "")


def test_multi_word_and_hyphenated_makes():
    assert parse_make_model("2021 Land Rover Defender 110", "2021") == MakeModel("Land Rover", "Defender", "110")
    assert parse_make_model("2016 Mercedes-Benz C300", "2016") == MakeModel("Mercedes-Benz", "C300", "")


def test_whole_word_matching_ignores_substrings():
    # "Rampage" must not be read as Ram, "Minivan" not as Mini.
    result = parse_make_model("2023 Rampage Minivan", "2023")
    assert result.make == "Unknown"
    assert result.model == "Rampage"
    assert result.trim == "Minivan"


def test_unknown_make_keeps_model_and_trim_split():
    assert parse_make_model("2010 Saab 9-3 Aero", "2010") == MakeModel("Unknown", "Saab", "9-3 Aero")


def test_empty_text_falls_back_to_sentinels():
    assert parse_make_model("2010", "2010") == MakeModel("Unknown", "Unknown", "")
    assert parse_make_model(None, None) == MakeModel("Unknown", "Unknown", "")


def test_only_the_year_token_is_removed():
    result = parse_make_model("2020 Ford Transit 2020HD", "2020")
    assert result == MakeModel("Ford", "Transit", "2020HD")


def test_catalog_order_decides_ambiguous_text():
    # Genesis is declared before Hyundai, so it wins even though Hyundai is the manufacturer.
    assert parse_make_model("2015 Hyundai Genesis 3.8", "2015").make == "Genesis"
    names = [entry.name for entry in MAKE_CATALOG]
    assert names.index("Mercedes-Benz") < names.index("Mercedes")
    assert names.index("Chevrolet") < names.index("Chevy")


def test_custom_catalog_precedence_is_declaration_order():
    catalog = (_entry("Ram"), _entry("Dodge"))
    assert parse_make_model("2012 Dodge Ram 1500", "2012", catalog=catalog) == MakeModel("Ram", "Dodge", "1500")
    reversed_catalog = tuple(reversed(catalog))
    assert parse_make_model("2012 Dodge Ram 1500", "2012", catalog=reversed_catalog) == MakeModel("Dodge", "Ram", "1500")


def test_parsing_is_deterministic():
    text = "2022 Kia Telluride SX Prestige"
    assert {parse_make_model(text, "2022") for _ in range(5)} == {MakeModel("Kia", "Telluride", "SX Prestige")}


def test_catalog_patterns_are_word_bounded():
    for entry in MAKE_CATALOG:
        assert entry.pattern.flags & re.IGNORECASE
        assert entry.pattern.pattern.startswith(r"\b")
