import math

import pytest

from bank_rate_dashboard.data.normalizer import (
    MAX_SEARCH_DEPTH,
    changes_only,
    extract_field,
    find_cubes_recursive,
    find_observations,
    normalize_document,
    parse_observations,
    parse_value,
)
from bank_rate_dashboard.models import Observation


def obs(time: str, value: str) -> dict:
    return {"@TIME": time, "@OBS_VALUE": value}


def nest(levels: int, leaf: dict) -> dict:
    node = leaf
    for _ in range(levels):
        node = {"level": node}
    return node


# find_observations ----------------------------------------------------------

def test_finds_cubes_directly_in_envelope(simple_document):
    nodes = find_observations(simple_document)
    assert nodes == simple_document["Envelope"]["Cube"]


def test_single_cube_in_envelope_becomes_list():
    cube = {"@SCODE": "IUDBEDR", "Cube": [obs("2024-01-01", "5.25")]}
    assert find_observations({"Envelope": {"Cube": cube}}) == [cube]


def test_lowercase_envelope_and_cube():
    doc = {"envelope": {"cube": [obs("2024-01-01", "5.25")]}}
    assert find_observations(doc) == [obs("2024-01-01", "5.25")]


def test_finds_cubes_nested_in_envelope(nested_document):
    nodes = find_observations(nested_document)
    # Series cube first, then its point cubes found by descending into it
    assert nodes[0]["@SCODE"] == "IUDBEDR"
    assert len(nodes) == 4


def test_finds_sdmx_observations(sdmx_document):
    nodes = find_observations(sdmx_document)
    assert [n["@TIME_PERIOD"] for n in nodes] == ["2024-01-01", "2024-08-01"]


def test_single_sdmx_observation_becomes_list():
    single = {"@TIME_PERIOD": "2024-01-01", "@OBS_VALUE": "5.25"}
    doc = {"Envelope": {"Message": {"dataSet": {"series": {"obs": single}}}}}
    assert find_observations(doc) == [single]


def test_top_level_cube_list():
    cubes = [obs("2024-01-01", "5.25")]
    assert find_observations({"Cube": cubes}) is cubes


def test_recursive_search_from_root_without_envelope():
    doc = {"gesmes:Envelope": {"Data": {"cube": obs("2024-01-01", "5.25")}}}
    assert find_observations(doc) == [obs("2024-01-01", "5.25")]


def test_returns_none_when_nothing_found():
    assert find_observations({"Envelope": {"Header": {"Sender": "x"}}}) is None
    assert find_observations({}) is None


@pytest.mark.parametrize("document", [None, "text", ["a", "b"], 42])
def test_returns_none_for_non_mapping_documents(document):
    assert find_observations(document) is None


def test_recursive_search_depth_is_bounded():
    leaf = {"Cube": [obs("2024-01-01", "5.25")]}
    assert find_cubes_recursive(nest(MAX_SEARCH_DEPTH, leaf)) == leaf["Cube"]
    assert find_cubes_recursive(nest(MAX_SEARCH_DEPTH + 1, leaf)) == []


def test_recursive_search_does_not_descend_into_lists():
    doc = {"rows": [{"Cube": obs("2024-01-01", "5.25")}]}
    assert find_cubes_recursive(doc) == []


# extract_field --------------------------------------------------------------

def test_attribute_form_wins_over_child():
    node = {"@TIME": "2024-01-01", "TIME": "1999-12-31"}
    assert extract_field(node, "TIME") == "2024-01-01"


def test_child_form_used_without_attribute():
    assert extract_field({"OBS_VALUE": "5.25"}, "OBS_VALUE") == "5.25"


def test_child_element_with_attributes_gives_text():
    node = {"OBS_VALUE": {"@unit": "pct", "#text": "5.25"}}
    assert extract_field(node, "OBS_VALUE") == "5.25"


def test_numeric_values_are_stringified():
    assert extract_field({"@OBS_VALUE": 5.25}, "OBS_VALUE") == "5.25"


@pytest.mark.parametrize("node", [None, "5.25", [obs("2024-01-01", "1")], {"OTHER": "x"}])
def test_missing_field_is_none(node):
    assert extract_field(node, "OBS_VALUE") is None


# parse_value ----------------------------------------------------------------

@pytest.mark.parametrize(
    "text, expected",
    [("5.25", 5.25), (" 0.1", 0.1), ("-0.5", -0.5), ("5.25%", 5.25), (".5", 0.5), ("1e-2", 0.01)],
)
def test_parse_value(text, expected):
    assert parse_value(text) == pytest.approx(expected)


@pytest.mark.parametrize("text", ["n/a", "", "abc5"])
def test_parse_value_failure_is_nan(text):
    assert math.isnan(parse_value(text))


# parse_observations ---------------------------------------------------------

def test_sorted_by_date():
    points = parse_observations([obs("2024-03-01", "3"), obs("2024-01-01", "1"), obs("2024-02-01", "2")])
    assert [p.date for p in points] == ["2024-01-01", "2024-02-01", "2024-03-01"]


def test_first_occurrence_of_date_wins():
    points = parse_observations([obs("2024-01-01", "5.25"), obs("2024-01-01", "9.99")])
    assert points == [Observation("2024-01-01", 5.25)]


def test_expands_series_cube():
    series_cube = {"@SCODE": "IUDBEDR", "Cube": [obs("2024-02-01", "5"), obs("2024-01-01", "4")]}
    points = parse_observations([series_cube])
    assert [p.value for p in points] == [4.0, 5.0]


def test_cube_name_is_case_insensitive():
    points = parse_observations([{"CUBE": obs("2024-01-01", "5")}])
    assert points == [Observation("2024-01-01", 5.0)]


def test_time_period_preferred_over_time():
    node = {"@TIME_PERIOD": "2024-01-01", "@TIME": "1999-01-01", "@OBS_VALUE": "5"}
    assert parse_observations([node])[0].date == "2024-01-01"


def test_candidates_missing_fields_are_skipped():
    nodes = [
        {"@TIME": "2024-01-01"},
        {"@OBS_VALUE": "5"},
        obs("2024-02-01", ""),
        obs("", "5"),
        "not a node",
        None,
        obs("2024-03-01", "4.5"),
    ]
    assert parse_observations(nodes) == [Observation("2024-03-01", 4.5)]


def test_unparseable_value_kept_as_nan():
    points = parse_observations([obs("2024-01-01", "n/a"), obs("2024-02-01", "5")])
    assert len(points) == 2
    assert math.isnan(points[0].value)


def test_output_dates_strictly_ascending(nested_document):
    points = parse_observations(find_observations(nested_document))
    dates = [p.date for p in points]
    assert dates == sorted(set(dates))
    assert len(points) == 3


# changes_only ---------------------------------------------------------------

def test_changes_only_empty():
    assert changes_only([]) == []


def test_changes_only_flat_series_keeps_first():
    points = [Observation(f"2024-01-0{i}", 5.0) for i in range(1, 6)]
    assert changes_only(points) == [points[0]]


def test_changes_only_keeps_return_to_previous_value():
    points = [
        Observation("2024-01-01", 5.0),
        Observation("2024-02-01", 4.0),
        Observation("2024-03-01", 4.0),
        Observation("2024-04-01", 5.0),
    ]
    assert changes_only(points) == [points[0], points[1], points[3]]


def test_changes_only_nan_counts_as_change():
    nan = float("nan")
    points = [Observation("2024-01-01", 5.0), Observation("2024-02-01", nan), Observation("2024-03-01", nan)]
    assert len(changes_only(points)) == 3


# normalize_document ---------------------------------------------------------

def test_normalize_simple_document(simple_document):
    series = normalize_document(simple_document, "IUDBEDR")
    assert [p.date for p in series.points] == ["2024-01-01", "2024-02-01", "2024-03-01"]
    assert series.changes_only == (
        Observation("2024-01-01", 5.25),
        Observation("2024-03-01", 5.0),
    )
    assert series.latest == Observation("2024-03-01", 5.0)


def test_normalize_sdmx_document(sdmx_document):
    series = normalize_document(sdmx_document, "IUDBEDR")
    assert series.latest == Observation("2024-08-01", 5.0)


def test_normalize_without_container_is_none():
    assert normalize_document({"Envelope": {}}, "IUDBEDR") is None


def test_normalize_without_usable_points_is_empty():
    series = normalize_document({"Envelope": {"Cube": [{"@TIME": "2024-01-01"}]}}, "IUDBEDR")
    assert series.is_empty
    assert series.latest is None


def test_capitalised_cube_preferred_over_lowercase():
    node = {"cube": [obs("1999-01-01", "9")], "Cube": [obs("2024-01-01", "5")]}
    assert parse_observations([node]) == [Observation("2024-01-01", 5.0)]
