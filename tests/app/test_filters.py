import pytest

from roamly.app.controllers.filters import FilterHandler, FilterState, extract_years, filter_destinations
from roamly.domain.entities.destination import Destination

DS = [
    Destination(1, "plane", (52.0, 21.0), (35.9, 14.5), "Valletta", date="May 2023"),
    Destination(2, "train", (52.0, 21.0), (50.1, 19.9), "Kraków", date="June 2024"),
    Destination(3, "car", (52.0, 21.0), (54.4, 18.6), "Gdańsk", date="Summer 2023 / 2024"),
    Destination(4, "plane", (52.0, 21.0), (41.9, 12.5), "Rome", date=""),
]


def ids(ds):
    return [d.id for d in ds]


def test_extract_years_is_distinct_and_sorted():
    assert extract_years(DS) == ["2023", "2024"]
    assert extract_years([]) == []


def test_empty_state_matches_everything():
    assert FilterState().is_empty()
    assert ids(filter_destinations(DS, FilterState())) == [1, 2, 3, 4]


def test_facets_combine_with_and():
    assert ids(filter_destinations(DS, FilterState(years=["2023"]))) == [1, 3]
    assert ids(filter_destinations(DS, FilterState(kinds=["plane"]))) == [1, 4]
    assert ids(filter_destinations(DS, FilterState(years=["2023"], kinds=["plane"]))) == [1]
    # values inside one facet are alternatives
    assert ids(filter_destinations(DS, FilterState(years=["2023", "2024"], kinds=["train", "car"]))) == [2, 3]


def test_handler_pushes_filtered_subset_on_every_toggle():
    h = FilterHandler()
    h.set_destinations(DS)
    pushed = []
    h.on_change(lambda ds: pushed.append(ids(ds)))

    assert h.available_years() == ["2023", "2024"]
    assert h.available_kinds() == ("plane", "train", "car")

    h.toggle_year("2024", True)
    h.toggle_kind("car", True)
    h.toggle_kind("car", True)  # already selected
    h.toggle_year("2024", False)
    assert pushed == [[2, 3], [3], [3], [3]]
    assert h.state() == FilterState(years=[], kinds=["car"])

    h.reset_filters()
    assert pushed[-1] == [1, 2, 3, 4]
    assert h.state().is_empty()


def test_state_is_a_copy():
    h = FilterHandler()
    h.state().years.append("1999")
    assert h.state().is_empty()


def test_unknown_kind_is_rejected():
    h = FilterHandler()
    with pytest.raises(ValueError):
        h.toggle_kind("boat", True)


def test_reset_detaches_callback():
    h = FilterHandler()
    h.set_destinations(DS)
    pushed = []
    h.on_change(pushed.append)
    h.toggle_year("2023", True)
    h.reset()
    h.toggle_year("2024", True)
    assert len(pushed) == 1
    assert h.state().years == ["2024"]
