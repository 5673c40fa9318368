"""
Tests for the Dataset container: invariants, row views and serialization.
"""

import pytest

from parsers.cells import MISSING, Number, Text
from parsers.dataset import Dataset, infer_numeric_columns, unique_headers


@pytest.fixture
def people(parse_csv):
    return parse_csv(
        "name,age,city\n"
        "Ada,36,London\n"
        "Linus,,Helsinki\n"
        "Grace,85,New York\n"
        "Alan,41,london"
    )


class TestDatasetInvariants:

    def test_every_row_has_every_header(self, people):
        for row in people.rows:
            assert list(row.keys()) == list(people.headers)

    def test_rows_are_read_only(self, people):
        with pytest.raises(TypeError):
            people.rows[0]["age"] = Number(1.0)

    def test_dataset_is_frozen(self, people):
        with pytest.raises(AttributeError):
            people.file_name = "other.csv"

    def test_numeric_columns_follow_header_order(self):
        rows = [[Number(1.0), Text("x"), MISSING]]
        assert infer_numeric_columns(("a", "b", "c"), [dict(zip("abc", r)) for r in rows]) == ("a", "c")

    def test_from_rows_accepts_mappings(self):
        dataset = Dataset.from_rows("m.csv", ["a", "b"], [{"a": Number(1.0)}])
        assert dataset.rows[0]["b"] is MISSING

    def test_unique_headers(self):
        assert unique_headers(["x", " x ", "", "x_2"]) == ["x", "x_2", "Column_3", "x_2_2"]


class TestColumnAccess:

    def test_numbers(self, people):
        assert people.numbers("age") == [36.0, 85.0, 41.0]
        assert people.numbers("nope") == []

    def test_paired_numbers(self, parse_csv):
        dataset = parse_csv("a,b\n1,2\n,3\n4,x\n5,6")
        assert dataset.paired_numbers("a", "b") == [(1.0, 2.0), (5.0, 6.0)]

    def test_is_numeric(self, people):
        assert people.is_numeric("age")
        assert not people.is_numeric("city")


class TestRowViews:

    def test_filter_case_insensitive_substring(self, people):
        view = people.filter_rows({"city": "LONDON"})
        assert [row["name"].value for row in view.rows] == ["Ada", "Alan"]
        assert len(people.rows) == 4

    def test_filter_on_number_text(self, people):
        view = people.filter_rows({"age": "8"})
        assert [row["name"].value for row in view.rows] == ["Grace"]

    def test_blank_and_unknown_filters_ignored(self, people):
        assert people.filter_rows({"city": "  ", "nope": "x"}) is people

    def test_filter_recomputes_numeric_columns(self, parse_csv):
        dataset = parse_csv("k,v\na,1\nb,n/a\nc,3")
        assert dataset.numeric_columns == ()
        view = dataset.filter_rows({"k": "a"})
        assert view.numeric_columns == ("v",)

    def test_sort_ascending_missing_last(self, people):
        view = people.sort_rows("age")
        assert [row["name"].value for row in view.rows] == ["Ada", "Alan", "Grace", "Linus"]

    def test_sort_descending_missing_last(self, people):
        view = people.sort_rows("age", descending=True)
        assert [row["name"].value for row in view.rows] == ["Grace", "Alan", "Ada", "Linus"]

    def test_sort_text(self, people):
        view = people.sort_rows("name")
        assert [row["name"].value for row in view.rows] == ["Ada", "Alan", "Grace", "Linus"]

    def test_sort_unknown_column(self, people):
        with pytest.raises(KeyError):
            people.sort_rows("salary")


class TestSerialization:

    def test_to_dict(self, people):
        data = people.to_dict()
        assert data["fileName"] == "data.csv"
        assert data["headers"] == ["name", "age", "city"]
        assert data["numericColumns"] == ["age"]
        assert data["rows"][1] == {"name": "Linus", "age": None, "city": "Helsinki"}
        assert data["rows"][0]["age"] == 36.0
        assert data["droppedRows"] == 0
        assert data["isPlaceholder"] is False
