"""
Tests for delimited-text parsing: tokenization, the row-length policy and
numeric column inference.
"""

import pytest

from parsers.cells import MISSING, Number, Text
from parsers.csv_parser import split_fields
from parsers.file_parser import EmptyFileError, NoHeadersError


class TestSplitFields:

    def test_plain_fields(self):
        assert split_fields("1,2,3") == ["1", "2", "3"]

    def test_whitespace_trimmed(self):
        assert split_fields(" a , b ,c ") == ["a", "b", "c"]

    def test_quoted_commas_are_literal(self):
        assert split_fields('1,"New York, NY",3') == ["1", '"New York, NY"', "3"]

    def test_doubled_quotes_inside_quoted_field(self):
        assert split_fields('"say ""hi""",2') == ['"say "hi""', "2"]

    def test_empty_fields(self):
        assert split_fields("1,,3") == ["1", "", "3"]
        assert split_fields("1,2,") == ["1", "2", ""]

    def test_unterminated_quote_is_malformed(self):
        assert split_fields('1,"open,3') is None

    def test_text_after_closing_quote_is_malformed(self):
        assert split_fields('"a"b,2') is None


class TestCSVParser:

    def test_sample_dataset(self, parse_csv, sales_csv):
        dataset = parse_csv(sales_csv, "demo_data.csv")
        assert dataset.file_name == "demo_data.csv"
        assert dataset.headers == ("Date", "Sales", "Profit", "Cost", "Region")
        assert len(dataset.rows) == 5
        assert dataset.numeric_columns == ("Date", "Sales", "Profit", "Cost")
        assert dataset.rows[0]["Sales"] == Number(100.0)
        assert dataset.rows[4]["Region"] == Text("North")
        assert dataset.dropped_rows == 0
        assert not dataset.is_placeholder

    def test_crlf_and_blank_lines(self, parse_csv):
        dataset = parse_csv("a,b\r\n1,2\r\n\r\n   \n3,4\r\n")
        assert len(dataset.rows) == 2
        assert dataset.rows[1]["b"] == Number(4.0)

    def test_header_quotes_and_whitespace(self, parse_csv):
        dataset = parse_csv(' "Name" , "Score"\nAda,9')
        assert dataset.headers == ("Name", "Score")

    def test_mismatched_rows_are_dropped_and_counted(self, parse_csv):
        dataset = parse_csv("a,b,c\n1,2,3\n4,5\n6,7,8,9\n10,11,12")
        assert len(dataset.rows) == 2
        assert dataset.dropped_rows == 2
        assert [row["a"] for row in dataset.rows] == [Number(1.0), Number(10.0)]

    def test_row_count_never_exceeds_data_lines(self, parse_csv):
        text = "x,y\n1,2\nbad\n3,4\n5,6,7"
        dataset = parse_csv(text)
        assert len(dataset.headers) == 2
        assert len(dataset.rows) <= 4

    def test_single_text_cell_removes_numeric_column(self, parse_csv):
        dataset = parse_csv("a,b\n1,2\n3,oops\n5,6")
        assert dataset.numeric_columns == ("a",)
        # Other cells in the column stay numbers
        assert dataset.rows[0]["b"] == Number(2.0)
        assert dataset.rows[1]["b"] == Text("oops")

    def test_partial_number_is_not_numeric(self, parse_csv):
        dataset = parse_csv("v\n12abc\n5")
        assert dataset.rows[0]["v"] == Text("12abc")
        assert dataset.numeric_columns == ()

    def test_empty_cells_keep_column_numeric(self, parse_csv):
        dataset = parse_csv("a,b\n1,\n2,")
        assert dataset.rows[0]["b"] is MISSING
        assert dataset.numeric_columns == ("a", "b")

    def test_quoted_number_is_numeric(self, parse_csv):
        dataset = parse_csv('a,b\n"1","x, y"')
        assert dataset.rows[0]["a"] == Number(1.0)
        assert dataset.rows[0]["b"] == Text("x, y")

    def test_duplicate_headers_made_unique(self, parse_csv):
        dataset = parse_csv("a,a,,a\n1,2,3,4")
        assert dataset.headers == ("a", "a_2", "Column_3", "a_3")
        assert dataset.rows[0]["a_3"] == Number(4.0)

    def test_bytes_input_with_bom(self, parse_csv):
        dataset = parse_csv("\ufeffcity,temp\nZürich,21".encode("utf-8"))
        assert dataset.headers == ("city", "temp")
        assert dataset.rows[0]["city"] == Text("Zürich")

    def test_latin1_bytes(self, parse_csv):
        dataset = parse_csv("city,temp\nZürich,21".encode("latin-1"))
        assert dataset.rows[0]["city"] == Text("Zürich")

    def test_header_only(self, parse_csv):
        dataset = parse_csv("a,b,c")
        assert dataset.headers == ("a", "b", "c")
        assert dataset.rows == ()
        assert dataset.numeric_columns == ("a", "b", "c")

    def test_empty_content(self, parse_csv):
        with pytest.raises(EmptyFileError):
            parse_csv("")
        with pytest.raises(EmptyFileError):
            parse_csv(b"")

    def test_whitespace_only_content(self, parse_csv):
        with pytest.raises(EmptyFileError):
            parse_csv("\n  \r\n\n")

    def test_blank_header_row(self, parse_csv):
        with pytest.raises(NoHeadersError):
            parse_csv(",,\n1,2,3")

    def test_idempotent(self, parse_csv, sales_csv):
        first = parse_csv(sales_csv)
        second = parse_csv(sales_csv)
        assert first == second
        assert first.to_dict() == second.to_dict()
