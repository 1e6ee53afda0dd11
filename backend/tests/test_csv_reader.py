from consolidator.schemas import BankProfile
from consolidator.services.csv_reader import HeaderedRow, HeaderlessRow, read_headers, read_rows


def test_header_rows_are_keyed_by_trimmed_header():
    content = "\ufeffDate , Description,Amount\n2024-01-15,\"Coffee, large\",-4.50\n"
    rows = read_rows(content, BankProfile(name="p", amount_column="Amount"))
    assert rows == [HeaderedRow({"Date": "2024-01-15", "Description": "Coffee, large",
                                 "Amount": "-4.50"})]


def test_skip_rows_and_empty_lines():
    content = "Bank letterhead\nAccount 1234\n\nDate,Description,Amount\n\n2024-01-15,A,1\r\n2024-01-16,B,2\r\n"
    profile = BankProfile(name="p", skip_rows=2, amount_column="Amount")
    rows = read_rows(content, profile)
    assert [r.values["Description"] for r in rows] == ["A", "B"]
    assert read_headers(content, profile) == ["Date", "Description", "Amount"]


def test_headerless_rows_keep_every_line():
    content = "15/01/2024,GROCERY MART,-45.20\n16/01/2024,SALARY,2000.00\n"
    profile = BankProfile(name="p", has_header=False, date_column="0", amount_column="2")
    rows = read_rows(content, profile)
    assert rows[0] == HeaderlessRow(("15/01/2024", "GROCERY MART", "-45.20"))
    assert len(rows) == 2
    assert read_headers(content, profile) == ["0", "1", "2"]


def test_empty_file():
    assert read_rows("", BankProfile(name="p")) == []
    assert read_headers("", BankProfile(name="p")) == []
