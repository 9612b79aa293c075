import pytest

from packages.ingestion_engine.dates import today_iso
from packages.ingestion_engine.receipt import (
    extract_receipt,
    file_stem,
    find_amounts,
    is_total_line,
    parse_receipt_date,
    pick_amount,
    pick_date,
    pick_vendor,
    split_lines,
)

COFFEE_RECEIPT = "COFFEE SHOP\nSubtotal 3.50\nTotal 4.20\n01/15/2024"


def test_coffee_receipt():
    record = extract_receipt(COFFEE_RECEIPT, "receipt.jpg")
    assert record.vendor == "COFFEE SHOP"
    assert record.amount == pytest.approx(4.20)
    assert record.date == "2024-01-15"
    assert record.category == "Uncategorized"
    assert record.raw_text == COFFEE_RECEIPT
    assert record.error is None


def test_split_lines_trims_and_drops_blanks():
    assert split_lines("  A \r\n\r\n B\n   \nC") == ["A", "B", "C"]
    assert split_lines("") == []


class TestVendor:
    def test_skips_numeric_and_short_lines(self):
        lines = ["12345", "$4.50", "ABC", "JOE'S DINER", "Total 4.50"]
        assert pick_vendor(lines, "scan.png") == "JOE'S DINER"

    def test_only_first_five_lines_are_considered(self):
        lines = ["1", "2", "3", "4", "5", "LATE MERCHANT"]
        assert pick_vendor(lines, "IMG_2041.jpg") == "Receipt from IMG_2041"

    def test_truncated_to_fifty_characters(self):
        assert pick_vendor(["X" * 80]) == "X" * 50

    def test_no_filename_fallback(self):
        assert pick_vendor([]) == "Unknown Merchant"

    def test_file_stem_stops_at_first_dot(self):
        assert file_stem("uploads/lunch.receipt.jpeg") == "lunch"


class TestAmount:
    def test_total_line_beats_earlier_amounts(self):
        lines = ["Latte 3.50", "Muffin 2.25", "TOTAL DUE $5.75"]
        assert pick_amount(lines) == pytest.approx(5.75)

    def test_first_amount_wins_without_total_lines(self):
        assert pick_amount(["Latte 3.50", "Muffin 2.25"]) == pytest.approx(3.50)

    def test_later_total_line_wins(self):
        lines = ["Subtotal 10.00", "Tax 0.80", "Total 10.80", "Visa 10.80", "Change due 0.00"]
        assert pick_amount(lines) == pytest.approx(10.80)

    def test_no_amount_is_zero(self):
        assert pick_amount(["THANK YOU", "Total: --"]) == 0.0

    def test_comma_decimal_separator(self):
        assert find_amounts("Summe 4,20") == [pytest.approx(4.20)]

    def test_thousands_grouping(self):
        assert find_amounts("Balance $1,234.56") == [pytest.approx(1234.56)]

    def test_requires_two_fraction_digits(self):
        assert find_amounts("Qty 3 x 12.5 and 4.205") == []

    @pytest.mark.parametrize("line", ["TOTAL", "Amount", "balance", "Please pay", "Due now"])
    def test_total_keywords(self, line):
        assert is_total_line(line)

    def test_plain_line_is_not_total(self):
        assert not is_total_line("Latte")


class TestDate:
    @pytest.mark.parametrize(
        "token, expected",
        [
            ("01/15/2024", "2024-01-15"),
            ("1/5/24", "2024-01-05"),
            ("03-07-2023", "2023-03-07"),
            ("2024/03/05", "2024-03-05"),
            ("2024-3-5", "2024-03-05"),
        ],
    )
    def test_parse_receipt_date(self, token, expected):
        assert parse_receipt_date(token) == expected

    @pytest.mark.parametrize("token", ["13/45/2024", "02/30/2024", "01/01/1999", "1/2/202"])
    def test_rejects_impossible_or_old_dates(self, token):
        assert parse_receipt_date(token) is None

    def test_keeps_scanning_after_unparseable_date(self):
        lines = ["Ref 99/99/2024", "Date: 02/03/2024 10:41"]
        assert pick_date(lines) == "2024-02-03"

    def test_no_date_is_today(self):
        assert pick_date(["COFFEE SHOP", "Total 4.20"]) == today_iso()


def test_raw_text_is_capped():
    text = "STORE\n" + "x" * 500
    assert len(extract_receipt(text, "a.png").raw_text) == 200


def test_empty_text_still_yields_a_record():
    record = extract_receipt("", "blank.png")
    assert record.vendor == "Receipt from blank"
    assert record.amount == 0.0
    assert record.date == today_iso()
