"""Tests for the raw-text structural region scanner."""

from templatewriter import scanner
from tests.conftest import paragraph

ROW_A = '<w:tr w:rsidR="001"><w:trPr><w:cantSplit/></w:trPr><w:tc>A</w:tc></w:tr>'
ROW_B = "<w:tr><w:tc>B ${item}</w:tc></w:tr>"
TABLE = "<w:tbl>" + ROW_A + ROW_B + "</w:tbl>"


def test_find_row_start_returns_nearest_open_tag():
    offset = TABLE.index("${item}")

    start = scanner.find_row_start(TABLE, offset)

    assert start == TABLE.index("<w:tr><w:tc>B")


def test_find_row_start_skips_row_properties():
    xml = "<w:tbl><w:tr w:rsidR=\"1\"><w:trPr/><w:tc>${x}</w:tc></w:tr></w:tbl>"

    start = scanner.find_row_start(xml, xml.index("${x}"))

    assert xml[start:].startswith('<w:tr w:rsidR="1">')


def test_find_row_start_without_row_returns_minus_one():
    xml = paragraph("${x}")

    assert scanner.find_row_start(xml, xml.index("${x}")) == -1


def test_find_row_end_points_past_close_tag():
    offset = TABLE.index("${item}")

    end = scanner.find_row_end(TABLE, offset)

    assert TABLE[:end].endswith("${item}</w:tc></w:tr>")
    assert scanner.find_row_end(TABLE, end) == -1


def test_find_next_row_stops_at_table_boundary():
    xml = "<w:tbl>" + ROW_A + "</w:tbl><w:tbl>" + ROW_B + "</w:tbl>"
    first_end = scanner.find_row_end(xml, 0)

    assert scanner.find_next_row(xml, first_end) is None


def test_find_next_row_returns_following_row():
    first_end = scanner.find_row_end(TABLE, 0)

    start, end = scanner.find_next_row(TABLE, first_end)

    assert TABLE[start:end] == ROW_B


def test_vertical_merge_markers():
    assert scanner.starts_vertical_merge('<w:tcPr><w:vMerge w:val="restart"/></w:tcPr>')
    assert not scanner.starts_vertical_merge("<w:tcPr><w:vMerge/></w:tcPr>")
    assert scanner.continues_vertical_merge("<w:tcPr><w:vMerge/></w:tcPr>")
    assert scanner.continues_vertical_merge('<w:vMerge w:val="continue" />')
    assert not scanner.continues_vertical_merge('<w:vMerge w:val="restart"/>')
    assert not scanner.continues_vertical_merge("<w:tcPr><w:gridSpan w:val=\"2\"/></w:tcPr>")


def test_block_regex_captures_inner_content():
    inner = paragraph("Inner one") + paragraph("Inner two")
    xml = paragraph("Before") + paragraph("${foo}") + inner + paragraph("${/foo}") + paragraph("After")

    match = scanner.block_regex("foo").search(xml)

    assert match.group(1) == inner
    assert match.group(0) == paragraph("${foo}") + inner + paragraph("${/foo}")


def test_block_regex_accepts_paragraphs_without_attributes():
    xml = "<w:p><w:r><w:t>${foo}</w:t></w:r></w:p><w:p>x</w:p><w:p><w:r><w:t>${/foo}</w:t></w:r></w:p>"

    match = scanner.block_regex("foo").search(xml)

    assert match.group(1) == "<w:p>x</w:p>"


def test_block_regex_does_not_match_paragraph_properties():
    xml = "<w:pPr>${foo}</w:pPr>" + paragraph("x") + paragraph("${/foo}")

    assert scanner.block_regex("foo").search(xml) is None


def test_tag_regex_escapes_name():
    regex = scanner.tag_regex("a.b")

    assert regex.sub("", "${a.b} ${axb}") == " ${axb}"
