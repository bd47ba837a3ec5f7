import logging
import xml.etree.ElementTree as ET

import pytest

from codelog.changelog import CHANGELOG_FOOTER, CHANGELOG_HEADER
from codelog.config import ChangelogSettings
from codelog.conversion import convert, convert_workbook
from codelog.errors import DecodeError, NoValidSheetsError

NS = "{http://www.liquibase.org/xml/ns/dbchangelog}"
HEADERS = ["code_value", "code_description", "code_value_mm"]


def _code_sheet(code_name, *rows):
    return [["CodeName", code_name], HEADERS, *rows]


def test_convert_gender_sheet(gender_workbook):
    result = convert(gender_workbook)

    assert result.processed_sheets == ["Gender"]
    assert result.skipped_sheets == []
    assert result.xml.startswith(CHANGELOG_HEADER)
    assert result.xml.endswith(CHANGELOG_FOOTER)

    root = ET.fromstring(result.xml.encode("utf-8"))
    changesets = root.findall(f"{NS}changeSet")
    assert len(changesets) == 1
    assert changesets[0].attrib == {"id": "001_insert_gender_data", "author": "thant htoo aung"}

    inserts = changesets[0].findall(f"{NS}insert")
    assert len(inserts) == 1
    assert inserts[0].attrib["tableName"] == "m_code_value"
    values = {column.attrib["name"]: column.attrib.get("value") for column in inserts[0]}
    assert values["code_value"] == "Male"
    assert values["code_description"] == "Male Gender"
    assert values["code_value_mm"] == "ကျား"


def test_convert_document_layout(gender_workbook):
    result = convert(gender_workbook, "reviewer")

    assert result.xml == (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<databaseChangeLog xmlns="http://www.liquibase.org/xml/ns/dbchangelog"\n'
        '                   xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance"\n'
        '                   xsi:schemaLocation="http://www.liquibase.org/xml/ns/dbchangelog\n'
        '                   https://www.liquibase.org/xml/ns/dbchangelog/dbchangelog-4.4.xsd">\n'
        "\n"
        "    <!-- Insert Gender Data -->\n"
        '    <changeSet id="001_insert_gender_data" author="reviewer">\n'
        '        <insert tableName="m_code_value">\n'
        '            <column name="code_id" valueComputed="(SELECT id FROM m_code WHERE code_name = \'Gender\')"/>\n'
        '            <column name="code_value" value="Male"/>\n'
        '            <column name="code_description" value="Male Gender"/>\n'
        '            <column name="code_value_mm" value="ကျား"/>\n'
        "        </insert>\n"
        "    </changeSet>\n"
        "</databaseChangeLog>"
    )


def test_convert_follows_requested_order(make_workbook):
    raw = make_workbook(
        {
            "A": _code_sheet("Alpha", ["a", "Alpha", "ａ"]),
            "B": _code_sheet("Beta", ["b", "Beta", "ｂ"]),
        }
    )

    result = convert(raw, sheet_names=["B", "A"])

    assert result.processed_sheets == ["B", "A"]
    assert result.xml.index("001_insert_beta_data") < result.xml.index("001_insert_alpha_data")


def test_convert_defaults_to_all_sheets_in_workbook_order(make_workbook):
    raw = make_workbook(
        {
            "Second": _code_sheet("Second", ["2", "two", ""]),
            "First": _code_sheet("First", ["1", "one", ""]),
        }
    )

    assert convert(raw).processed_sheets == ["Second", "First"]


def test_convert_skips_invalid_sheets_without_partial_output(make_workbook, caplog):
    raw = make_workbook(
        {
            "Gender": _code_sheet("Gender", ["Male", "Male Gender", "ကျား"]),
            "Broken": [["CodeName", "Broken"], ["code_value", "code_description"], ["x", "y"]],
            "Empty": _code_sheet("Empty"),
        }
    )

    with caplog.at_level(logging.WARNING, logger="codelog.conversion"):
        result = convert(raw, sheet_names=["Gender", "Missing", "Broken", "Empty"])

    assert result.processed_sheets == ["Gender"]
    assert [name for name, _ in result.skipped_sheets] == ["Missing", "Broken", "Empty"]
    assert "Broken" not in result.xml
    assert result.xml.count("<changeSet ") == 1
    assert "Skipping sheet Missing" in caplog.text


def test_convert_raises_when_no_sheet_is_valid(make_workbook):
    raw = make_workbook(
        {
            "Short": [["CodeName", "Short"]],
            "NoName": [["CodeName"], HEADERS, ["x", "y", "z"]],
        }
    )

    with pytest.raises(NoValidSheetsError) as excinfo:
        convert(raw)

    assert [name for name, _ in excinfo.value.skipped_sheets] == ["Short", "NoName"]


def test_convert_rejects_undecodable_bytes():
    with pytest.raises(DecodeError):
        convert(b"not a workbook")


def test_convert_warns_about_colliding_changeset_ids(make_workbook, caplog):
    raw = make_workbook(
        {
            "Gender": _code_sheet("Gender", ["M", "Male", ""]),
            "GenderCopy": _code_sheet("GENDER", ["F", "Female", ""]),
        }
    )

    with caplog.at_level(logging.WARNING, logger="codelog.conversion"):
        result = convert(raw)

    assert result.processed_sheets == ["Gender", "GenderCopy"]
    assert result.xml.count('id="001_insert_gender_data"') == 2
    assert "reuses changeset id" in caplog.text


def test_convert_workbook_uses_settings_author():
    workbook = {"Gender": (("CodeName", "Gender"), tuple(HEADERS), ("Male", "Male Gender", ""))}
    settings = ChangelogSettings(author="config author")

    default_author = convert_workbook(workbook, settings=settings)
    explicit_author = convert_workbook(workbook, "cli author", settings=settings)

    assert 'author="config author"' in default_author.xml
    assert 'author="cli author"' in explicit_author.xml


def test_convert_reads_legacy_xls(make_xls_workbook, gender_rows):
    result = convert(make_xls_workbook({"Gender": gender_rows}))

    assert result.processed_sheets == ["Gender"]
    assert 'value="ကျား"' in result.xml


def test_convert_output_parses_with_hyphenated_code_name(make_workbook):
    raw = make_workbook({"Dashes": _code_sheet("A--B", ["x", "y", "z"])})

    result = convert(raw)

    root = ET.fromstring(result.xml.encode("utf-8"))
    assert root.find(f"{NS}changeSet").attrib["id"] == "001_insert_a--b_data"


def test_convert_keeps_explicit_empty_author(gender_workbook):
    result = convert(gender_workbook, "")

    assert 'author=""' in result.xml
