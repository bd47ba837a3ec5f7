"""Rendering of code records as Liquibase changesets."""

from __future__ import annotations

from typing import Iterable, Optional

from .config import ChangelogSettings
from .extract import CodeRecord

CHANGELOG_HEADER = """<?xml version="1.0" encoding="UTF-8"?>
<databaseChangeLog xmlns="http://www.liquibase.org/xml/ns/dbchangelog"
                   xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance"
                   xsi:schemaLocation="http://www.liquibase.org/xml/ns/dbchangelog
                   https://www.liquibase.org/xml/ns/dbchangelog/dbchangelog-4.4.xsd">
"""

CHANGELOG_FOOTER = "</databaseChangeLog>"

# Ampersand must be replaced first so later entities are not escaped twice.
_XML_REPLACEMENTS = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&apos;"),
)

_CHANGESET_OPEN = """
    <!-- Insert {code_name} Data -->
    <changeSet id="{changeset_id}" author="{author}">"""

_INSERT_ROW = """
        <insert tableName="{table_name}">
            <column name="code_id" valueComputed="(SELECT id FROM {code_table} WHERE {code_name_column} = '{code_name}')"/>
            <column name="code_value" value="{code_value}"/>
            <column name="code_description" value="{code_description}"/>
            <column name="code_value_mm" value="{code_value_mm}"/>
        </insert>"""

_CHANGESET_CLOSE = """
    </changeSet>
"""


def escape_xml(value: Optional[str]) -> str:
    """Escape ``value`` for use in XML text and attribute content."""

    if not value:
        return ""
    text = str(value)
    for char, entity in _XML_REPLACEMENTS:
        text = text.replace(char, entity)
    return text


def comment_text(value: str) -> str:
    """Make ``value`` safe inside an XML comment, which may not contain ``--``."""

    while "--" in value:
        value = value.replace("--", "- -")
    return value


def render_changeset(
    code_name: str,
    records: Iterable[CodeRecord],
    author: Optional[str] = None,
    *,
    settings: Optional[ChangelogSettings] = None,
) -> str:
    """Render one ``<changeSet>`` fragment inserting ``records``."""

    settings = settings or ChangelogSettings()
    if author is None:
        author = settings.author
    escaped_name = escape_xml(code_name)

    parts = [
        _CHANGESET_OPEN.format(
            code_name=comment_text(escaped_name),
            changeset_id=escape_xml(settings.changeset_id(code_name)),
            author=escape_xml(author),
        )
    ]
    for record in records:
        parts.append(
            _INSERT_ROW.format(
                table_name=escape_xml(settings.table_name),
                code_table=escape_xml(settings.code_table),
                code_name_column=escape_xml(settings.code_name_column),
                code_name=escaped_name,
                code_value=escape_xml(record.code_value),
                code_description=escape_xml(record.code_description),
                code_value_mm=escape_xml(record.code_value_mm),
            )
        )
    parts.append(_CHANGESET_CLOSE)
    return "".join(parts)


__all__ = [
    "CHANGELOG_FOOTER",
    "CHANGELOG_HEADER",
    "comment_text",
    "escape_xml",
    "render_changeset",
]
