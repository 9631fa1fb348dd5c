"""
Corpus file readers.

Supported layouts:

- YAML / JSON mapping of glyph to record::

      木: {kind: radical, frequency: 1, stroke_count: 4}
      林: {components: [木], frequency: 5}

- YAML / JSON list under ``characters``, each record carrying an ``id``.
- Tab-separated lines: glyph, components, stroke count, readings,
  meaning, radical flag, note.
"""

import json
import logging
import re
from pathlib import Path
from typing import Any, Literal

import yaml  # type: ignore
import yaml.constructor
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from kanjiorder.domain.constants import (
    JSON_SUFFIXES,
    TSV_RADICAL_FLAG,
    TSV_READING_SEPARATOR,
    TSV_SUFFIXES,
    YAML_SUFFIXES,
)
from kanjiorder.domain.errors import CorpusFormatError, DuplicateIdError
from kanjiorder.domain.models import Character

logger = logging.getLogger(__name__)

# Indentation only; tabs inside scalars are content
LEADING_WS_RE = re.compile(r"^[ \t]+", re.MULTILINE)


class UniqueKeyLoader(yaml.SafeLoader):
    """YAML loader that forbids duplicate keys and records line numbers.

    A duplicate key in the top-level mapping is a duplicate character id.
    """

    def construct_document(self, node):
        self._root_node = node
        return super().construct_document(node)

    def construct_mapping(self, node, deep=False):
        seen = set()
        for key_node, _ in node.value:
            key = self.construct_object(key_node, deep=deep)
            if key in seen:
                if node is getattr(self, "_root_node", None):
                    raise DuplicateIdError(str(key))
                raise yaml.constructor.ConstructorError(
                    None, None, f"found duplicate key '{key}'", key_node.start_mark
                )
            seen.add(key)

        result = super().construct_mapping(node, deep)
        if isinstance(result, dict) and node is not getattr(self, "_root_node", None):
            result["__line__"] = node.start_mark.line + 1
        return result


class CharacterRecord(BaseModel):
    """One character as written in a YAML or JSON corpus file."""

    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    kind: Literal["radical", "kanji"] | None = None
    radical: bool | None = None
    components: list[str] = Field(default_factory=list)
    frequency: int | None = None
    grade_level: int | None = Field(
        default=None, validation_alias=AliasChoices("grade_level", "gradeLevel", "grade")
    )
    stroke_count: int | None = Field(
        default=None, validation_alias=AliasChoices("stroke_count", "strokeCount", "strokes")
    )
    meaning: str = ""
    readings: list[str] = Field(default_factory=list)
    note: str | None = None

    @field_validator("components", mode="before")
    @classmethod
    def split_components(cls, v: Any) -> Any:
        # "木林" is shorthand for ["木", "林"]
        if isinstance(v, str):
            return [ch for ch in v if not ch.isspace()]
        return v or []

    @field_validator("readings", mode="before")
    @classmethod
    def split_readings(cls, v: Any) -> Any:
        if isinstance(v, str):
            return [r.strip() for r in v.split(TSV_READING_SEPARATOR) if r.strip()]
        return v or []

    def to_character(self, char_id: str) -> Character:
        is_radical = self.radical if self.radical is not None else self.kind == "radical"
        return Character(
            id=char_id,
            is_radical=is_radical,
            components=tuple(self.components),
            frequency=self.frequency,
            grade_level=self.grade_level,
            stroke_count=self.stroke_count,
            meaning=self.meaning,
            readings=tuple(self.readings),
            note=self.note,
        )


def _record(char_id: str | None, raw: Any, line: int | None) -> Character:
    where = f" (line {line})" if line else ""
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise CorpusFormatError(f"record for '{char_id}'{where} must be a mapping")
    try:
        record = CharacterRecord.model_validate(raw)
    except ValidationError as e:
        raise CorpusFormatError(f"invalid record for '{char_id}'{where}: {e}") from e

    char_id = char_id or record.id
    if not char_id:
        raise CorpusFormatError(f"record{where} has no id")
    return record.to_character(char_id)


class DuplicateKeyTracker:
    """`object_pairs_hook` for json.loads that remembers repeated keys.

    JSON objects are built innermost first, so whether a duplicate sits in
    the top-level mapping is only known once the whole document is parsed.
    """

    def __init__(self):
        self.duplicates: list[tuple[dict, str]] = []

    def __call__(self, pairs: list[tuple[str, Any]]) -> dict:
        obj: dict = {}
        for key, value in pairs:
            if key in obj:
                self.duplicates.append((obj, key))
            obj[key] = value
        return obj

    def check(self, root: Any):
        for obj, key in self.duplicates:
            if obj is root:
                raise DuplicateIdError(key)
        if self.duplicates:
            raise CorpusFormatError(f"found duplicate key '{self.duplicates[0][1]}'")


def parse_structured(raw: str) -> list[Character]:
    """Parse YAML corpus text."""
    # Tabs are not valid YAML indentation
    raw = LEADING_WS_RE.sub(lambda m: m.group().replace("\t", "  "), raw)

    try:
        data = yaml.load(raw, Loader=UniqueKeyLoader) or {}
    except yaml.YAMLError as e:
        raise CorpusFormatError(f"unreadable corpus: {e}") from e

    return _characters_from(data)


def parse_json(raw: str) -> list[Character]:
    """Parse JSON corpus text. Same layouts as YAML, without line numbers."""
    tracker = DuplicateKeyTracker()
    try:
        data = json.loads(raw, object_pairs_hook=tracker)
    except json.JSONDecodeError as e:
        raise CorpusFormatError(f"unreadable corpus: {e}") from e

    tracker.check(data)
    return _characters_from(data)


def _characters_from(data: Any) -> list[Character]:
    if not isinstance(data, dict):
        raise CorpusFormatError("corpus must be a mapping of characters")

    if "characters" in data and isinstance(data["characters"], list):
        characters = []
        for item in data["characters"]:
            line = item.get("__line__") if isinstance(item, dict) else None
            characters.append(_record(None, item, line))
        return characters

    return [
        _record(str(key), value, value.get("__line__") if isinstance(value, dict) else None)
        for key, value in data.items()
    ]


def _optional_int(value: str, line_no: int) -> int | None:
    value = value.strip()
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        raise CorpusFormatError(f"line {line_no}: stroke count '{value}' is not a number") from None


def parse_tsv(raw: str) -> list[Character]:
    """Parse the tab-separated corpus layout."""
    characters: list[Character] = []
    for line_no, line in enumerate(raw.split("\n"), start=1):
        if not line.strip():
            continue
        fields = line.rstrip("\r").split("\t")
        if len(fields) < 6:
            raise CorpusFormatError(
                f"line {line_no}: expected at least 6 tab-separated fields, got {len(fields)}"
            )

        glyph = fields[0].strip()
        if not glyph:
            raise CorpusFormatError(f"line {line_no}: missing character")

        note = fields[6].strip() if len(fields) > 6 else ""
        characters.append(
            Character(
                id=glyph,
                is_radical=fields[5].strip() == TSV_RADICAL_FLAG,
                components=tuple(ch for ch in fields[1] if not ch.isspace()),
                stroke_count=_optional_int(fields[2], line_no),
                readings=tuple(
                    r.strip() for r in fields[3].split(TSV_READING_SEPARATOR) if r.strip()
                ),
                meaning=fields[4].strip(),
                note=note or None,
            )
        )
    return characters


def load_corpus_file(path: Path) -> list[Character]:
    """
    Read a corpus file, choosing the layout from its suffix.

    Raises:
        CorpusFormatError: Unknown suffix, unreadable file or malformed record.
        DuplicateIdError: The same glyph is a key twice in a YAML/JSON mapping.
    """
    suffix = path.suffix.lower()
    try:
        raw = path.read_text(encoding="utf-8").lstrip("\ufeff")
    except OSError as e:
        raise CorpusFormatError(f"cannot read corpus {path}: {e}") from e

    if suffix in YAML_SUFFIXES:
        characters = parse_structured(raw)
    elif suffix in JSON_SUFFIXES:
        characters = parse_json(raw)
    elif suffix in TSV_SUFFIXES:
        characters = parse_tsv(raw)
    else:
        raise CorpusFormatError(f"unsupported corpus format '{suffix}' for {path}")

    logger.info(f"Read {len(characters)} characters from {path}")
    return characters
