"""Centralized constants for kanjiorder.

All configuration defaults live here so every layer
imports from a single source of truth.
"""

# ---------- Ordering ----------
SORT_KEYS = ("frequency", "grade_level", "stroke_count")
DEFAULT_PRIORITY = SORT_KEYS

# ---------- Corpus files ----------
YAML_SUFFIXES = (".yaml", ".yml")
JSON_SUFFIXES = (".json",)
TSV_SUFFIXES = (".tsv", ".txt")
TSV_READING_SEPARATOR = "、"
TSV_RADICAL_FLAG = "1"

# ---------- Terms ----------
POPULAR_MARKER = "(P)"

# ---------- Server ----------
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8787

# ---------- Config ----------
# Relative to the home directory, first existing file wins
CONFIG_FILES = (".config/kanjiorder/config.toml", ".kanjiorder.toml")
