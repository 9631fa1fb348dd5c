"""kanjiorder: dependency-aware learning order for kanji and radicals."""

from kanjiorder.consts import VERSION

__version__ = VERSION
