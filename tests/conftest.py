import pytest

from kanjiorder.domain.models import Character

FOREST_YAML = """\
木:
  kind: radical
  frequency: 1
  stroke_count: 4
  meaning: tree
  readings: [き, モク]
林:
  components: [木]
  frequency: 5
  stroke_count: 8
  meaning: grove
森:
  components: 木林
  frequency: 10
  stroke_count: 12
  meaning: forest
"""


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Point HOME at a temp dir and drop KANJIORDER_* variables."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    for var in ("CORPUS_PATH", "TERMS_PATH", "PRIORITY", "POPULAR_ONLY", "HOST", "PORT", "VERBOSE"):
        monkeypatch.delenv(f"KANJIORDER_{var}", raising=False)
    return home


@pytest.fixture
def forest():
    """木 -> 林 -> 森, with 森 also using 木 directly."""
    return [
        Character("木", is_radical=True, frequency=1, stroke_count=4, meaning="tree"),
        Character("林", components=("木",), frequency=5, stroke_count=8, meaning="grove"),
        Character("森", components=("木", "林"), frequency=10, stroke_count=12, meaning="forest"),
    ]


@pytest.fixture
def forest_file(tmp_path):
    path = tmp_path / "forest.yaml"
    path.write_text(FOREST_YAML, encoding="utf-8")
    return path
