"""
Learning order service: application layer orchestrator.

Loads the corpus, builds the graph and computes the order once, then serves
the cached snapshot until `reload` is called.
"""

import logging
import threading
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from kanjiorder.application.config import AppConfig
from kanjiorder.application.corpus import Corpus
from kanjiorder.application.frequency import apply_frequency_ranks, frequency_ranks
from kanjiorder.application.graph_builder import build_graph
from kanjiorder.application.order_query import OrderQuery
from kanjiorder.application.ordering import compute_learning_order
from kanjiorder.domain.constants import DEFAULT_PRIORITY
from kanjiorder.domain.errors import CorpusFormatError
from kanjiorder.domain.graph import DependencyGraph
from kanjiorder.domain.models import Character
from kanjiorder.infrastructure.corpus_files import load_corpus_file
from kanjiorder.infrastructure.terms import load_terms

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OrderSnapshot:
    """Everything computed from one corpus. Never mutated after construction."""

    corpus: Corpus
    graph: DependencyGraph
    query: OrderQuery


def build_snapshot(
    characters: Iterable[Character],
    priority: Sequence[str] = DEFAULT_PRIORITY,
) -> OrderSnapshot:
    """Run the whole pipeline: corpus, graph, order."""
    corpus = Corpus.load(characters)
    graph = build_graph(corpus)
    order = compute_learning_order(graph, priority)
    return OrderSnapshot(corpus=corpus, graph=graph, query=OrderQuery(order, corpus))


class LearningOrderService:
    """
    Owns the current snapshot for a configured corpus.

    Readers that already hold a snapshot keep it after `reload`; only new
    calls to `snapshot` see the rebuilt one.
    """

    def __init__(self, config: AppConfig):
        self._config = config
        self._snapshot: OrderSnapshot | None = None
        self._lock = threading.Lock()

    @property
    def config(self) -> AppConfig:
        return self._config

    def load_characters(self) -> list[Character]:
        """Read the corpus file and fill in frequency ranks from terms, if configured."""
        if self._config.corpus_path is None:
            raise CorpusFormatError("no corpus configured (set corpus_path or pass a path)")

        characters = load_corpus_file(self._config.corpus_path)

        if self._config.terms_path is not None:
            terms = load_terms(self._config.terms_path)
            ranks = frequency_ranks(
                terms,
                [c.id for c in characters],
                popular_only=self._config.popular_only,
            )
            characters = apply_frequency_ranks(characters, ranks)
            logger.info(f"Ranked {len(ranks)}/{len(characters)} characters by term usage")

        return characters

    @property
    def snapshot(self) -> OrderSnapshot:
        with self._lock:
            if self._snapshot is None:
                self._snapshot = self._build()
            return self._snapshot

    def reload(self) -> OrderSnapshot:
        """Discard the cached snapshot and rebuild from scratch."""
        snapshot = self._build()
        with self._lock:
            self._snapshot = snapshot
        return snapshot

    def _build(self) -> OrderSnapshot:
        characters = self.load_characters()
        snapshot = build_snapshot(characters, self._config.priority)
        logger.info(
            f"Learning order ready: {len(snapshot.query)} characters, "
            f"{snapshot.graph.edge_count} edges"
        )
        return snapshot
