"""kanjiorder CLI: order, check, show, config and serve commands."""

import json
import logging
import sys
from pathlib import Path
from typing import Annotated, Any

import typer

from kanjiorder.application.config import AppConfig, resolve_config
from kanjiorder.domain.constants import SORT_KEYS
from kanjiorder.domain.errors import CyclicDependencyError, KanjiOrderError

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="kanjiorder: dependency-aware learning order for kanji and radicals.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

config_app = typer.Typer(help="Manage kanjiorder configuration.")
app.add_typer(config_app, name="config")

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)

CorpusArg = Annotated[
    Path | None,
    typer.Argument(help="Corpus file (.yaml, .json, .tsv). Defaults to 'corpus_path' in config."),
]
TermsOpt = Annotated[
    Path | None,
    typer.Option("--terms", help="EDICT2-style term file used to derive frequency ranks."),
]
JsonOpt = Annotated[bool, typer.Option("--json", help="Output as JSON.")]


# ---------------------------------------------------------------------------
# Global callback
# ---------------------------------------------------------------------------


@app.callback()
def main_callback(
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity. Repeat for more detail."
        ),
    ] = 0,
):
    """Global settings for kanjiorder."""
    _raise_log_level(verbose)


def _raise_log_level(verbose: int):
    if verbose >= 2:
        logging.getLogger().setLevel(logging.DEBUG)
    elif verbose == 1:
        logging.getLogger().setLevel(logging.INFO)


def _resolve_with_overrides(**overrides: Any) -> AppConfig:
    try:
        config = resolve_config(overrides)
    except ValueError as e:
        # pydantic ValidationError is a ValueError
        typer.secho(f"Invalid configuration: {e}", fg="red", err=True)
        raise typer.Exit(2) from None
    _raise_log_level(config.verbose)
    return config


def _load_snapshot(config: AppConfig):
    from kanjiorder.application.service import LearningOrderService

    try:
        return LearningOrderService(config).snapshot
    except KanjiOrderError as e:
        typer.secho(f"Error: {e}", fg="red", err=True)
        raise typer.Exit(1) from None


# ---------------------------------------------------------------------------
# Root commands
# ---------------------------------------------------------------------------


@app.command("order")
def order_cmd(
    corpus: CorpusArg = None,
    terms: TermsOpt = None,
    priority: Annotated[
        list[str] | None,
        typer.Option(
            "--priority",
            "-p",
            help=f"Tie-break field, repeatable, highest first. Any of: {', '.join(SORT_KEYS)}.",
        ),
    ] = None,
    up_to: Annotated[
        str | None,
        typer.Option("--up-to", help="Only print the prefix needed to reach this character."),
    ] = None,
    radicals_only: Annotated[
        bool, typer.Option("--radicals-only", help="Only print radicals.")
    ] = False,
    kanji_only: Annotated[bool, typer.Option("--kanji-only", help="Only print kanji.")] = False,
    json_output: JsonOpt = False,
):
    """Print the [bold green]learning order[/bold green] for a corpus."""
    if radicals_only and kanji_only:
        typer.secho("--radicals-only and --kanji-only are exclusive.", fg="red", err=True)
        raise typer.Exit(2)

    config = _resolve_with_overrides(corpus_path=corpus, terms_path=terms, priority=priority)
    snapshot = _load_snapshot(config)
    query = snapshot.query

    allowed = None
    if up_to is not None:
        try:
            allowed = set(query.range_up_to(up_to))
        except KanjiOrderError as e:
            typer.secho(f"Error: {e}", fg="red", err=True)
            raise typer.Exit(1) from None

    def keep(character) -> bool:
        if allowed is not None and character.id not in allowed:
            return False
        if radicals_only and not character.is_radical:
            return False
        if kanji_only and character.is_radical:
            return False
        return True

    rows = list(query.filter(keep))

    if json_output:
        typer.echo(
            json.dumps(
                [
                    {
                        "position": pos,
                        "id": c.id,
                        "kind": c.kind,
                        "components": list(c.components),
                        "frequency": c.frequency,
                        "grade_level": c.grade_level,
                        "stroke_count": c.stroke_count,
                    }
                    for pos, c in rows
                ],
                ensure_ascii=False,
                indent=2,
            )
        )
    else:
        for pos, c in rows:
            typer.echo(f"{pos}\t{c.id}\t{c.kind}\t{c.meaning}".rstrip())


@app.command("check")
def check_cmd(
    corpus: CorpusArg = None,
    json_output: JsonOpt = False,
):
    """Check corpus health: duplicates, missing refs, cycles, isolated characters."""
    from kanjiorder.application.graph_builder import (
        find_connected_components,
        find_isolated_nodes,
    )
    from kanjiorder.application.service import LearningOrderService

    config = _resolve_with_overrides(corpus_path=corpus)

    try:
        snapshot = LearningOrderService(config).snapshot
    except KanjiOrderError as e:
        unresolved = sorted(e.unresolved) if isinstance(e, CyclicDependencyError) else []
        if json_output:
            typer.echo(
                json.dumps(
                    {"ok": False, "error": str(e), "unresolved": unresolved},
                    ensure_ascii=False,
                    indent=2,
                )
            )
        else:
            typer.secho(f"Error: {e}", fg="red")
        raise typer.Exit(1) from None

    graph = snapshot.graph
    isolated = find_isolated_nodes(graph)
    components = find_connected_components(graph)
    roots = graph.roots()
    radicals = snapshot.corpus.radicals

    if json_output:
        typer.echo(
            json.dumps(
                {
                    "ok": True,
                    "nodes": len(graph),
                    "edges": graph.edge_count,
                    "radicals": len(radicals),
                    "roots": len(roots),
                    "components": len(components),
                    "isolated": isolated,
                },
                ensure_ascii=False,
                indent=2,
            )
        )
        return

    typer.echo(
        f"Nodes: {len(graph)}  Edges: {graph.edge_count}  Radicals: {len(radicals)}"
        f"  Components: {len(components)}  Roots: {len(roots)}"
    )
    typer.secho("Cycles: 0", fg="green")
    if isolated:
        typer.secho(f"Isolated (no components, no dependents): {len(isolated)}", fg="yellow")
        typer.echo(f"  {''.join(isolated)}")
    else:
        typer.secho("Isolated: 0", fg="green")


@app.command("show")
def show_cmd(
    char_id: Annotated[str, typer.Argument(help="Character to describe.")],
    corpus: CorpusArg = None,
    terms: TermsOpt = None,
    json_output: JsonOpt = False,
):
    """Describe one character: position, components and dependents."""
    config = _resolve_with_overrides(corpus_path=corpus, terms_path=terms)
    snapshot = _load_snapshot(config)

    try:
        character = snapshot.graph.node(char_id)
        position = snapshot.query.index_of(char_id)
    except KanjiOrderError as e:
        typer.secho(f"Error: {e}", fg="red", err=True)
        raise typer.Exit(1) from None

    graph = snapshot.graph
    info = {
        "id": character.id,
        "kind": character.kind,
        "position": position,
        "meaning": character.meaning,
        "readings": list(character.readings),
        "components": graph.get_prerequisites(char_id),
        "dependents": graph.get_dependents(char_id),
        "ancestor_count": len(graph.ancestors(char_id)),
        "descendant_count": len(graph.descendants(char_id)),
    }

    if json_output:
        typer.echo(json.dumps(info, ensure_ascii=False, indent=2))
        return

    typer.echo(f"{character.id}  ({character.kind}, position {position})")
    if character.meaning:
        typer.echo(f"  Meaning: {character.meaning}")
    if character.readings:
        typer.echo(f"  Readings: {'、'.join(character.readings)}")
    typer.echo(f"  Components: {''.join(info['components']) or '-'}")
    typer.echo(f"  Dependents: {''.join(info['dependents']) or '-'}")
    typer.echo(
        f"  Ancestors: {info['ancestor_count']}  Descendants: {info['descendant_count']}"
    )


@app.command("serve")
def serve_cmd(
    corpus: CorpusArg = None,
    terms: TermsOpt = None,
    host: Annotated[str | None, typer.Option(help="Host to bind the server to.")] = None,
    port: Annotated[int | None, typer.Option(help="Port to bind the server to.")] = None,
):
    """Serve the learning order over HTTP."""
    import uvicorn

    from kanjiorder.server import create_app

    config = _resolve_with_overrides(
        corpus_path=corpus, terms_path=terms, host=host, port=port
    )
    uvicorn.run(create_app(config), host=config.host, port=config.port)


# ---------------------------------------------------------------------------
# Config subgroup
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show():
    """Display final resolved configuration."""
    config = resolve_config()
    d = {k: str(v) if isinstance(v, Path) else v for k, v in config.model_dump().items()}
    typer.echo(json.dumps(d, indent=2))
