"""Command-line interface for bayes-filter.

Provides ``vocab``, ``classify`` and ``evaluate`` commands with rich
terminal output using the ``click`` and ``rich`` libraries. Texts are
split on whitespace; nothing is read from or written to disk.

Usage::

    bayes-filter vocab "love my dalmation" "stupid garbage"
    bayes-filter classify -d "love my dalmation" -l 0 -d "stupid garbage" -l 1 "stupid dog"
    bayes-filter evaluate -d "..." -l 0 -d "..." -l 1 --folds 2
"""

from __future__ import annotations

import json
import sys

import click
from dotenv import load_dotenv
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .bayes import NaiveBayesFilter
from .config import Settings, configure_logging
from .exceptions import BayesFilterError
from .models import ClassificationResult, Label
from .vocabulary import build_vocabulary

console = Console()


def _tokens(text: str) -> list[str]:
    return text.split()


def _get_label_style(label: Label) -> str:
    """Return a rich style string for a label."""
    return {
        Label.SENSITIVE: "bold red",
        Label.NORMAL: "green",
    }.get(label, "")


def _load_settings() -> Settings:
    load_dotenv()
    try:
        settings = Settings.from_env()
    except BayesFilterError as e:
        console.print(f"[bold red]Error:[/] {e}")
        sys.exit(1)
    configure_logging(settings.log_level)
    return settings


def _training_set(docs: tuple[str, ...], labels: tuple[int, ...]) -> tuple[list[list[str]], list[int]]:
    if len(docs) != len(labels):
        raise click.UsageError(
            f"got {len(docs)} --doc values but {len(labels)} --label values"
        )
    return [_tokens(d) for d in docs], list(labels)


_doc_option = click.option(
    "--doc", "-d", "docs", multiple=True, required=True,
    help="Training document (repeatable, paired with --label).",
)
_label_option = click.option(
    "--label", "-l", "labels", multiple=True, required=True,
    type=click.IntRange(0, 1),
    help="Label for the matching --doc: 0 normal, 1 sensitive.",
)


@click.group()
@click.version_option(package_name="bayes-filter")
def main() -> None:
    """Bayes Filter: binary Naive Bayes text classification.

    Train on labelled documents and flag sensitive text.
    """
    pass


@main.command()
@click.argument("texts", nargs=-1, required=True)
def vocab(texts: tuple[str, ...]) -> None:
    """Print the sorted vocabulary of the given texts.

    Example: bayes-filter vocab "love my dalmation" "stupid garbage"
    """
    for token in build_vocabulary(*(_tokens(t) for t in texts)):
        click.echo(token)


@main.command()
@_doc_option
@_label_option
@click.argument("queries", nargs=-1, required=True)
@click.option("--output", "-o", type=click.Choice(["rich", "json"]), default="rich",
              help="Output format.")
def classify(docs: tuple[str, ...], labels: tuple[int, ...],
             queries: tuple[str, ...], output: str) -> None:
    """Train on --doc/--label pairs, then classify each QUERY.

    Example: bayes-filter classify -d "love my dalmation" -l 0 -d "stupid garbage" -l 1 "stupid dog"
    """
    settings = _load_settings()
    documents, label_list = _training_set(docs, labels)

    nb = NaiveBayesFilter(settings)
    try:
        nb.fit(documents, label_list)
        results = nb.classify_batch([_tokens(q) for q in queries])
    except BayesFilterError as e:
        console.print(f"[bold red]Error:[/] {e}")
        sys.exit(1)

    if output == "json":
        click.echo(json.dumps(
            [{"text": q, **r.to_dict()} for q, r in zip(queries, results)],
            indent=2,
            allow_nan=False,
        ))
    else:
        _render_results(queries, results, len(nb.vocabulary))


@main.command()
@_doc_option
@_label_option
@click.option("--folds", "-k", type=click.IntRange(min=2), default=None,
              help="Number of folds (default from BAYES_FILTER_CV_FOLDS).")
@click.option("--seed", type=int, default=None, help="Random seed for fold assignment.")
def evaluate(docs: tuple[str, ...], labels: tuple[int, ...],
             folds: int | None, seed: int | None) -> None:
    """Cross-validate the filter on --doc/--label pairs."""
    settings = _load_settings()
    documents, label_list = _training_set(docs, labels)

    nb = NaiveBayesFilter(settings)
    with console.status("[bold blue]Cross-validating...", spinner="dots"):
        try:
            fold_metrics = nb.evaluate(documents, label_list, k=folds, seed=seed)
        except BayesFilterError as e:
            console.print(f"[bold red]Error:[/] {e}")
            sys.exit(1)

    table = Table(title="Cross-validation", show_lines=False)
    table.add_column("Fold", justify="right", width=6)
    table.add_column("Accuracy", justify="right")
    table.add_column("Macro F1", justify="right")
    for i, m in enumerate(fold_metrics, 1):
        table.add_row(str(i), f"{m.accuracy:.2%}", f"{m.macro_f1:.4f}")
    console.print(table)

    mean_acc = sum(m.accuracy for m in fold_metrics) / len(fold_metrics)
    console.print(f"Mean accuracy: [bold]{mean_acc:.2%}[/]")


# ------------------------------------------------------------------
# Rich rendering helpers
# ------------------------------------------------------------------

def _render_results(queries: tuple[str, ...], results: list[ClassificationResult],
                    vocab_size: int) -> None:
    """Render classification results as a rich table."""
    console.print()
    console.print(Panel(
        f"Vocabulary: {vocab_size} tokens | Queries: {len(queries)}",
        title="Bayes Filter",
        border_style="blue",
    ))

    table = Table(show_lines=True)
    table.add_column("#", justify="right", width=4)
    table.add_column("Text", style="white", max_width=60)
    table.add_column("Label", justify="center", width=10)
    table.add_column("Conf.", justify="center", width=7)

    for i, (query, result) in enumerate(zip(queries, results), 1):
        label_text = Text(result.label.name.lower(), style=_get_label_style(result.label))
        table.add_row(str(i), Text(query), label_text, f"{result.confidence:.0%}")

    console.print(table)
    console.print()


if __name__ == "__main__":
    main()
