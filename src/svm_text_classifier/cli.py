"""Command-line interface for svm-text-classifier.

Provides ``build`` and ``classify`` commands with rich terminal output
using the ``click`` and ``rich`` libraries.

Usage::

    svm-text-classifier build corpus/ --index-dir index/ --seed 7
    svm-text-classifier classify "rain expected tomorrow" --index-dir index/
    cat message.txt | svm-text-classifier classify --index-dir index/ --output json
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .builder import IndexBuilder
from .classifier import TextClassifier
from .config import BuildConfig, ClassifyConfig, LoggingConfig, TextSource, ToolConfig
from .exceptions import SvmTextError
from .models import BuildReport, ClassificationResult

logger = logging.getLogger(__name__)

console = Console()
err_console = Console(stderr=True)


def _fail(stage: str, exc: Exception) -> None:
    logger.error("%s failed: %s", stage, exc)
    err_console.print(f"[bold red]Error during {stage}:[/] {exc}")
    sys.exit(1)


@click.group()
@click.version_option(package_name="svm-text-classifier")
def main() -> None:
    """Bag-of-words text classification with LIBSVM.

    Build a vocabulary and scaled train/test files from a labeled
    corpus, then classify new text into ranked labels.
    """
    pass


@main.command()
@click.argument("corpus_dir", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--index-dir", "-i", type=click.Path(file_okay=False, path_type=Path),
              required=True, help="Directory to write the index to.")
@click.option("--train-ratio", type=click.FloatRange(0.0, 1.0, min_open=True), default=0.8,
              show_default=True, help="Probability of routing a document to train.")
@click.option("--seed", type=int, default=None, help="Seed for the train/test draw.")
@click.option("--train/--no-train", "train_model", default=True, show_default=True,
              help="Train a model on the scaled train split.")
@click.option("--output", "-o", type=click.Choice(["rich", "json"]), default="rich",
              help="Output format.")
@click.option("--verbose", "-v", count=True, help="Increase log verbosity (-v, -vv).")
def build(
    corpus_dir: Path,
    index_dir: Path,
    train_ratio: float,
    seed: int | None,
    train_model: bool,
    output: str,
    verbose: int,
) -> None:
    """Build an index from a corpus with one sub-directory per label.

    Example: svm-text-classifier build corpus/ --index-dir index/
    """
    log_config = LoggingConfig(verbosity=verbose)
    log_config.configure()

    try:
        config = BuildConfig(
            corpus_dir=corpus_dir,
            index_dir=index_dir,
            train_ratio=train_ratio,
            seed=seed,
            train_model=train_model,
            tools=ToolConfig.from_env(),
            log_config=log_config,
        )
        with console.status("[bold blue]Building index...", spinner="dots"):
            report = IndexBuilder(config).build()
    except SvmTextError as e:
        _fail("build", e)

    if output == "json":
        click.echo(json.dumps(report.to_dict(), indent=2))
    else:
        _render_build_report(report)


@main.command()
@click.argument("text", required=False)
@click.option("--index-dir", "-i", type=click.Path(exists=True, file_okay=False, path_type=Path),
              required=True, help="Index directory produced by 'build'.")
@click.option("--top", "-n", type=click.IntRange(min=1), default=None,
              help="Only show the N most probable labels.")
@click.option("--output", "-o", type=click.Choice(["rich", "json"]), default="rich",
              help="Output format.")
@click.option("--verbose", "-v", count=True, help="Increase log verbosity (-v, -vv).")
def classify(text: str | None, index_dir: Path, top: int | None, output: str, verbose: int) -> None:
    """Classify TEXT, or standard input when TEXT is omitted or '-'.

    Example: echo "storm warning" | svm-text-classifier classify -i index/
    """
    log_config = LoggingConfig(verbosity=verbose)
    log_config.configure()
    source = TextSource.STDIN if text in (None, "-") else TextSource.INLINE

    try:
        config = ClassifyConfig(
            index_dir=index_dir,
            text_source=source,
            top=top,
            tools=ToolConfig.from_env(),
            log_config=log_config,
        )
        classifier = TextClassifier.from_config(config)
    except SvmTextError as e:
        _fail("index load", e)

    payload: bytes | str
    if config.text_source is TextSource.STDIN:
        with click.open_file("-", "rb") as stream:
            payload = stream.read()
    else:
        payload = text or ""

    try:
        result = classifier.classify(payload).limit(config.top)
    except SvmTextError as e:
        _fail("classification", e)

    if output == "json":
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        _render_classification(result)


# ------------------------------------------------------------------
# Rich rendering helpers
# ------------------------------------------------------------------

def _render_build_report(report: BuildReport) -> None:
    """Render a BuildReport with rich formatting."""
    console.print()
    console.print(Panel(
        f"[bold]{report.index_dir}[/]\n"
        f"Documents: {report.document_count} | "
        f"Vocabulary: {report.vocabulary_size} | "
        f"Labels: {len(report.labels)} | "
        f"Train: {report.train_count} | Test: {report.test_count}",
        title="Index Built",
        border_style="blue",
    ))

    table = Table(title="Labels", show_lines=False)
    table.add_column("Class id", justify="right", width=8)
    table.add_column("Label", style="cyan")
    table.add_column("Documents", justify="right")
    for class_id, label in enumerate(report.labels, 1):
        table.add_row(str(class_id), label, str(report.label_counts.get(label, 0)))
    console.print(table)

    if report.empty_documents:
        console.print(f"[yellow]Skipped {report.empty_documents} document(s) with no tokens.[/]")
    if not report.model_trained:
        console.print("[dim]Model training skipped (--no-train).[/]")
    console.print()


def _render_classification(result: ClassificationResult) -> None:
    """Render ranked predictions as a rich table."""
    if result.is_empty:
        console.print("[yellow]No known words in the input; nothing to classify.[/]")
        return

    table = Table(title="Predictions", show_lines=False)
    table.add_column("#", justify="right", width=4)
    table.add_column("Label", style="cyan")
    table.add_column("Probability", justify="right")

    for i, prediction in enumerate(result.predictions, 1):
        table.add_row(
            str(i),
            prediction.label,
            f"{prediction.probability:.2%}",
            style="bold green" if i == 1 else None,
        )

    console.print(table)


if __name__ == "__main__":
    main()
