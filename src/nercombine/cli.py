"""NER combiner CLI."""

import logging
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from nercombine.config import settings
from nercombine.diagnostics import DiagnosticSink
from nercombine.exceptions import NERCombinerError
from nercombine.models import Document
from nercombine.pipeline import AnnotationPipeline, NERCombinerAnnotator

app = typer.Typer(
    name="nercombine",
    help="Named-entity tagging with a cascade of classifiers",
    add_completion=False,
)
console = Console()
err_console = Console(stderr=True)


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def _build_annotator(
    models: Optional[list[str]],
    verbose: bool,
    numeric: bool,
    time: bool,
    workers: int = settings.max_workers,
    ignore_case: bool = settings.ner_rules_ignore_case,
) -> NERCombinerAnnotator:
    paths = models if models else settings.model_paths
    return NERCombinerAnnotator.from_paths(
        *paths,
        verbose=verbose,
        apply_numeric_classifiers=numeric,
        use_time_normalization=time,
        max_workers=workers,
        ignore_case=ignore_case,
        diagnostics=DiagnosticSink(err_console),
    )


@app.command()
def annotate(
    input_path: Path = typer.Argument(..., help="Tokenized document JSON"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write tagged JSON here instead of stdout"),
    model: Optional[list[str]] = typer.Option(None, "--model", "-m", help="Classifier model path, repeat in priority order"),
    verbose: bool = typer.Option(settings.ner_verbose, "--verbose", "-v", help="Dump tagging diagnostics to stderr"),
    numeric: bool = typer.Option(settings.ner_apply_numeric_classifiers, "--numeric/--no-numeric", help="Apply the numeric classifier"),
    time: bool = typer.Option(settings.ner_use_time_normalization, "--time/--no-time", help="Apply the time expression classifier"),
    workers: int = typer.Option(settings.max_workers, "--workers", "-w", help="Threads for running classifiers concurrently"),
    ignore_case: bool = typer.Option(settings.ner_rules_ignore_case, "--ignore-case", help="Match rule mappings regardless of case"),
) -> None:
    """Tag a pre-tokenized document."""
    _setup_logging(settings.log_level)

    if not input_path.exists():
        err_console.print(f"[red]Input not found:[/red] {input_path}")
        raise typer.Exit(code=1)

    try:
        document = Document.model_validate_json(input_path.read_text(encoding="utf-8"))
    except ValidationError as e:
        err_console.print(f"[red]Invalid document:[/red] {e}")
        raise typer.Exit(code=1)

    try:
        annotator = _build_annotator(model, verbose, numeric, time, workers, ignore_case)
        AnnotationPipeline([annotator]).annotate(document)
    except (NERCombinerError, ValueError) as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)

    payload = document.model_dump_json(indent=2)
    if output is None:
        typer.echo(payload)
    else:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(payload, encoding="utf-8")
        err_console.print(f"[green]Wrote[/green] {output}")


@app.command()
def requirements(
    model: Optional[list[str]] = typer.Option(None, "--model", "-m", help="Classifier model path, repeat in priority order"),
    numeric: bool = typer.Option(settings.ner_apply_numeric_classifiers, "--numeric/--no-numeric"),
    time: bool = typer.Option(settings.ner_use_time_normalization, "--time/--no-time"),
) -> None:
    """Show the capabilities the configured stage requires and provides."""
    try:
        annotator = _build_annotator(model, False, numeric, time)
    except (NERCombinerError, ValueError) as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)

    table = Table(title="NER combiner contract")
    table.add_column("Classifiers")
    table.add_column("Requires")
    table.add_column("Provides")
    table.add_row(
        ", ".join(c.name for c in annotator.combiner.classifiers),
        ", ".join(sorted(r.value for r in annotator.required_capabilities())),
        ", ".join(sorted(r.value for r in annotator.provided_capabilities())),
    )
    console.print(table)


if __name__ == "__main__":
    app()
