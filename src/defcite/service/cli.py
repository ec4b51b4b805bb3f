"""Command-line entry point for running the pipeline on local files.

Usage:
    defcite extract lecture.pdf "machine learning"
    defcite process lecture.pdf "machine learning" --author "Smith, J." --year 2020
    defcite process notes.txt algoritma --author "Lee, A. & Kim, B." --year 2019 --format MLA --json
    defcite process notes.txt algoritma --author Lee --year 2019 --offline
"""

from __future__ import annotations

import json
import mimetypes
import sys
from dataclasses import asdict
from pathlib import Path

import click

from defcite.config import (
    DEFAULT_SENTENCE_COUNT,
    CitationFormat,
    ProcessingOptions,
    Settings,
    validate_request,
)
from defcite.documents import extract_text
from defcite.documents.text_extraction import DOCX, PDF, PLAIN_TEXT
from defcite.errors import DefciteError
from defcite.extraction import classify_confidence, extract_definitions
from defcite.shared.llm import OfflineGenerator, TextGenerator, get_provider
from defcite.shared.logger import PipelineLogger
from defcite.workflow import process_document

_SUFFIX_TYPES = {".pdf": PDF, ".docx": DOCX, ".txt": PLAIN_TEXT}


def _read_document(path: Path) -> str:
    mime_type = _SUFFIX_TYPES.get(path.suffix.lower()) or mimetypes.guess_type(path.name)[0] or ""
    return extract_text(path.read_bytes(), mime_type)


def _preview(text: str, width: int = 70) -> str:
    text = " ".join(text.split())
    return text if len(text) <= width else text[: width - 3] + "..."


@click.group()
@click.option("--log-file", type=click.Path(dir_okay=False), default=None, help="Append run log to this file")
@click.option("--verbose", "-v", is_flag=True, help="Show debug output")
@click.pass_context
def main(ctx: click.Context, log_file: str | None, verbose: bool) -> None:
    """Find, paraphrase and cite keyword definitions in academic documents."""
    ctx.ensure_object(dict)
    ctx.obj["log_file"] = log_file
    ctx.obj["min_level"] = "DEBUG" if verbose else "INFO"


def _logger(ctx: click.Context, json_output: bool) -> PipelineLogger:
    log = PipelineLogger(
        log_file=ctx.obj["log_file"],
        console=not json_output,
        min_level=ctx.obj["min_level"],
    )
    log.install_stdlib_bridge("defcite")
    return log


@main.command()
@click.argument("document", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("keyword")
@click.option("--json", "json_output", is_flag=True, help="Output raw JSON instead of formatted text")
@click.pass_context
def extract(ctx: click.Context, document: Path, keyword: str, json_output: bool) -> None:
    """Rank definition candidates for KEYWORD in DOCUMENT (no generation)."""
    with _logger(ctx, json_output) as log:
        try:
            text = _read_document(document)
        except DefciteError as e:
            click.echo(f"Error: {e}", err=True)
            sys.exit(1)

        with log.timer("extraction"):
            result = extract_definitions(text, keyword)
        decision = classify_confidence(result)
        log.metric("candidates", len(result))

        if json_output:
            payload = {
                "keyword": keyword,
                "confidence": decision.tier.value,
                "strategy": decision.strategy.value,
                "candidates": [
                    {"definition": c.text, "score": c.score, "source": c.source}
                    for c in result.candidates
                ],
            }
            click.echo(json.dumps(payload, indent=2, ensure_ascii=False))
            return

        if not result:
            click.echo(f'No definition candidates for "{keyword}".')
            return
        click.echo(f"Confidence: {decision.tier.value} ({decision.strategy.value})")
        click.echo("Score  Source     Definition")
        click.echo("-----  ------     ----------")
        for c in result.candidates:
            click.echo(f"{c.score:<7g}{c.source:<11}{_preview(c.text)}")


@main.command()
@click.argument("document", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("keyword")
@click.option("--author", required=True, help='Author(s), e.g. "Lee, A. & Kim, B."')
@click.option("--year", required=True, help="Publication year")
@click.option(
    "--format",
    "citation_format",
    default="APA",
    type=click.Choice(CitationFormat.choices(), case_sensitive=False),
    help="Citation format (default: APA)",
)
@click.option("--sentences", default=DEFAULT_SENTENCE_COUNT, type=int, help="Paraphrase length, 1-5 (default: 2)")
@click.option("--model", default=None, help="Generation model (default: DEFCITE_LLM_MODEL)")
@click.option("--offline", is_flag=True, help="Skip generation and use template paraphrases")
@click.option("--json", "json_output", is_flag=True, help="Output raw JSON instead of formatted text")
@click.pass_context
def process(
    ctx: click.Context,
    document: Path,
    keyword: str,
    author: str,
    year: str,
    citation_format: str,
    sentences: int,
    model: str | None,
    offline: bool,
    json_output: bool,
) -> None:
    """Find, paraphrase and cite KEYWORD's definition in DOCUMENT."""
    settings = Settings.from_env()
    with _logger(ctx, json_output) as log:
        try:
            publication_year = validate_request(keyword, author, year, sentences)
            text = _read_document(document)
        except DefciteError as e:
            click.echo(f"Error: {e}", err=True)
            sys.exit(1)

        if offline:
            generator: TextGenerator = OfflineGenerator()
        else:
            generator = get_provider(model or settings.llm_model, settings.llm_timeout)

        options = ProcessingOptions(sentence_count=sentences, citation_format=CitationFormat.parse(citation_format))
        log.section(f'{document.name}: "{keyword}"')
        with log.timer("process"):
            result = process_document(
                text,
                keyword.strip(),
                author.strip(),
                publication_year,
                document.name,
                generator=generator,
                options=options,
            )
        log.metric("actual_sentences", result.sentence_analysis.actual_sentences)

        if json_output:
            payload = asdict(result)
            payload["confidence"] = result.confidence.value
            payload["sentence_analysis"]["processing_success"] = result.sentence_analysis.processing_success
            click.echo(json.dumps(payload, indent=2, ensure_ascii=False))
            return

        click.echo(f"Definition found: {'yes' if result.definition_found else 'no'} ({result.confidence.value})")
        if result.original_definition:
            click.echo(f"\nOriginal:\n  {result.original_definition}")
        click.echo(f"\nParaphrase:\n  {result.paraphrased}")
        click.echo(f"\nCitation:\n  {result.citation}")
        click.echo(f"\nBibliography:\n  {result.bibliography}")
        click.echo(f"\n{result.processing_notes}")


if __name__ == "__main__":
    main()
