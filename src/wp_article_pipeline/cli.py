"""
Command-line interface for the WordPress article pipeline.

Provides commands to recover articles from saved completions, inject SEO
links into HTML, run the full post-processing pipeline, and generate new
articles.
"""

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .article_generator import ArticleGenerationError, ArticleGenerator, process_completion
from .config import PipelineConfig
from .link_injector import inject_seo_links_with_report
from .llm_client import LLMClientError
from .models import ArticleLength, ArticleRequest, ArticleTone, GenerationResult
from .response_parser import MalformedResponse, recover_article
from .rule_loader import RuleLoadError, deduplicate_rules, load_rules

console = Console()

RULES_OPTION = click.option(
    "--rules",
    "-r",
    "rules_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="SEO link rules file (JSON, CSV or Excel).",
)
OUTPUT_OPTION = click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the result to this file instead of only printing a summary.",
)


@click.group()
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    default=False,
    help="Enable verbose output.",
)
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """
    WordPress Article Pipeline - recover, link and generate articles.

    Examples:

        wp-article recover completion.txt -o article.json

        wp-article inject body.html --rules links.json -o linked.html

        wp-article generate "budget laptops" --tone review --rules links.csv
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


@main.command()
@click.argument("response_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@OUTPUT_OPTION
def recover(response_file: Path, output: Optional[Path]) -> None:
    """Recover an article from a saved AI completion."""
    try:
        result = recover_article(response_file.read_text(encoding="utf-8"))
    except MalformedResponse as e:
        console.print(f"[red]Malformed response:[/red] {e.reason}")
        sys.exit(1)

    _display_article(result)
    if output:
        _write_json(result, output)


@main.command()
@click.argument("content_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--rules",
    "-r",
    "rules_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    required=True,
    help="SEO link rules file (JSON, CSV or Excel).",
)
@OUTPUT_OPTION
def inject(content_file: Path, rules_path: Path, output: Optional[Path]) -> None:
    """Insert SEO links into an HTML file."""
    rules = _load_rules_or_exit(rules_path)
    html, reports = inject_seo_links_with_report(
        content_file.read_text(encoding="utf-8"), rules, PipelineConfig.from_env()
    )

    table = Table(title="SEO Links", show_header=True)
    table.add_column("Keyword", style="green")
    table.add_column("Max", justify="right")
    table.add_column("In text", justify="right", style="cyan")
    table.add_column("Backfilled", justify="right", style="yellow")
    for report in reports:
        table.add_row(
            report.keyword,
            str(report.max_count),
            str(report.linked_in_text),
            str(report.backfilled),
        )
    console.print(table)

    if output:
        output.write_text(html, encoding="utf-8")
        console.print(f"\n[bold green]Success![/bold green] Output saved to: {output}")
    else:
        console.print(html, markup=False, highlight=False)


@main.command()
@click.argument("response_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@RULES_OPTION
@click.option("--tag", "tags", multiple=True, help="Existing tag on the article (repeatable).")
@OUTPUT_OPTION
def process(
    response_file: Path,
    rules_path: Optional[Path],
    tags: tuple[str, ...],
    output: Optional[Path],
) -> None:
    """Recover an article from a completion and insert SEO links."""
    rules = _load_rules_or_exit(rules_path) if rules_path else []

    try:
        result = process_completion(
            response_file.read_text(encoding="utf-8"),
            rules=rules,
            existing_tags=list(tags),
            config=PipelineConfig.from_env(),
        )
    except MalformedResponse as e:
        console.print(f"[red]Malformed response:[/red] {e.reason}")
        sys.exit(1)

    _display_article(result)
    if output:
        _write_json(result, output)


@main.command()
@click.argument("keyword")
@click.option(
    "--tone",
    type=click.Choice([t.name.lower() for t in ArticleTone], case_sensitive=False),
    default="friendly",
    show_default=True,
    help="Writing tone.",
)
@click.option(
    "--length",
    type=click.Choice([n.name.lower() for n in ArticleLength], case_sensitive=False),
    default="medium",
    show_default=True,
    help="Article length.",
)
@click.option("--seo-keyword", "seo_keywords", multiple=True, help="SEO keyword to use (repeatable).")
@RULES_OPTION
@click.option(
    "--api-key",
    type=str,
    envvar="ANTHROPIC_API_KEY",
    help="Anthropic API key. Can also be set via ANTHROPIC_API_KEY env var.",
)
@OUTPUT_OPTION
@click.pass_context
def generate(
    ctx: click.Context,
    keyword: str,
    tone: str,
    length: str,
    seo_keywords: tuple[str, ...],
    rules_path: Optional[Path],
    api_key: Optional[str],
    output: Optional[Path],
) -> None:
    """Generate a new article about KEYWORD."""
    console.print(Panel.fit(
        "[bold blue]WordPress Article Pipeline[/bold blue]\n"
        f"Generating an article about: {keyword}",
        border_style="blue",
    ))

    rules = _load_rules_or_exit(rules_path) if rules_path else []
    request = ArticleRequest(
        keyword=keyword,
        tone=ArticleTone[tone.upper()],
        length=ArticleLength[length.upper()],
        seo_keywords=list(seo_keywords),
        seo_links=rules,
    )

    try:
        generator = ArticleGenerator(api_key=api_key, config=PipelineConfig.from_env())
        with console.status("[bold green]Generating article..."):
            result = generator.generate(request)
    except (ArticleGenerationError, LLMClientError) as e:
        console.print(f"[red]Generation error:[/red] {e}")
        sys.exit(1)
    except Exception as e:
        console.print(f"[red]Unexpected error:[/red] {e}")
        if ctx.obj.get("verbose"):
            import traceback
            console.print(traceback.format_exc())
        sys.exit(1)

    _display_article(result)
    if output:
        _write_json(result, output)


def _load_rules_or_exit(rules_path: Path):
    """Load and deduplicate rules, exiting with an error message on failure."""
    try:
        return deduplicate_rules(load_rules(rules_path))
    except RuleLoadError as e:
        console.print(f"[red]Rule loading error:[/red] {e}")
        sys.exit(1)


def _display_article(result: GenerationResult) -> None:
    """Display a recovered article summary."""
    table = Table(title="Article", show_header=True)
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Title", result.title)
    table.add_row("Excerpt", result.excerpt or "-")
    table.add_row("Tags", ", ".join(result.tags) if result.tags else "-")
    table.add_row("Content", f"{len(result.content)} characters")

    console.print(table)


def _write_json(result: GenerationResult, output: Path) -> None:
    output.write_text(
        json.dumps(result.to_dict(), ensure_ascii=False, indent=2), encoding="utf-8"
    )
    console.print(f"\n[bold green]Success![/bold green] Output saved to: {output}")


def run_cli() -> None:
    """Entry point for the CLI."""
    main()


if __name__ == "__main__":
    run_cli()
