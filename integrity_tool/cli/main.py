"""Command-line interface for integrity-tool."""

import json
import sys
from pathlib import Path
import click

from ..core import (
    Config,
    ChatClient,
    IntegrityEngine,
    IntegrityError,
    HeuristicScorer,
    ReportGenerator,
    build_corpus,
    cosine_similarity,
    create_embedding_provider,
    load_corpus,
    read_text_file,
    save_corpus,
)
from ..core.log import set_logger
from .display import create_console, display_plagiarism, display_report


def setup_logging(verbose: bool):
    """Set up logging configuration."""
    set_logger(
        'integrity_tool',
        level='DEBUG' if verbose else 'INFO',
        fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S',
        remove_handlers=True
    )


def build_config(api_key=None, base_url=None, model=None, provider=None, **settings) -> Config:
    """Create a configuration, letting CLI options override the environment."""
    config = Config(**settings)
    if api_key:
        config.openai_api_key = api_key
    if base_url:
        config.openai_base_url = base_url
    if model:
        config.chat_model = model
    if provider:
        config.embedding_provider = provider
    return config


def fail(message: str):
    click.echo(click.style(f"Error: {message}", fg="red"), err=True)
    sys.exit(1)


api_options = [
    click.option('--api-key', envvar='OPENAI_API_KEY', help='API key (can be set via OPENAI_API_KEY env var)'),
    click.option('--base-url', envvar='OPENAI_BASE_URL', help='API base URL (can be set via OPENAI_BASE_URL env var)'),
    click.option('--model', envvar='OPENAI_CHAT_MODEL', help='Chat model used for analysis'),
]


def with_api_options(func):
    for option in reversed(api_options):
        func = option(func)
    return func


@click.group()
@click.version_option(version="0.1.0", prog_name="integrity-tool")
def cli():
    """Academic integrity analysis: source matching, plagiarism indicators and feedback."""
    pass


@cli.command()
@click.argument('file_path', type=click.Path(exists=True, path_type=Path))
@click.option('--corpus', '-c', type=click.Path(exists=True, path_type=Path), help='Corpus JSON file')
@click.option('--output', '-o', type=click.Path(path_type=Path), help='Output file path')
@click.option('--format', '-f', type=click.Choice(['json', 'html', 'text']), default='json', help='Output format')
@click.option('--threshold', '-t', type=float, default=0.75, help='Similarity threshold (0-1)')
@click.option('--top-k', '-k', type=int, default=5, help='Number of sources to suggest')
@click.option('--provider', '-p', type=click.Choice(['hash', 'openai']), help='Embedding provider')
@click.option('--estimate-cost', is_flag=True, help='Show the estimated model cost')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose output')
@with_api_options
def analyze(
    file_path: Path,
    corpus: Path,
    output: Path,
    format: str,
    threshold: float,
    top_k: int,
    provider: str,
    estimate_cost: bool,
    verbose: bool,
    api_key: str,
    base_url: str,
    model: str
):
    """
    Analyze a document against a reference corpus.

    FILE_PATH: Path to the extracted plain text of the submission
    """
    setup_logging(verbose)

    try:
        config = build_config(api_key, base_url, model, provider,
                              similarity_threshold=threshold, top_k=top_k)
        text = read_text_file(str(file_path))
        sources = load_corpus(str(corpus)) if corpus else []
        engine = IntegrityEngine(config)
        report = engine.analyze(text, sources)
    except (IntegrityError, ValueError) as e:
        fail(str(e))

    if not output:
        output = Path(f"report_{file_path.stem}.{format}")
    ReportGenerator().save_report(report, str(output), format)

    console = create_console()
    display_report(report, str(output), console=console)

    if estimate_cost and engine.synthesizer.model_enabled:
        cost = engine.synthesizer.estimate_cost(text, report.suggested_sources)
        console.print(f"Estimated cost: ${cost['estimated_cost_usd']:.4f} USD "
                      f"({cost['total_tokens']:,} tokens)", style="dim")


@cli.command()
@click.argument('file_path', type=click.Path(exists=True, path_type=Path))
@click.option('--json', 'as_json', is_flag=True, help='Print the report as JSON')
def score(file_path: Path, as_json: bool):
    """
    Score a document with the heuristic plagiarism indicators only.

    FILE_PATH: Path to the extracted plain text
    """
    text = read_text_file(str(file_path))
    report = HeuristicScorer(Config()).score(text)

    if as_json:
        click.echo(report.model_dump_json(indent=2))
        return

    console = create_console()
    console.print(f"Scored {file_path} ({report.significant_words} significant words)")
    display_plagiarism(console, report)


@cli.command()
@click.argument('sources_file', type=click.Path(exists=True, path_type=Path))
@click.argument('output', type=click.Path(path_type=Path))
@click.option('--provider', '-p', type=click.Choice(['hash', 'openai']), help='Embedding provider')
@click.option('--api-key', envvar='OPENAI_API_KEY', help='API key for remote embeddings')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose output')
def index(sources_file: Path, output: Path, provider: str, api_key: str, verbose: bool):
    """
    Embed a JSON list of sources into a corpus file.

    SOURCES_FILE: JSON array of objects with title, authors and abstract
    OUTPUT: Path of the corpus file to write
    """
    setup_logging(verbose)

    with open(sources_file, 'r', encoding='utf-8') as f:
        entries = json.load(f)
    if not isinstance(entries, list):
        fail(f"{sources_file} must contain a JSON array")

    try:
        embedder = create_embedding_provider(build_config(api_key=api_key, provider=provider))
        records = build_corpus(entries, embedder)
    except IntegrityError as e:
        fail(str(e))

    save_corpus(records, str(output))
    click.echo(f"Indexed {len(records)} sources with the {embedder.name} provider into {output}")


@cli.command()
@click.argument('text1')
@click.argument('text2')
@click.option('--provider', '-p', type=click.Choice(['hash', 'openai']), help='Embedding provider')
@click.option('--api-key', envvar='OPENAI_API_KEY', help='API key for remote embeddings')
def quick_compare(text1: str, text2: str, provider: str, api_key: str):
    """
    Quick comparison of two text strings.

    TEXT1: First text string
    TEXT2: Second text string
    """
    try:
        embedder = create_embedding_provider(build_config(api_key=api_key, provider=provider))
        similarity = cosine_similarity(embedder.embed(text1), embedder.embed(text2))
    except IntegrityError as e:
        fail(str(e))

    click.echo(f"Provider: {embedder.name}")
    click.echo(f"Similarity: {similarity:.2%}")

    if similarity > 0.75:
        click.echo("High similarity - likely the same source material")
    elif similarity >= 0.50:
        click.echo("Moderate similarity - some related content")
    else:
        click.echo("Low similarity - texts appear different")


@cli.command()
@with_api_options
def test_connection(api_key: str, base_url: str, model: str):
    """Test connection to the chat model API."""
    config = build_config(api_key, base_url, model)

    if not config.validate_api_key():
        fail("OPENAI_API_KEY not set.")

    click.echo("Testing connection to API...")
    click.echo(f"   Endpoint: {config.openai_base_url}")
    click.echo(f"   Model: {config.chat_model}")

    try:
        reply = ChatClient(config).complete(
            "Reply with a JSON object.", 'Return {"status": "ok"}.')
    except IntegrityError as e:
        fail(f"Connection failed: {e}")

    click.echo("Connection successful!")
    click.echo(f"   Reply: {reply[:80]}")


if __name__ == "__main__":
    cli()
