from pathlib import Path
from typing import Optional

import typer
from srs_check.autofix import AutoFixEngine, fixable_files
from srs_check.engine import ValidatorEngine
from srs_check.errors import AmbiguousEmphasisError, ConfigError
from srs_check.logger import setup_logging
from srs_check.markdown import MarkdownExtractor
from srs_check.models import RequirementEntry
from srs_check.normalizer import normalize
from srs_check.report import format_report
from srs_check.source import SourceExtractor

from .config import CheckConfig
from .converters import report_to_document

app = typer.Typer(help="SRS consistency checker - compare requirement documents with code comments")

CONFIG_ERROR_EXIT = 2


@app.command()
def validate(
    root: Optional[Path] = typer.Argument(None, help="Repository root to scan"),
    config_file: Optional[Path] = typer.Option(None, "--config", help="Path to config file"),
    jobs: Optional[int] = typer.Option(None, help="Number of parallel workers"),
    fix: bool = typer.Option(False, help="Rewrite drifting source comments from the documentation"),
    output_format: str = typer.Option("text", "--format", help="Report format: text or json"),
    orphans: Optional[bool] = typer.Option(None, "--orphans/--no-orphans", help="Check sources with no document"),
    placement: Optional[bool] = typer.Option(
        None, "--placement/--no-placement", help="Check Codes_/Tests_ tag placement"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Check requirement documents against source comments"""
    setup_logging("DEBUG" if verbose else "WARNING")

    try:
        if root is None:
            raise ConfigError("no input path given")
        if output_format not in ("text", "json"):
            raise ConfigError(f"unknown report format '{output_format}'")
        config = CheckConfig(config_file, root).build(
            jobs=jobs, check_orphans=orphans, check_placement=placement
        )
        engine = ValidatorEngine(config)
        report = engine.validate(root)

        if fix and not report.ok:
            autofix = AutoFixEngine()
            for file_path, results in fixable_files(report.results).items():
                typer.echo(f"Applying {len(results)} fixes in {file_path}...", err=True)
                try:
                    file_path.write_bytes(autofix.apply_fixes(file_path, results))
                except OSError as e:
                    typer.echo(f"Error: cannot fix {file_path}: {e}", err=True)
            report = engine.validate(root)
    except ConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=CONFIG_ERROR_EXIT)

    if output_format == "json":
        typer.echo(report_to_document(report).model_dump_json(indent=2))
    else:
        typer.echo(format_report(report))

    if not report.ok:
        raise typer.Exit(code=1)


@app.command()
def tags(
    files: list[Path] = typer.Argument(..., help="Markdown documents or source files"),
):
    """List the requirement tags found in files"""
    markdown = MarkdownExtractor()
    source = SourceExtractor()
    failed = False

    for file_path in files:
        try:
            if file_path.suffix.lower() == ".md":
                extraction = markdown.extract(file_path.read_text(encoding="utf-8"), file_path)
            else:
                extraction = source.extract(file_path.read_bytes(), file_path)
        except (OSError, UnicodeDecodeError) as e:
            typer.echo(f"Error: cannot read {file_path}: {e}", err=True)
            failed = True
            continue

        for item in extraction.items():
            where = f"{item.location.file_path}:{item.location.line}"
            if isinstance(item, RequirementEntry):
                try:
                    text = normalize(item.raw_text)
                except AmbiguousEmphasisError as e:
                    typer.echo(f"{where} [MALFORMED] {item.tag}: {e.detail}")
                    continue
                typer.echo(f"{where} [{item.kind.value}] {item.tag}: {text}")
            else:
                typer.echo(f"{where} [MALFORMED] {item.tag}: {item.reason}")

    if failed:
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
