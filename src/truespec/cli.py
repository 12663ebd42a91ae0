"""CLI entry points for truespec."""

import logging
import os
from pathlib import Path

import click
from pydantic import ValidationError

from truespec.config import FailOn, FetchOptions, OutputFormat, exceeds_threshold
from truespec.diff.engine import diff_specs
from truespec.errors import TrueSpecError
from truespec.loader.openapi import load_document
from truespec.report.formatter import format_markdown, render

EXIT_OK = 0
EXIT_THRESHOLD = 1
EXIT_ERROR = 2

FAIL_ON_CHOICES = click.Choice([f.value for f in FailOn], case_sensitive=False)
FORMAT_CHOICES = click.Choice([f.value for f in OutputFormat], case_sensitive=False)


def _parse_headers(ctx, param, values: tuple[str, ...]) -> dict[str, str]:
    headers = {}
    for value in values:
        name, sep, content = value.partition(":")
        if not sep or not name.strip():
            raise click.BadParameter(f"expected NAME:VALUE, got '{value}'")
        headers[name.strip()] = content.strip()
    return headers


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        force=True,
    )


def diff_options(fail_on_default: str, format_default: str, from_env: bool):
    """Attach the options shared by `truespec diff` and `truespec-ci`.

    With `from_env`, each option falls back to its TRUESPEC_* variable.
    """
    def envvar(name: str) -> str | None:
        return f"TRUESPEC_{name}" if from_env else None

    options = [
        click.option("--base", required=True, envvar=envvar("BASE"), help="Path or URL of the base OpenAPI spec."),
        click.option("--head", required=True, envvar=envvar("HEAD"), help="Path or URL of the head OpenAPI spec."),
        click.option("--fail-on", "fail_on", default=fail_on_default, envvar=envvar("FAIL_ON"),
                     type=FAIL_ON_CHOICES, show_default=True, help="Exit with 1 at or above this severity."),
        click.option("--format", "fmt", default=format_default, envvar=envvar("FORMAT"),
                     type=FORMAT_CHOICES, show_default=True, help="Output format."),
        click.option("--json", "as_json", is_flag=True, help="Output JSON (deprecated, use --format json)."),
        click.option("--header", "headers", multiple=True, callback=_parse_headers, metavar="NAME:VALUE",
                     help="Extra HTTP header for remote specs. Repeatable."),
        click.option("--no-cache", is_flag=True, help="Do not read or write the remote spec cache."),
        click.option("-v", "--verbose", is_flag=True, help="Log debug output to stderr."),
    ]

    def decorator(f):
        for option in reversed(options):
            f = option(f)
        return f

    return decorator


def run_diff(
    ctx: click.Context,
    base: str,
    head: str,
    fail_on: str,
    fmt: str,
    as_json: bool,
    headers: dict[str, str],
    no_cache: bool,
    verbose: bool,
    step_summary: Path | None = None,
) -> None:
    """Load both specs, print the rendered diff and exit with the gate status."""
    _configure_logging(verbose)
    if as_json:
        fmt = OutputFormat.JSON.value

    try:
        options = FetchOptions.from_env(headers=headers, no_store=True if no_cache else None)
        base_doc = load_document(base, options)
        head_doc = load_document(head, options)
    except (TrueSpecError, ValidationError) as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(EXIT_ERROR)

    result = diff_specs(base_doc, head_doc)
    click.echo(render(result, fmt))

    if step_summary is not None:
        try:
            with step_summary.open("a", encoding="utf-8") as f:
                f.write(format_markdown(result) + "\n")
        except OSError as e:
            click.echo(f"Error: cannot write step summary {step_summary}: {e.strerror or e}", err=True)
            ctx.exit(EXIT_ERROR)

    ctx.exit(EXIT_THRESHOLD if exceeds_threshold(result.summary, fail_on) else EXIT_OK)


@click.group()
@click.version_option(package_name="truespec")
def main():
    """TrueSpec: OpenAPI spec drift checks for CI and local use."""
    pass


@main.command()
@diff_options(fail_on_default="none", format_default="text", from_env=False)
@click.pass_context
def diff(ctx, **kwargs):
    """Compare two OpenAPI specs."""
    run_diff(ctx, **kwargs)


@click.command()
@diff_options(fail_on_default="breaking", format_default="markdown", from_env=True)
@click.pass_context
def ci_main(ctx, **kwargs):
    """Compare two OpenAPI specs in CI.

    Appends a Markdown summary to $GITHUB_STEP_SUMMARY when it is set.
    """
    summary_path = os.getenv("GITHUB_STEP_SUMMARY")
    run_diff(ctx, step_summary=Path(summary_path) if summary_path else None, **kwargs)
