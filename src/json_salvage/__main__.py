"""CLI entry point for json-salvage."""

from __future__ import annotations

import json
import logging

import click

from . import __version__


@click.group()
@click.version_option(version=__version__, prog_name="json-salvage")
@click.option("--config", "config_path", default=None, help="Config file path")
@click.option("--verbose", "-v", is_flag=True, help="Log strategy and repair steps")
@click.pass_context
def main(ctx: click.Context, config_path: str | None, verbose: bool) -> None:
    """json-salvage: recover JSON from LLM completions."""
    from .config import load_config
    from .exceptions import ConfigError
    from .friendly_errors import format_friendly_error, friendly_extraction_error

    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(message)s")

    try:
        ctx.obj = load_config(config_path)
    except ConfigError as e:
        click.echo(format_friendly_error(friendly_extraction_error(e)), err=True)
        raise SystemExit(1)


@main.command()
@click.argument("source", type=click.File("r", encoding="utf-8"), default="-")
@click.option(
    "--require", "-r", "required", multiple=True, help="Required top-level key"
)
@click.option("--anchor", default=None, help="Array key for truncation repair")
@click.option(
    "--thinking/--no-thinking", default=True, help="Attach step reasoning to output"
)
@click.pass_obj
def extract(
    config, source, required: tuple[str, ...], anchor: str | None, thinking: bool
) -> None:
    """Extract JSON from a saved completion (file path or - for stdin)."""
    from .exceptions import JsonSalvageError
    from .friendly_errors import format_friendly_error, friendly_extraction_error
    from .pipeline import extract_json, merge_thinking_and_result

    text = source.read()
    if anchor:
        config = config.model_copy(
            update={"repair": config.repair.model_copy(update={"anchor_key": anchor})}
        )

    run = merge_thinking_and_result if thinking else extract_json
    try:
        value = run(text, required, config=config)
    except JsonSalvageError as e:
        click.echo(format_friendly_error(friendly_extraction_error(e)), err=True)
        raise SystemExit(1)

    click.echo(json.dumps(value, ensure_ascii=False, indent=2))


@main.command()
@click.argument("source", type=click.File("r", encoding="utf-8"), default="-")
@click.pass_obj
def steps(config, source) -> None:
    """Show the chain-of-thought steps found in a completion."""
    from .thinking import chain_stats, format_chain_output

    text = source.read()
    output = format_chain_output(text, config)
    stats = chain_stats(text, config)

    if not output.steps:
        click.echo("No step markers found.")
    for step in output.steps:
        click.echo(f"{step.title}")
        if step.thinking:
            click.echo(f"  thinking: {step.thinking}")
        if step.result:
            click.echo(f"  result:   {step.result}")

    click.echo(
        f"\n{stats.completed_steps}/{stats.total_steps} steps with reasoning, "
        f"{stats.thinking_length} reasoning chars, {stats.output_length} chars total"
    )
    click.echo("Final JSON: " + ("found" if output.final_json else "missing"))


@main.command()
@click.argument("source", type=click.File("r", encoding="utf-8"), default="-")
@click.option(
    "--step", "-s", "expected", multiple=True, required=True, help="Step id, e.g. 1.2"
)
@click.pass_obj
def check(config, source, expected: tuple[str, ...]) -> None:
    """Check that every expected step has a reasoning section."""
    from .thinking import is_chain_complete

    result = is_chain_complete(source.read(), expected, config)
    if result.is_complete:
        click.echo(click.style("All steps present.", fg="green"))
        return
    click.echo(
        click.style(f"Missing steps: {', '.join(result.missing_steps)}", fg="red"),
        err=True,
    )
    raise SystemExit(1)


if __name__ == "__main__":
    main()
