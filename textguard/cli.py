"""Defines the command-line interface for textguard.

This module uses the `click` library to expose the validator from a shell:
checking individual texts or whole files, an interactive `watch` loop that
re-validates on every entered line, and helpers to inspect presets, the
error catalog, and the user configuration.
"""
import json
import logging
import sys
from typing import Any, Dict, List, Optional, Tuple

import click
from halo import Halo
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .core.config import Config
from .core.errors import ConfigError, Error
from .core.ruleset import RuleSet
from .core.validator import TextValidator
from .validators.presets import PRESETS

# Configure rich console for output.
console = Console(emoji=True, force_terminal=True)
err_console = Console(stderr=True)

logger = logging.getLogger(__name__)


class AliasedGroup(click.Group):
    """A custom click Group that supports command aliases and case-insensitivity."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._aliases: Dict[str, str] = {}

    def get_command(self, ctx: click.Context, cmd_name: str) -> Optional[click.Command]:
        """Gets a command by name, checking for aliases and prefixes.

        Args:
            ctx: The click context.
            cmd_name: The command name entered by the user.

        Returns:
            The matched click command, or None.
        """
        cmd_name = cmd_name.lower()
        rv = super().get_command(ctx, cmd_name)
        if rv is not None:
            return rv
        if cmd_name in self._aliases:
            return super().get_command(ctx, self._aliases[cmd_name])
        matches = [x for x in self.list_commands(ctx) if x.startswith(cmd_name)]
        if not matches:
            return None
        if len(matches) == 1:
            return super().get_command(ctx, matches[0])
        ctx.fail(f"Ambiguous command: '{cmd_name}'. Matches: {', '.join(sorted(matches))}")
        return None

    def add_alias(self, alias: str, command_name: str) -> None:
        self._aliases[alias.lower()] = command_name.lower()


def _load_rules(config_path: Optional[str], preset: Optional[str]) -> Tuple[Config, RuleSet]:
    """Loads the configuration and builds its RuleSet, exiting on bad config."""
    config_obj = Config(config_path=config_path)
    try:
        return config_obj, config_obj.ruleset(preset)
    except ConfigError as e:
        err_console.print(f"[red]Invalid configuration: {escape(str(e))}[/red]")
        sys.exit(2)


@click.group(cls=AliasedGroup, invoke_without_command=True, context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="textguard")
@click.option("--verbose", is_flag=True, help="Enable verbose output.")
@click.option("--debug", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, verbose: bool, debug: bool) -> None:
    """Validate text against declarative rules.

    textguard checks strings for forbidden or missing character classes,
    minimum lengths, required patterns, and illegal words, and reports the
    problems it finds in the order it found them.
    """
    # "colors" and "verbose" come from the default config locations and env.
    settings = Config()
    console.no_color = not settings.get("colors", True)
    verbose = verbose or bool(settings.get("verbose", False))
    log_level = logging.DEBUG if debug else logging.INFO if verbose else logging.WARNING
    logging.basicConfig(level=log_level, format='%(asctime)s - %(levelname)s - %(message)s')
    logger.debug("Debug mode enabled.")

    if ctx.invoked_subcommand is None:
        console.print("Use 'textguard check <text>' to validate text, or 'textguard --help' for more commands.")


@main.command()
@click.argument("texts", nargs=-1, required=False)
@click.option("--preset", "-p", help="Name of a preset rule set (see 'textguard presets').")
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False), help="Path to a custom config file.")
@click.option("--file", "input_file", type=click.Path(exists=True, dir_okay=False), help="Validate every line of a file.")
@click.option("--json", "json_output", is_flag=True, help="Output results in JSON format.")
@click.option("--md", "md_output", is_flag=True, help="Output results in Markdown format.")
def check(texts: Tuple[str, ...], preset: Optional[str], config_path: Optional[str], input_file: Optional[str],
          json_output: bool, md_output: bool) -> None:
    """Validate one or more texts.

    Each TEXT is validated independently with the configured rules. The
    command exits with status 1 if any text has errors.
    """
    config_obj, rules = _load_rules(config_path, preset)
    validator = TextValidator(rules, name=preset or config_obj.get("preset") or "custom")

    all_results = []
    for text in texts:
        validator.validate(text)
        all_results.append(validator.result())

    if input_file:
        with open(input_file, "r", encoding="utf-8") as f:
            lines = [line.rstrip("\r\n") for line in f]
        with Halo(text=f"Validating {len(lines)} line(s)...", spinner="dots",
                  enabled=not (json_output or md_output), stream=sys.stdout) as spinner:
            for line in lines:
                validator.validate(line)
                all_results.append(validator.result())
            spinner.succeed(f"Validated {len(lines)} line(s) from {input_file}")

    if not texts and not input_file:
        err_console.print("[red]No text given. Pass TEXT arguments or --file.[/red]")
        sys.exit(2)

    if json_output:
        click.echo(json.dumps(all_results, indent=2))
    elif md_output:
        click.echo(_format_results_as_markdown(all_results))
    else:
        _display_results(all_results)

    if any(not r["valid"] for r in all_results):
        sys.exit(1)


def _format_results_as_markdown(all_results: List[Dict[str, Any]]) -> str:
    """Formats a list of validation results into a Markdown string."""
    markdown = ""
    for results in all_results:
        markdown += f"## `{results['text']}`\n\n"
        if results["valid"]:
            markdown += "- OK\n"
        for kind, message in zip(results["kinds"], results["errors"]):
            markdown += f"- **{kind}**: {message}\n"
        markdown += "\n"
    return markdown


def _display_results(all_results: List[Dict[str, Any]]) -> None:
    """Displays validation results in a formatted table."""
    table = Table(title="Validation Results")
    table.add_column("Text", style="cyan")
    table.add_column("Status")
    table.add_column("Errors")
    for res in all_results:
        status = "[green]Valid[/green]" if res["valid"] else "[red]Invalid[/red]"
        table.add_row(escape(repr(res["text"])), status, escape("\n".join(res["errors"])))
    console.print(table)

    invalid = sum(1 for r in all_results if not r["valid"])
    if invalid:
        console.print(Panel(f"{invalid} of {len(all_results)} text(s) failed validation.", style="red", title="Check Complete"))


@main.command()
@click.option("--preset", "-p", help="Name of a preset rule set.")
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False), help="Path to a custom config file.")
@click.option("--all", "show_all", is_flag=True, help="Show every error instead of only the first one.")
def watch(preset: Optional[str], config_path: Optional[str], show_all: bool) -> None:
    """Validate each line read from standard input as it is entered.

    Every line is treated as the new full value of a text field; the first
    error (or all of them with --all) is printed after each change.
    """
    _, rules = _load_rules(config_path, preset)

    def show(text: str, errors: List[Error], validator: TextValidator) -> None:
        if not errors:
            console.print("[green]OK[/green]")
        elif show_all:
            for error in errors:
                console.print(f"[red]{escape(error.kind)}[/red]: {escape(str(error))}")
        else:
            console.print(f"[red]{escape(str(errors[0]))}[/red]")

    validator = TextValidator(rules, post_validate=show)
    if sys.stdin.isatty():
        console.print("Type text and press Enter to validate it. Press Ctrl-D to quit.")
    for line in click.get_text_stream("stdin"):
        validator.on_text_changed(line.rstrip("\r\n"))


@main.command(name="presets")
def list_presets() -> None:
    """List the built-in preset rule sets."""
    defaults = RuleSet().to_dict()
    table = Table(title="Presets")
    table.add_column("Name", style="cyan")
    table.add_column("Rules")
    for name, rules in PRESETS.items():
        changed = {k: v for k, v in rules.to_dict().items() if v != defaults[k]}
        table.add_row(name, escape("\n".join(f"{k} = {v!r}" for k, v in changed.items())))
    console.print(table)


@main.command(name="errors")
def list_errors() -> None:
    """List the built-in error kinds and their messages."""
    table = Table(title="Error Catalog")
    table.add_column("Kind", style="cyan")
    table.add_column("Message")
    for error in Error.catalog():
        table.add_row(error.kind, error.message)
    console.print(table)


@main.command()
@click.argument("action", type=click.Choice(['get', 'set', 'list', 'reset']), required=True)
@click.argument("key", type=str, required=False)
@click.argument("value", type=str, required=False)
def config(action: str, key: Optional[str], value: Optional[str]) -> None:
    """Manage the textguard configuration.

    \b
    ACTION:
        get <key>         Get a configuration value.
        set <key> <value> Set a configuration value.
        list              List all current configuration values.
        reset             Reset the configuration to its default state.
    """
    config_obj = Config()
    if action == "list":
        console.print(Panel(escape(json.dumps(config_obj.config, indent=2)), title="Current Configuration"))
    elif action == "get":
        if not key:
            err_console.print("[red]Error: 'get' action requires a key.[/red]")
            sys.exit(1)
        click.echo(json.dumps(config_obj.get(key)))
    elif action == "set":
        if not key or value is None:
            err_console.print("[red]Error: 'set' action requires a key and a value.[/red]")
            sys.exit(1)
        try:
            processed_value = Config.parse_value(key, value)
            config_obj.set(key, processed_value)
            config_obj.ruleset()
        except ValueError as e:
            err_console.print(f"[red]Error: {escape(str(e))}[/red]")
            sys.exit(1)
        try:
            config_obj.save_user_config()
            console.print(f"[green]'{escape(key)}' set to '{escape(str(processed_value))}' and saved to user config.[/green]")
        except IOError as e:
            err_console.print(f"[red]Error saving configuration: {escape(str(e))}[/red]")
            sys.exit(1)
    elif action == "reset":
        if Config.reset_user_config():
            console.print("[green]Configuration reset to defaults.[/green]")
        else:
            console.print("[yellow]No user configuration file to reset.[/yellow]")


main.add_alias('c', 'check')
main.add_alias('w', 'watch')

if __name__ == "__main__":
    main()
