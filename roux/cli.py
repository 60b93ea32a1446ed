"""
CLI interface for roux.

Provides commands to initialize configuration, inspect stored recipes and
run them against input.

Recipes are YAML/JSON files in the configured recipes directory
(<roux home>/recipes by default), loaded through RecipeRegistry.
"""

import json
import logging
import sys
import time
from pathlib import Path
from typing import Any, Optional

import click
import yaml
from rich.table import Table

from roux import __version__
from roux.config import (
    CONFIG_FILENAME,
    DEFAULT_CONFIG,
    ConfigError,
    RouxConfig,
    get_roux_home,
    load_config,
)
from roux.dish import Dish
from roux.errors import RecipeCompileError, RecipeError, StepLimitExceeded
from roux.recipe import Recipe
from roux.registry import RecipeNotFoundError, RecipeRegistry, RecipeValidationError
from roux.schemas import RecipeDef
from roux.utils import console, format_duration, print_error, print_success, setup_logging

logger = logging.getLogger(__name__)


@click.group()
@click.version_option(version=__version__, prog_name="roux")
@click.option(
    "--config", "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Path to config.yaml (default: $ROUX_HOME/config.yaml)",
)
@click.option("--verbose", "-v", is_flag=True, help="Log flow-control decisions (DEBUG)")
@click.pass_context
def main(ctx, config_path: Optional[Path], verbose: bool):
    """
    roux - Recipe interpreter for data transformations.

    Run recipes of operations, with jumps, registers and fork/merge.
    """
    ctx.ensure_object(dict)
    try:
        config = load_config(config_path)
    except ConfigError as e:
        if config_path is not None:
            print_error(f"Invalid config: {e}")
            raise SystemExit(1)
        # No config yet: run with defaults
        config = RouxConfig.default()
        ctx.obj["config_error"] = str(e)

    ctx.obj["config"] = config
    setup_logging(
        log_file=config.get_log_file_path(),
        log_level="DEBUG" if verbose else config.get_log_level(),
        log_format=config.get_log_format(),
        console_output=config.should_log_to_console(),
    )


@main.command("init")
@click.option("--force", is_flag=True, help="Overwrite existing configuration")
def init(force: bool):
    """Initialize roux configuration."""
    home = get_roux_home()
    if not home.exists():
        home.mkdir(parents=True)

    cfg_path = home / CONFIG_FILENAME
    if cfg_path.exists() and not force:
        click.echo(f"Config already exists at {cfg_path}. Use --force to overwrite.", err=True)
        raise SystemExit(1)

    cfg_path.write_text(yaml.safe_dump(DEFAULT_CONFIG, sort_keys=False))
    (home / DEFAULT_CONFIG["recipes_dir"]).mkdir(exist_ok=True)

    click.echo(f"Initialized roux config at {cfg_path}")


@main.group("recipes")
def recipes_group():
    """Manage and inspect stored recipes."""
    pass


def _get_registry(ctx, recipes_dir: Optional[Path] = None) -> RecipeRegistry:
    return RecipeRegistry(recipes_dir or ctx.obj["config"].recipes_dir)


@recipes_group.command("list")
@click.option("--recipes-dir", type=click.Path(file_okay=False, path_type=Path), help="Override recipes directory")
@click.pass_context
def list_recipes(ctx, recipes_dir: Optional[Path]):
    """List available recipes."""
    registry = _get_registry(ctx, recipes_dir)
    recipe_ids = registry.list_recipes()

    if not recipe_ids:
        click.echo(f"No recipes found in {registry.recipes_dir}")
        return

    table = Table(title=f"Recipes in {registry.recipes_dir}")
    table.add_column("Recipe")
    table.add_column("Version")
    table.add_column("Ops", justify="right")
    table.add_column("Description")

    for recipe_id in recipe_ids:
        try:
            recipe_def = registry.load(recipe_id)
        except (RecipeNotFoundError, RecipeValidationError) as e:
            table.add_row(recipe_id, "-", "-", f"invalid: {e}")
            continue
        table.add_row(
            recipe_id,
            recipe_def.version,
            str(len(recipe_def.operations)),
            recipe_def.description,
        )

    console.print(table)


@recipes_group.command("show")
@click.argument("recipe")
@click.option("--recipes-dir", type=click.Path(file_okay=False, path_type=Path), help="Override recipes directory")
@click.pass_context
def show_recipe(ctx, recipe: str, recipes_dir: Optional[Path]):
    """Show recipe definition details."""
    registry = _get_registry(ctx, recipes_dir)
    try:
        recipe_def = registry.load(recipe)
    except (RecipeNotFoundError, RecipeValidationError) as e:
        print_error(str(e))
        raise SystemExit(1)

    click.echo(f"Recipe: {recipe_def.recipe_id}")
    click.echo(f"Definition: {registry.find_definition(recipe)}")
    click.echo(f"Hash: {registry.compute_hash(recipe_def)}")
    click.echo()
    click.echo(yaml.safe_dump(recipe_def.to_dict(), sort_keys=False, allow_unicode=True))


def _read_input(input_text: Optional[str], input_file: Optional[Path], input_type: str) -> Any:
    """Resolve the recipe input from --input, --input-file or stdin."""
    if input_text is not None and input_file is not None:
        raise click.UsageError("--input and --input-file are mutually exclusive")

    if input_text is not None:
        return input_text
    if input_file is not None:
        if input_type == Dish.BYTE_ARRAY:
            return input_file.read_bytes()
        return input_file.read_text()
    return click.get_text_stream("stdin").read()


def _bake(ctx, recipe_def: RecipeDef, data: Any, max_steps: Optional[int]) -> None:
    """Compile and execute a recipe, echoing the output."""
    try:
        recipe = Recipe.from_def(recipe_def)
    except RecipeCompileError as e:
        print_error(f"Cannot compile recipe '{recipe_def.recipe_id}': {e}")
        raise SystemExit(1)

    if max_steps is None:
        max_steps = ctx.obj["config"].get_max_steps()

    logger.debug(f"Baking {len(recipe)} operations", extra={"recipe_id": recipe_def.recipe_id})
    dish = Dish(data, recipe_def.input_type)
    started = time.monotonic()
    try:
        progress = recipe.execute(dish, max_steps=max_steps)
    except RecipeError as e:
        print_error(f"Recipe '{recipe_def.recipe_id}' failed at operation {e.progress}: {e}")
        raise SystemExit(1)
    except StepLimitExceeded as e:
        print_error(f"Recipe '{recipe_def.recipe_id}' aborted: {e}")
        raise SystemExit(1)

    click.echo(dish.get(Dish.STRING))

    if progress < len(recipe):
        stopped_at = recipe.op_list[progress]
        print_error(f"Stopped at operation {progress} ({stopped_at.name})")
        raise SystemExit(1)

    print_success(f"Baked {len(recipe)} operations in {format_duration(time.monotonic() - started)}")


@main.command("run")
@click.argument("recipe")
@click.option("--input", "input_text", help="Input text (default: read stdin)")
@click.option("--input-file", type=click.Path(exists=True, dir_okay=False, path_type=Path), help="Read input from file")
@click.option("--recipes-dir", type=click.Path(file_okay=False, path_type=Path), help="Override recipes directory")
@click.option("--max-steps", type=int, help="Abort after this many operations")
@click.pass_context
def run(ctx, recipe: str, input_text: Optional[str], input_file: Optional[Path],
        recipes_dir: Optional[Path], max_steps: Optional[int]):
    """Run a stored recipe by ID."""
    registry = _get_registry(ctx, recipes_dir)
    try:
        recipe_def = registry.load(recipe)
    except RecipeNotFoundError as e:
        print_error(str(e))
        available = registry.list_recipes()
        if available:
            click.echo("\nAvailable recipes:", err=True)
            for rid in available:
                click.echo(f"  {rid}", err=True)
        raise SystemExit(1)
    except RecipeValidationError as e:
        print_error(str(e))
        raise SystemExit(1)

    data = _read_input(input_text, input_file, recipe_def.input_type)
    _bake(ctx, recipe_def, data, max_steps)


@main.command("bake")
@click.argument("recipe_json")
@click.option("--input", "input_text", help="Input text (default: read stdin)")
@click.option("--input-file", type=click.Path(exists=True, dir_okay=False, path_type=Path), help="Read input from file")
@click.option("--max-steps", type=int, help="Abort after this many operations")
@click.pass_context
def bake(ctx, recipe_json: str, input_text: Optional[str], input_file: Optional[Path], max_steps: Optional[int]):
    """
    Run an inline recipe.

    RECIPE_JSON is a list of operations, e.g.
    '[{"op": "Fork", "args": [",", ";", false]}, {"op": "To Upper case"}]'
    """
    try:
        config = json.loads(recipe_json)
    except json.JSONDecodeError as e:
        raise click.UsageError(f"RECIPE_JSON is not valid JSON: {e}")

    try:
        recipe_def = RecipeDef.from_config(config)
    except RecipeCompileError as e:
        print_error(str(e))
        raise SystemExit(1)

    data = _read_input(input_text, input_file, recipe_def.input_type)
    _bake(ctx, recipe_def, data, max_steps)


if __name__ == "__main__":
    sys.exit(main())
