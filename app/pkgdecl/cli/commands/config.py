"""Configuration commands."""

from typing import Annotated

import tomli_w
import typer
from rich.markup import escape

from pkgdecl.core.config import Config, ConfigError, load_config, save_config
from pkgdecl.core.paths import ensure_group_dir, get_config_path
from pkgdecl.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Create and inspect the configuration.",
    no_args_is_help=True,
)


@app.command("init")
def init_config(
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            "-f",
            help="Overwrite an existing config file.",
        ),
    ] = False,
) -> None:
    """Write the default config file and create the group directory."""
    path = get_config_path()
    if path.exists() and not force:
        print_error(f"Config already exists: {escape(str(path))}")
        print_info("Use --force to overwrite it.")
        raise typer.Exit(code=1)

    try:
        saved = save_config(Config(), path)
        group_dir = ensure_group_dir()
    except (ConfigError, RuntimeError) as e:
        print_error(escape(str(e)))
        raise typer.Exit(code=1) from e

    print_success(f"Config created: {escape(str(saved))}")
    print_info(f"Put your group files in {escape(str(group_dir))}")


@app.command("show")
def show_config() -> None:
    """Print the effective configuration."""
    try:
        config = load_config()
    except ConfigError as e:
        print_error(f"Failed to load config: {escape(str(e))}")
        raise typer.Exit(code=1) from e

    console.print(tomli_w.dumps(config.model_dump()), highlight=False, markup=False)
