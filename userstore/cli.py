import logging
from contextlib import contextmanager
from pathlib import Path

import click

from .output.formatters import format_output
from .shell import Shell
from .store import RecordStore, StoreError
from .utils.config import (
    get_config_path,
    get_data_file,
    get_log_dir,
    get_log_level,
    get_update_id_policy,
    load_config,
)
from .utils.validation import ValidationFailure, build_record

logger = logging.getLogger(__name__)


class OrderedGroup(click.Group):
    def __init__(self, *args, commands_order: list[str] | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.commands_order = commands_order or []

    def list_commands(self, ctx):
        commands = super().list_commands(ctx)
        if self.commands_order:
            ordered = [c for c in self.commands_order if c in commands]
            remaining = [c for c in commands if c not in self.commands_order]
            return ordered + remaining
        return commands


def configure_logging(config: dict) -> None:
    log_dir = get_log_dir()
    log_dir.mkdir(parents=True, exist_ok=True)

    logging.basicConfig(
        level=getattr(logging, get_log_level(config), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.FileHandler(log_dir / "userstore.log"),
        ],
    )


def get_config(ctx: click.Context) -> dict:
    if "config" not in ctx.obj:
        ctx.obj["config"] = load_config()
    return ctx.obj["config"]


def get_store(ctx: click.Context) -> RecordStore:
    """Open the store once per invocation.

    A snapshot that exists but cannot be read aborts the command before
    anything else runs.
    """
    if "store" in ctx.obj:
        return ctx.obj["store"]

    config = get_config(ctx)
    configure_logging(config)

    try:
        id_policy = get_update_id_policy(config)
    except ValueError as e:
        raise click.ClickException(f"{e}\nCheck {get_config_path()}")

    data_file = ctx.obj.get("data_file") or get_data_file(config)
    try:
        store = RecordStore.open(data_file, id_policy=id_policy)
    except StoreError as e:
        logger.error(f"Failed to open store: {e}")
        raise click.ClickException(str(e))

    ctx.obj["store"] = store
    return store


@contextmanager
def reported_errors():
    try:
        yield
    except (StoreError, ValidationFailure) as e:
        raise click.ClickException(str(e))


def output_format(ctx: click.Context) -> str:
    return "json" if ctx.obj["json"] else "plain"


def with_record_options(func):
    func = click.option("--role", prompt="Role (Admin/User/Guest)", help="Admin, User or Guest")(func)
    func = click.option("--birth", prompt="Birth date (DD-MM-YYYY)", help="Birth date as DD-MM-YYYY")(func)
    func = click.option("--email", prompt="Email", help="Email ending in .com or .br")(func)
    func = click.option("--name", "full_name", prompt="Full name (10 to 100 characters)", help="Full name")(func)
    return func


CLI_HELP = """Manage user records from the command line.

Run without a command (or with `userstore shell`) for the interactive menu.
The one-shot commands `add`, `show`, `list`, `update` and `delete` work on
the same data file; missing fields are prompted for.

Records are kept in users_data.txt in the data directory unless
`--data-file` or the `store.data_file` config setting says otherwise.
"""


@click.group(
    cls=OrderedGroup,
    commands_order=[
        "shell",
        "add",
        "show",
        "list",
        "update",
        "delete",
        "config",
    ],
    invoke_without_command=True,
    help=CLI_HELP,
    context_settings={"help_option_names": ["-h", "--help"], "max_content_width": 120},
)
@click.option("--json", "json_output", is_flag=True, help="Output as JSON")
@click.option(
    "--data-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Data file to use instead of the configured one",
)
@click.pass_context
def cli(ctx, json_output, data_file):
    ctx.ensure_object(dict)
    ctx.obj["json"] = json_output
    ctx.obj["data_file"] = data_file

    # Open before the subcommand parses its options, so a corrupt data file
    # aborts ahead of any field prompts.
    if ctx.invoked_subcommand != "config" and not ctx.resilient_parsing:
        get_store(ctx)

    if ctx.invoked_subcommand is None:
        ctx.invoke(shell)


@cli.command()
@click.pass_context
def shell(ctx):
    """Start the interactive menu."""
    store = get_store(ctx)
    Shell(store, output_format(ctx)).run()


@cli.command()
@click.option("--id", "record_id", prompt="ID (11 digits)", help="11-digit user ID")
@with_record_options
@click.pass_context
def add(ctx, record_id, full_name, email, birth, role):
    """Add a new user."""
    store = get_store(ctx)
    with reported_errors():
        record = build_record(record_id, full_name, email, birth, role)
        created = store.create(record)
    click.echo(format_output({"created": created}, output_format(ctx)))


@cli.command()
@click.argument("record_id", metavar="ID")
@click.pass_context
def show(ctx, record_id):
    """Show the user with the given ID."""
    store = get_store(ctx)
    with reported_errors():
        record = store.read(record_id)
    click.echo(format_output(record, output_format(ctx)))


@cli.command("list")
@click.pass_context
def list_users(ctx):
    """List all users."""
    store = get_store(ctx)
    click.echo(format_output(store.read_all(), output_format(ctx)))


@cli.command()
@click.argument("record_id", metavar="ID")
@click.option("--new-id", default=None, help="ID carried by the replacement record (defaults to ID)")
@with_record_options
@click.pass_context
def update(ctx, record_id, new_id, full_name, email, birth, role):
    """Replace every field of the user with the given ID.

    The ID itself cannot change. Passing a different --new-id is rejected,
    or ignored when store.update_id_policy is "ignore".
    """
    store = get_store(ctx)
    with reported_errors():
        store.read(record_id)
        record = build_record(new_id or record_id, full_name, email, birth, role)
        updated = store.update(record_id, record)
    click.echo(format_output({"updated": updated}, output_format(ctx)))


@cli.command()
@click.argument("record_id", metavar="ID")
@click.pass_context
def delete(ctx, record_id):
    """Delete the user with the given ID."""
    store = get_store(ctx)
    with reported_errors():
        store.delete(record_id)
    click.echo(format_output({"deleted": record_id}, output_format(ctx)))


@cli.command()
@click.pass_context
def config(ctx):
    """Print config file location and contents."""
    config_path = get_config_path()
    click.echo(f"Config file: {config_path}")
    click.echo(f"Data file: {ctx.obj.get('data_file') or get_data_file(get_config(ctx))}")
    click.echo()

    if config_path.exists():
        click.echo(config_path.read_text())
    else:
        click.echo("(file does not exist, using defaults)")
