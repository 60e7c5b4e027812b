"""Interactive menu loop driving the record store."""

import logging
from datetime import date
from typing import Callable

import click

from .output.formatters import format_output
from .store import NotFound, Record, RecordStore, StoreError
from .utils.validation import (
    ValidationFailure,
    parse_birth_date,
    parse_email,
    parse_full_name,
    parse_id,
    parse_role,
)

logger = logging.getLogger(__name__)

MENU = """Menu:
1. Add a new user
2. Update an existing user
3. Show a user
4. Delete a user
5. List all users
6. Quit"""


def prompt_record() -> Record:
    """Ask for every field of a record and validate it.

    Stops at the first invalid field, like the rest of the shell: the user is
    sent back to the menu rather than re-prompted.
    """
    record_id = parse_id(click.prompt("ID (11 digits)"))
    full_name = parse_full_name(click.prompt("Full name (10 to 100 characters)"))
    email = parse_email(click.prompt("Email"))
    birth_date = parse_birth_date(click.prompt("Birth date (DD-MM-YYYY)"))
    role = parse_role(click.prompt("Role (Admin/User/Guest)"))
    return Record(id=record_id, full_name=full_name, email=email, birth_date=birth_date, role=role)


class Shell:
    def __init__(self, store: RecordStore, output_format: str = "plain", today: date | None = None):
        self.store = store
        self.output_format = output_format
        self.today = today
        self._running = False
        self._actions: dict[str, Callable[[], None]] = {
            "1": self.add_user,
            "2": self.update_user,
            "3": self.show_user,
            "4": self.delete_user,
            "5": self.list_users,
            "6": self.quit,
        }

    def run(self) -> None:
        self._running = True
        while self._running:
            click.echo(MENU)
            try:
                choice = click.prompt("Choose an option").strip()
            except click.Abort:
                click.echo()
                self.quit()
                continue

            action = self._actions.get(choice)
            if action is None:
                click.echo("Invalid option, try again!")
                continue

            try:
                action()
            except click.Abort:
                click.echo()
                self.quit()
            except (ValidationFailure, StoreError) as e:
                logger.warning(f"Menu option {choice} failed: {e}")
                self._echo({"error": str(e)})

    def _echo(self, data) -> None:
        click.echo(format_output(data, self.output_format, today=self.today))

    def add_user(self) -> None:
        record = prompt_record()
        created = self.store.create(record)
        self._echo({"created": created})

    def update_user(self) -> None:
        record_id = click.prompt("User ID").strip()
        try:
            current = self.store.read(record_id)
        except NotFound:
            click.echo("User not found!")
            return

        self._echo({"found": current})
        record = prompt_record()
        updated = self.store.update(record_id, record)
        self._echo({"updated": updated})

    def show_user(self) -> None:
        record_id = click.prompt("User ID").strip()
        self._echo(self.store.read(record_id))

    def delete_user(self) -> None:
        record_id = click.prompt("User ID").strip()
        try:
            self.store.delete(record_id)
        except NotFound:
            click.echo("User not found for deletion!")
            return
        self._echo({"deleted": record_id})

    def list_users(self) -> None:
        self._echo(self.store.read_all())

    def quit(self) -> None:
        click.echo("Exiting...")
        self._running = False
