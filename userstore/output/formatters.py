import json
from datetime import date
from typing import Any

from ..store.types import Record
from ..utils.dates import calculate_age, format_display_date


def format_output(data: Any, output_format: str = "plain", today: date | None = None) -> str:
    if output_format == "json":
        return json.dumps(to_jsonable(data), indent=2, ensure_ascii=False)
    return format_plain(data, today=today)


def to_jsonable(data: Any) -> Any:
    if isinstance(data, Record):
        return data.to_json_dict()
    if isinstance(data, dict):
        return {key: to_jsonable(value) for key, value in data.items()}
    return data


def format_plain(data: Any, today: date | None = None) -> str:
    if data is None:
        return ""

    if isinstance(data, str):
        return data

    if isinstance(data, Record):
        return format_record(data, today=today)

    if isinstance(data, dict):
        if "error" in data:
            return f"Error: {data['error']}"

        if "created" in data:
            return f"User created with ID: {data['created'].id}"

        if "updated" in data:
            return f"User updated: {format_record(data['updated'], today=today)}"

        if "deleted" in data:
            return f"User deleted: {data['deleted']}"

        if "found" in data:
            return f"User found: {format_record(data['found'], today=today)}"

        if all(isinstance(value, Record) for value in data.values()):
            return format_records(data, today=today)

        return json.dumps(to_jsonable(data), indent=2)

    return str(data)


def format_record(record: Record, today: date | None = None) -> str:
    return (
        f"ID: {record.id}, "
        f"Name: {record.full_name}, "
        f"Email: {record.email}, "
        f"Birth: {format_display_date(record.birth_date)}, "
        f"Role: {record.role.value}, "
        f"Age: {calculate_age(record.birth_date, today)}"
    )


def format_records(records: dict[str, Record], today: date | None = None) -> str:
    if not records:
        return "No users found"

    lines = ["All users:"]
    for record_id in sorted(records):
        lines.append(f"  {format_record(records[record_id], today=today)}")
    return "\n".join(lines)
