from datetime import date, datetime

DISPLAY_DATE_FORMAT = "%d-%m-%Y"


def parse_display_date(text: str) -> date:
    return datetime.strptime(text.strip(), DISPLAY_DATE_FORMAT).date()


def format_display_date(value: date) -> str:
    return value.strftime(DISPLAY_DATE_FORMAT)


def calculate_age(birth_date: date, today: date | None = None) -> int:
    """Whole years since birth_date, counting a birthday only once it has passed."""
    today = today or date.today()
    age = today.year - birth_date.year
    if (today.month, today.day) < (birth_date.month, birth_date.day):
        age -= 1
    return age
