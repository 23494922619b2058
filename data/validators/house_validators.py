"""Validators referenced by the sample Swagger documents."""

import re

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def isEmail(value):
    return bool(EMAIL_PATTERN.match(value or ""))


def isPositive(value):
    return value is not None and value > 0
