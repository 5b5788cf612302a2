from __future__ import annotations

from ansiview.color import DEFAULT_BACKGROUND, DEFAULT_FOREGROUND, MINIMUM_CONTRAST
from ansiview.settings import SchemaDict

SCHEMA: list[SchemaDict] = [
    {
        "key": "ansi",
        "title": "ANSI rendering",
        "type": "object",
        "fields": [
            {
                "key": "foreground",
                "title": "Default foreground",
                "help": "Color of text with no foreground set.",
                "type": "string",
                "default": DEFAULT_FOREGROUND,
            },
            {
                "key": "background",
                "title": "Default background",
                "help": "Color behind text with no background set.",
                "type": "string",
                "default": DEFAULT_BACKGROUND,
            },
            {
                "key": "contrast_correction",
                "title": "Contrast correction",
                "help": "Adjust text colors that are hard to read against their background.",
                "type": "boolean",
                "default": True,
            },
            {
                "key": "minimum_contrast",
                "title": "Minimum contrast ratio",
                "help": "4.5 is the WCAG AA level for normal text.",
                "type": "number",
                "default": MINIMUM_CONTRAST,
            },
        ],
    }
]
