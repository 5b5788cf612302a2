from ansiview.ansi import ANSIParser, ANSIToken, strip, strip_ansi, tokenize
from ansiview.color import correct_contrast
from ansiview.style import ANSIStyle, apply_sgr

__all__ = [
    "ANSIParser",
    "ANSIStyle",
    "ANSIToken",
    "apply_sgr",
    "correct_contrast",
    "strip",
    "strip_ansi",
    "tokenize",
]
