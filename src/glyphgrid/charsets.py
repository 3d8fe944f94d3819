FIRST_PRINTABLE = 32
LAST_PRINTABLE = 126

ASCII_PRINTABLE = "".join(chr(i) for i in range(FIRST_PRINTABLE, LAST_PRINTABLE + 1))

DIGITS = "0123456789"

# ASCII characters with a wide spread of ink density
TEXTURE_ASCII = " .,:;!'-/\\xX*+=#@"

NAMED = {
    "all": ASCII_PRINTABLE,
    "space": " ",
}


def is_printable(char: str) -> bool:
    return len(char) == 1 and FIRST_PRINTABLE <= ord(char) <= LAST_PRINTABLE


def expand(expression: str) -> str:
    """Expand a charset expression into the characters it names.

    Accepts a single printable character, a named set (``all``, ``space``) or
    an inclusive range such as ``a-z``. Reversed ranges (``z-a``) are swapped.
    """
    if len(expression) == 1 and is_printable(expression):
        return expression
    if expression in NAMED:
        return NAMED[expression]
    if len(expression) == 3 and expression[1] == "-":
        first, last = expression[0], expression[2]
        if is_printable(first) and is_printable(last):
            lo, hi = sorted((ord(first), ord(last)))
            return "".join(chr(i) for i in range(lo, hi + 1))
    raise ValueError(f"Not a charset expression: {expression!r}")
