"""
Tristate adapters for other command-line libraries.

argparse
- `converter` turns a token into a TriState. It is named "TriState", so a
  rejected token reads "invalid TriState value: 'doug'" in argparse's error.
- add_argument(parser, *names, ...) registers a TriState argument with a
  metavar and a help text listing the accepted spellings.

Example
    >>> import argparse
    >>> parser = argparse.ArgumentParser()
    >>> add_argument(parser, "--archived", "-a", help="filter on archived rows")
    >>> parser.parse_args(["-a", "no"]).archived
    <TriState.FALSE: 1>
"""
from .utils import rename
from .values import TriState


@rename("TriState")
def converter(text, /):
    return TriState.parse(text)


def add_argument(parser, /, *names, default=TriState.NONE, help=None, **options):
    """
    Add a TriState argument to an argparse parser (or argument group).

    Extra options are forwarded to parser.add_argument; `type` is fixed.
    """
    if not isinstance(default, TriState):
        raise TypeError("add_argument() default must be a TriState")
    if "type" in options:
        raise TypeError("add_argument() does not accept a 'type' option")
    options.setdefault("metavar", "TRISTATE")

    suffix = "true: 1/t/y/yes, false: 0/f/n/no, none: -1/u/any/all/... (default %s)" % default
    return parser.add_argument(
        *names,
        type=converter,
        default=default,
        help="%s (%s)" % (help, suffix) if help else suffix,
        **options,
    )


__all__ = (
    "converter",
    "add_argument",
)
