from rich.pretty import pprint

from tristate import *

__prog__ = "tristate-demo"

ROWS = [
    {"invoice": "A-001", "archived": False, "billed": True},
    {"invoice": "A-002", "archived": True, "billed": True},
    {"invoice": "A-003", "archived": False, "billed": False},
    {"invoice": "A-004", "archived": True, "billed": False},
]

archived = flag_p("archived", "a", TriState.NONE, "keep only archived (true) or live (false) rows")
billed = flag_p("billed", "b", TriState.NONE, "keep only billed (true) or unbilled (false) rows")


if __name__ == '__main__':
    parse()
    pprint([
        row for row in ROWS
        if archived.match(row["archived"], True) and billed.match(row["billed"], True)
    ])
