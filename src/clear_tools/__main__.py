from __future__ import annotations

import sys

import typed_argparse as tap

from clear_tools.commands import interactive, run


def main(argv: list[str]) -> None:
    tap.Parser(
        tap.SubParserGroup(
            tap.SubParser("run", run.Args),
            tap.SubParser("interactive", interactive.Args),
        ),
    ).bind(
        run.main,
        interactive.main,
    ).run(argv)


def main_w() -> None:
    main(sys.argv[1:])


if __name__ == "__main__":
    main_w()
