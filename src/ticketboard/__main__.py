"""Entry point for ticketboard CLI."""

import logging
import sys


def main():
    from ticketboard.cli import build_parser
    from ticketboard.cli._common import settings

    parser = build_parser()
    args = parser.parse_args()

    # No noun = TUI mode
    if args.noun is None:
        from ticketboard.ui import TicketBoardApp

        app = TicketBoardApp(settings(args))
        app.run()
        return

    logging.basicConfig(
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
        level=logging.INFO if args.verbose else logging.WARNING,
    )

    if not hasattr(args, "func"):
        parser.print_help()
        sys.exit(1)

    sys.exit(args.func(args))


if __name__ == "__main__":
    main()
