"""Handler for 'ticketboard web' command."""

import shlex
import shutil
import sys

from textual_serve.server import Server


def web(args) -> int:
    ticketboard = shutil.which("ticketboard")
    if ticketboard is None:
        print("error: ticketboard not found on PATH", file=sys.stderr)
        return 1

    command = shlex.quote(ticketboard)
    if args.api_url:
        command += f" --api-url {shlex.quote(args.api_url)}"
    if args.user is not None:
        command += f" --user {args.user}"

    server = Server(command, host=args.host, port=args.port, title="ticketboard")

    print(f"serving board at http://{args.host}:{args.port}")
    server.serve()
    return 0
