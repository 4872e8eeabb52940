"""
Zoondo CLI - Command-line interface for the engine.

Usage:
    zoondo serve [--host HOST] [--port PORT]    Run the API server
    zoondo tribes                                List tribes and cards
    zoondo moves <tribe> <card> <x> <y>          Show a card's moves on an empty board
"""

import argparse
import sys


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Zoondo - Two-player card battle engine",
        prog="zoondo",
    )
    parser.add_argument("--log-level", default=None, help="Logging level (default from ZOONDO_LOG_LEVEL)")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the API server")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address")
    serve_parser.add_argument("--port", type=int, default=8000, help="Bind port")
    serve_parser.add_argument("--reload", action="store_true", help="Reload on code changes")

    # Tribes command
    subparsers.add_parser("tribes", help="List tribes and their cards")

    # Moves command
    moves_parser = subparsers.add_parser("moves", help="Show legal moves of a card on an empty board")
    moves_parser.add_argument("tribe", help="Tribe slug")
    moves_parser.add_argument("card", help="Card slug")
    moves_parser.add_argument("x", type=int)
    moves_parser.add_argument("y", type=int)
    moves_parser.add_argument("--second", action="store_true", help="Move as the second player (mirrored)")

    args = parser.parse_args(argv)

    from .config import configure_logging
    configure_logging(args.log_level)

    if args.command == "serve":
        cmd_serve(args)
    elif args.command == "tribes":
        cmd_tribes(args)
    elif args.command == "moves":
        cmd_moves(args)
    else:
        parser.print_help()
        sys.exit(1)


def cmd_serve(args):
    """Run the API server."""
    import uvicorn

    uvicorn.run("zoondo.api.app:app", host=args.host, port=args.port, reload=args.reload)


def cmd_tribes(args):
    """List tribes and their cards."""
    from .games.classic import create_classic_catalog

    catalog = create_classic_catalog()
    for tribe in catalog.list_tribes():
        print(f"{tribe.name} ({tribe.slug})")
        for card in tribe.cards:
            bound = catalog.resolve_card(card.ref)
            corners = " ".join(str(c) for c in card.corners)
            power = f"  power: {card.power}" if card.power else ""
            if card.power and bound.resolver is None:
                power += " (not implemented)"
            print(f"  - {card.slug:<14} [{corners}] {card.type}{power}")


def cmd_moves(args):
    """Print the destinations of one card placed alone on the board."""
    from .engine_core import BoardCell, GameState, MovementResolver, Player, is_on_board
    from .games.classic import create_classic_catalog

    catalog = create_classic_catalog()
    try:
        tribe = catalog.tribe(args.tribe)
        ref = tribe.card_ref(args.card)
        catalog.resolve_card(ref)
    except KeyError as e:
        print(f"Error: {e.args[0]}")
        sys.exit(1)

    if not is_on_board(args.x, args.y):
        print(f"Error: ({args.x}, {args.y}) is off the board")
        sys.exit(1)

    state = GameState(room_id="cli")
    player = Player(player_id="cli", name="cli", tribe=tribe.slug, is_first_player=not args.second)
    state.players[player.player_id] = player
    cell = BoardCell(player=player.player_id, x=args.x, y=args.y, card=ref)
    state.place(cell)

    destinations = MovementResolver(catalog).legal_moves(state, cell)
    print(f"{args.card} at ({args.x}, {args.y}): {len(destinations)} destination(s)")
    for destination in destinations:
        print(f"  ({destination.x}, {destination.y})")


if __name__ == "__main__":
    main()
