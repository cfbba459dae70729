"""
kb play - Play the board from the terminal.

Reads one command per line:

    status                      show the board
    move <story> <stage>        move a story (stage: prioritized, analyzed-done, ...)
    assign <resource> <story>   put a resource on a story
    unassign <resource>         send a resource back to the pool
    round                       complete the day
    sandbox                     toggle sandbox mode
    help                        list commands
    quit                        leave
"""

import shlex
from typing import Callable, Optional

from kanban.game import BoardSnapshot, Game
from kanban.lib.config import GameConfig
from kanban.lib.types import BOARD_STAGES, parse_stage
from kanban.workflow.rounds import RoundReport

PROMPT = "kb> "


def format_board(snapshot: BoardSnapshot) -> str:
    """Render a snapshot as plain text, one section per column."""
    lines = []
    header = f"Day {snapshot.day}/{snapshot.max_days}    Profit: ${snapshot.total_profit}"
    if snapshot.sandbox:
        header += "    [SANDBOX]"
    if snapshot.game_over:
        header += "    GAME OVER"
    lines.append(header)
    lines.append("=" * 60)

    wip_by_stage = {}
    for name, (count, limit) in snapshot.wip.items():
        wip_by_stage[name] = f"{count}/{limit}"

    for stage in BOARD_STAGES:
        column = snapshot.column(stage)
        group = _group_name(stage.value)
        wip = f" (WIP {wip_by_stage[group]})" if group in wip_by_stage else ""
        lines.append(f"{stage.value}{wip}")
        if not column:
            lines.append("  -")
        for card in column:
            title = card.description[:32] + "..." if len(card.description) > 32 else card.description
            detail = ""
            if stage.value != "deployed":
                detail = (
                    f"A {card.analysis[0]}/{card.analysis[1]}  "
                    f"D {card.dev[0]}/{card.dev[1]}  "
                    f"T {card.test[0]}/{card.test[1]}"
                )
            if stage.value == "prioritized":
                detail += f"  days {card.days_in_stage}"
            resources = f"  [{', '.join(card.resources)}]" if card.resources else ""
            lines.append(f"  #{card.id:<3} {title:<35} ${card.price:<4} {detail}{resources}")

    lines.append("-" * 60)
    available = ", ".join(snapshot.available_resources) or "none"
    lines.append(f"Available ({len(snapshot.available_resources)}): {available}")
    return "\n".join(lines)


def _group_name(stage_value: str) -> str:
    if stage_value.startswith("analyzed-"):
        return "analysis"
    if stage_value.startswith("developed-"):
        return "development"
    return stage_value


def format_report(report: RoundReport) -> str:
    """One-paragraph summary of a completed round."""
    parts = [f"Day {report.day} complete: +${report.profit} (total ${report.total_profit})"]
    for story_id, from_stage, to_stage in report.advanced:
        parts.append(f"  story {story_id}: {from_stage.value} -> {to_stage.value}")
    if report.reclaimed:
        parts.append(f"  back in pool: {', '.join(report.reclaimed)}")
    if report.wasted_effort:
        parts.append(f"  wasted effort: {report.wasted_effort}")
    if report.revealed:
        parts.append(f"  new in backlog: {', '.join(str(i) for i in report.revealed)}")
    return "\n".join(parts)


def _parse_story_id(raw: str) -> Optional[int]:
    try:
        return int(raw.lstrip("#"))
    except ValueError:
        return None


def run_command(game: Game, line: str, out: Callable[[str], None] = print) -> bool:
    """Execute one command line. Returns False when the session should end."""
    try:
        parts = shlex.split(line)
    except ValueError as e:
        out(f"ERROR: {e}")
        return True
    if not parts:
        return True

    cmd, args = parts[0].lower(), parts[1:]

    if cmd in ("quit", "exit", "q"):
        return False

    if cmd == "help":
        out(__doc__.split("\n\n", 1)[1].rstrip())
    elif cmd == "status":
        out(format_board(game.snapshot()))
    elif cmd == "move" and len(args) == 2:
        story_id = _parse_story_id(args[0])
        stage = parse_stage(args[1])
        if story_id is None or stage is None:
            out("ERROR: usage: move <story> <stage>")
        else:
            result = game.attempt_move(story_id, stage)
            out(result.detail if result else f"Rejected ({result.reason.value}): {result.detail}")
    elif cmd == "assign" and len(args) == 2:
        story_id = _parse_story_id(args[1])
        if story_id is None:
            out("ERROR: usage: assign <resource> <story>")
        else:
            result = game.attempt_allocate(args[0], story_id)
            out(result.detail if result else f"Rejected ({result.reason.value}): {result.detail}")
    elif cmd == "unassign" and len(args) == 1:
        result = game.return_resource_to_pool(args[0])
        out(result.detail if result else f"Rejected ({result.reason.value}): {result.detail}")
    elif cmd == "round":
        report = game.complete_round()
        if report is None:
            out("Game over - no more rounds.")
        else:
            out(format_report(report))
    elif cmd == "sandbox":
        on = game.toggle_sandbox_mode()
        out(f"Sandbox mode: {'ON' if on else 'OFF'}")
    else:
        out(f"Unknown command: {line.strip()} (try 'help')")

    return True


def cmd_play(args, config: GameConfig) -> int:
    """Interactive session on a fresh game."""
    if args.seed is not None:
        config.seed = args.seed

    game = Game(config)
    print(format_board(game.snapshot()))
    print()
    print("Type 'help' for commands.")

    while True:
        try:
            line = input(PROMPT)
        except (EOFError, KeyboardInterrupt):
            print()
            break
        if not run_command(game, line):
            break

    print(f"Final profit: ${game.get_total_profit()} after day {game.get_day_counter()}")
    return 0
