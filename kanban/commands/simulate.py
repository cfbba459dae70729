"""
kb simulate - Let an autopilot play the board.

Each day the autopilot pulls stories one step downstream wherever the rules
allow, puts idle resources on the matching stories that have the fewest
workers, then completes the round.
"""

from kanban.game import Game
from kanban.lib.config import GameConfig
from kanban.lib.types import BOARD_STAGES, EXPECTED_KIND, Stage
from kanban.workflow.state_machine import next_stage


def pull_stories(game: Game) -> int:
    """Move every story one step forward where allowed, downstream first.

    Returns the number of accepted moves.
    """
    order = {stage: i for i, stage in enumerate(BOARD_STAGES)}
    stories = sorted(game.list_active_stories(), key=lambda s: order[s.stage], reverse=True)

    moved = 0
    for story in stories:
        target = next_stage(story.stage)
        if target is None:
            continue
        if game.attempt_move(story.id, target):
            moved += 1
    return moved


def staff_stories(game: Game) -> int:
    """Put every available resource on a matching story. Returns allocations made."""
    allocated = 0
    for resource in game.list_available_resources():
        candidates = [
            s for s in game.list_active_stories()
            if EXPECTED_KIND.get(s.stage) is resource.kind and s.remaining_effort
        ]
        if not candidates:
            continue
        target = min(candidates, key=lambda s: (len(s.allocated_resources), s.id))
        if game.attempt_allocate(resource.id, target.id):
            allocated += 1
    return allocated


def play_day(game: Game):
    """One autopilot day. Returns the round report (None once game is over)."""
    pull_stories(game)
    staff_stories(game)
    return game.complete_round()


def cmd_simulate(args, config: GameConfig) -> int:
    """Run the autopilot and print a per-round summary."""
    if args.seed is not None:
        config.seed = args.seed

    game = Game(config)
    rounds = args.rounds if args.rounds is not None else config.max_days

    print(f"{'DAY':<5} {'PROFIT':>8} {'TOTAL':>9}  {'DEPLOYED':>8}  ADVANCED")
    print("─" * 60)

    played = 0
    while played < rounds:
        report = play_day(game)
        if report is None:
            break
        played += 1
        deployed = sum(1 for s in game.list_active_stories() if s.stage is Stage.DEPLOYED)
        advanced = ", ".join(f"{sid}->{to.value}" for sid, _, to in report.advanced) or "-"
        print(f"{report.day:<5} {report.profit:>8} {report.total_profit:>9}  {deployed:>8}  {advanced}")

    print("─" * 60)
    print(f"{played} round(s) played, final profit: ${game.get_total_profit()}")
    if game.is_game_over():
        print("Game over.")
    return 0
