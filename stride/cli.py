"""
Stride command line.

    stride status
    stride claim
    stride unlock xp_1
    stride upgrade pet_01
    stride equip pet_01
    stride run '{"durationSeconds": 1800, "sprintsCompleted": 4, ...}'
    stride tree
    stride tasks [add TITLE --due 2026-10-20 --recurrence weekly | done ID]
"""

import argparse
import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

from stride.abilities.types import NodeState
from stride.config.game import load_game_config
from stride.profile import FileBlobStore, GameRules, ProfileManager, ProfilePersistence
from stride.sync.messages import MessageDecodeError, RunSummaryPayload
from stride.tasks.scheduler import days_until_due
from stride.tasks.types import TaskRecurrence


logger = logging.getLogger(__name__)

DEFAULT_STATE_DIR = Path.home() / ".stride"


def build_manager(state_dir: Path, config_dir: Optional[Path] = None) -> ProfileManager:
    config = load_game_config(config_dir)
    persistence = ProfilePersistence(
        FileBlobStore(state_dir),
        rules_factory=lambda: GameRules.from_config(config),
    )
    return ProfileManager(persistence)


def _emit(data: dict, as_json: bool, lines: list[str]):
    if as_json:
        print(json.dumps(data, indent=2))
    else:
        print("\n".join(lines))


def _read_payload(value: str) -> dict:
    """Inline JSON, or a path to a JSON file."""
    path = Path(value)
    if not value.lstrip().startswith("{") and path.exists():
        value = path.read_text()
    return json.loads(value)


def cmd_status(manager: ProfileManager, args) -> int:
    player = manager.player
    profile = player.profile
    rank = player.rank
    equipped = player.equipped_pet
    data = {
        "level": player.level,
        "experience": profile.experience,
        "rank": rank.id,
        "rank_points": profile.rank_points,
        "rank_progress": round(player.rank_progress(), 3),
        "coins": player.coins,
        "gems": player.gems,
        "ability_points": player.abilities.ability_points,
        "pet_points": player.abilities.pet_points,
        "equipped_pet": equipped.pet_definition_id if equipped else None,
        "current_streak": profile.current_streak,
        "total_runs": profile.total_runs,
        "inventory": {r.value: n for r, n in player.inventory.items()},
    }
    _emit(data, args.json, [
        f"Level {data['level']} ({profile.experience} XP, {player.level_progress():.0%} to next)",
        f"Rank  {rank.name} ({profile.rank_points} RP, {data['rank_progress']:.0%} to next)",
        f"Coins {player.coins}  Gems {player.gems}",
        f"AP {data['ability_points']}  PP {data['pet_points']}",
        f"Pet   {data['equipped_pet'] or '-'}",
        f"Streak {profile.current_streak} day(s), {profile.total_runs} run(s)",
    ])
    return 0


def cmd_claim(manager: ProfileManager, args) -> int:
    result = manager.claim_daily_reward()
    if result:
        lines = [f"Day {result.day}: +{result.reward.coins} coins"
                 + (f", +{result.reward.gems} gems" if result.reward.gems else "")]
    else:
        lines = [f"Cannot claim: {result.message}"]
    _emit(result.to_dict(), args.json, lines)
    return 0 if result else 1


def cmd_unlock(manager: ProfileManager, args) -> int:
    result = manager.unlock_ability(args.node_id)
    lines = [f"Unlocked {args.node_id}" if result else f"Cannot unlock {args.node_id}: {result.message}"]
    _emit(result.to_dict(), args.json, lines)
    return 0 if result else 1


def cmd_upgrade(manager: ProfileManager, args) -> int:
    result = manager.upgrade_pet_ability(args.pet_id)
    data = result.to_dict()
    if result:
        # Levels are keyed by definition id; args.pet_id may be an instance id
        pet = manager.player.get_pet(args.pet_id)
        data["level"] = manager.player.abilities.pet_ability_level(pet.pet_definition_id)
        lines = [f"{args.pet_id} ability now level {data['level']}"]
    else:
        lines = [f"Cannot upgrade {args.pet_id}: {result.message}"]
    _emit(data, args.json, lines)
    return 0 if result else 1


def cmd_equip(manager: ProfileManager, args) -> int:
    result = manager.equip_pet(args.pet_id)
    lines = [f"Equipped {args.pet_id}" if result else f"Cannot equip {args.pet_id}: {result.message}"]
    _emit(result.to_dict(), args.json, lines)
    return 0 if result else 1


def cmd_run(manager: ProfileManager, args) -> int:
    try:
        payload = RunSummaryPayload.from_dict(_read_payload(args.payload))
    except (json.JSONDecodeError, MessageDecodeError, OSError) as e:
        print(f"Invalid run payload: {e}", file=sys.stderr)
        return 2

    run = manager.complete_run(payload, datetime.now())
    _emit(run.to_dict(), args.json, [
        f"Run {run.formatted_duration}, {run.sprints_completed}/{run.sprints_total} sprints",
        f"+{run.rank_points_earned} RP, +{run.experience_earned} XP, +{run.coins_earned} coins",
        f"Streak {manager.player.profile.current_streak} day(s)",
    ])
    return 0


def cmd_tree(manager: ProfileManager, args) -> int:
    player = manager.player
    engine = player.rules.ability_engine
    rows = []
    lines = [f"{player.abilities.ability_points} AP available"]
    for node in sorted(engine.tree.nodes, key=lambda n: (n.tier, n.id)):
        state = engine.node_state(player.abilities, node.id)
        rows.append({**node.to_dict(), "state": state.value})
        marker = {NodeState.UNLOCKED: "*", NodeState.UNLOCKABLE: "+", NodeState.LOCKED: " "}[state]
        lines.append(f"[{marker}] T{node.tier} {node.id:<24} {node.cost} AP  {node.effect.description}")
    _emit({"nodes": rows}, args.json, lines)
    return 0


def cmd_tasks(manager: ProfileManager, args) -> int:
    now = datetime.now()
    if args.action == "add":
        try:
            due = datetime.fromisoformat(args.due) if args.due else None
        except ValueError as e:
            print(f"Invalid due date: {e}", file=sys.stderr)
            return 2
        task = manager.create_task(args.title, due_date=due,
                                   recurrence=TaskRecurrence(args.recurrence))
        _emit(task.to_dict(), args.json, [f"Added {task.id[:8]} {task.title}"])
        return 0

    if args.action == "done":
        done = manager.complete_task(args.task_id, now)
        _emit({"success": done}, args.json,
              ["Completed" if done else f"No open task matching '{args.task_id}'"])
        return 0 if done else 1

    manager.check_recurring_tasks(now)
    board = manager.player.tasks
    pending = board.pending_tasks()
    lines = []
    for task in pending:
        days = days_until_due(task, now)
        due = "" if days is None else ("overdue" if days < 0 else f"in {days}d")
        lines.append(f"{task.id[:8]}  {task.title:<30} {task.recurrence.display_name:<9} {due}")
    _emit({"pending": [t.to_dict() for t in pending]}, args.json, lines or ["No pending tasks"])
    return 0


COMMANDS = {
    "status": cmd_status,
    "claim": cmd_claim,
    "unlock": cmd_unlock,
    "upgrade": cmd_upgrade,
    "equip": cmd_equip,
    "run": cmd_run,
    "tree": cmd_tree,
    "tasks": cmd_tasks,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="stride", description="Stride progression engine")
    parser.add_argument("--state-dir", type=Path, default=DEFAULT_STATE_DIR,
                        help="Directory holding the player snapshot")
    parser.add_argument("--config-dir", type=Path, default=None,
                        help="Game config directory (default: STRIDE_CONFIG_DIR or configs/)")
    parser.add_argument("--json", action="store_true", help="Print JSON output")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    subparsers.add_parser("status", help="Show the player profile")
    subparsers.add_parser("claim", help="Claim today's daily reward")

    unlock_parser = subparsers.add_parser("unlock", help="Unlock an ability node")
    unlock_parser.add_argument("node_id", help="Ability node id (e.g. xp_1)")

    upgrade_parser = subparsers.add_parser("upgrade", help="Upgrade a pet's ability level")
    upgrade_parser.add_argument("pet_id", help="Pet definition id (e.g. pet_01)")

    equip_parser = subparsers.add_parser("equip", help="Equip an owned pet")
    equip_parser.add_argument("pet_id", help="Pet definition or instance id")

    run_parser = subparsers.add_parser("run", help="Apply a run summary")
    run_parser.add_argument("payload", help="Run summary JSON, inline or a file path")

    subparsers.add_parser("tree", help="Show the ability tree")

    tasks_parser = subparsers.add_parser("tasks", help="List or edit tasks")
    tasks_sub = tasks_parser.add_subparsers(dest="action")
    add_parser = tasks_sub.add_parser("add", help="Add a task")
    add_parser.add_argument("title")
    add_parser.add_argument("--due", help="Due date (ISO format)")
    add_parser.add_argument("--recurrence", default="none",
                            choices=[r.value for r in TaskRecurrence])
    done_parser = tasks_sub.add_parser("done", help="Complete a task")
    done_parser.add_argument("task_id", help="Task id or id prefix")

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    if args.command is None:
        parser.print_help()
        return 1

    manager = build_manager(args.state_dir, args.config_dir)
    return COMMANDS[args.command](manager, args)


if __name__ == "__main__":
    sys.exit(main())
