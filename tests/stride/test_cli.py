"""Tests for the stride command line."""

import sys
from pathlib import Path

# Ensure project root is in sys.path
project_root = Path(__file__).parent.parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

import json

import pytest

from stride.cli import build_manager, main


@pytest.fixture
def run_cli(temp_dir, capsys):
    """Run the CLI against a temp state dir and return (exit code, parsed JSON)."""
    config_dir = temp_dir / "configs"
    config_dir.mkdir()

    def _run(*argv):
        code = main([
            "--state-dir", str(temp_dir / "state"),
            "--config-dir", str(config_dir),
            "--json",
            *argv,
        ])
        out = capsys.readouterr().out
        return code, json.loads(out) if out.strip() else None

    return _run


class TestCli:
    def test_status_of_fresh_player(self, run_cli):
        code, data = run_cli("status")

        assert code == 0
        assert data["level"] == 1
        assert data["rank"] == "bronze"
        assert data["equipped_pet"] is None

    def test_claim_once_per_day(self, run_cli):
        code, data = run_cli("claim")
        assert code == 0
        assert data["day"] == 1
        assert data["reward"]["coins"] == 50

        code, data = run_cli("claim")
        assert code == 1
        assert data["reason"] == "already_claimed"

        _, status = run_cli("status")
        assert status["coins"] == 50

    def test_unlock_without_points(self, run_cli):
        code, data = run_cli("unlock", "xp_1")

        assert code == 1
        assert data["message"] == "insufficient points"

    def test_run_inline_payload(self, run_cli):
        payload = json.dumps({
            "durationSeconds": 1500,
            "sprintsCompleted": 2,
            "sprintsTotal": 2,
            "xpEarned": 250,
            "petCaught": "pet_04",
        })

        code, data = run_cli("run", payload)

        assert code == 0
        assert data["experience_earned"] == 250

        _, status = run_cli("status")
        assert status["level"] == 3
        assert status["ability_points"] == 2
        assert status["equipped_pet"] == "pet_04"
        assert status["current_streak"] == 1

    def test_run_from_file(self, run_cli, temp_dir):
        path = temp_dir / "run.json"
        path.write_text(json.dumps({"durationSeconds": 600, "coinsEarned": 15}))

        code, _ = run_cli("run", str(path))
        _, status = run_cli("status")

        assert code == 0
        assert status["coins"] == 15

    def test_run_bad_payload(self, run_cli):
        code, data = run_cli("run", "{oops")

        assert code == 2
        assert data is None

    def test_tree(self, run_cli):
        code, data = run_cli("tree")

        assert code == 0
        assert len(data["nodes"]) == 14
        assert {n["state"] for n in data["nodes"]} == {"locked"}

    def test_tasks(self, run_cli):
        code, task = run_cli("tasks", "add", "Hill repeats", "--recurrence", "weekly")
        assert code == 0

        _, listing = run_cli("tasks")
        assert [t["title"] for t in listing["pending"]] == ["Hill repeats"]

        code, done = run_cli("tasks", "done", task["id"][:8])
        assert code == 0
        assert done == {"success": True}

        _, listing = run_cli("tasks")
        # Weekly task spawned its successor
        assert [t["title"] for t in listing["pending"]] == ["Hill repeats"]
        assert listing["pending"][0]["id"] != task["id"]

    def test_no_command(self, temp_dir, capsys):
        assert main(["--state-dir", str(temp_dir)]) == 1

    def test_tasks_add_bad_due_date(self, run_cli):
        code, data = run_cli("tasks", "add", "Long run", "--due", "garbage")

        assert code == 2
        assert data is None

        _, listing = run_cli("tasks")
        assert listing["pending"] == []

    def test_upgrade_by_instance_id(self, run_cli, temp_dir):
        manager = build_manager(temp_dir / "state", temp_dir / "configs")
        pet = manager.catch_pet("pet_02")
        manager.player.abilities.pet_points = 2
        manager.persistence.save(manager.player)

        code, data = run_cli("upgrade", pet.id)

        assert code == 0
        assert data["success"]
        assert data["level"] == 2

    def test_upgrade_unknown_pet(self, run_cli):
        code, data = run_cli("upgrade", "pet_03")

        assert code == 1
        assert data["reason"] == "unknown_pet"
        assert "level" not in data
