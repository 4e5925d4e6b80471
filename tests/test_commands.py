import io
import json

import pytest

from services.commands import CommandBridge, serve_stdio


def _bridge(store):
    return CommandBridge(store)


def test_create_and_fetch_todo_over_bridge(store):
    bridge = _bridge(store)

    created = bridge.handle(
        {"id": 1, "command": "create_todo", "payload": {"request": {"title": "Call mom", "tags": ["family"]}}}
    )
    assert created["ok"] is True
    assert created["id"] == 1
    todo_id = created["data"]["id"]
    assert created["data"]["tags"] == ["family"]
    assert isinstance(created["data"]["created_at"], str)

    fetched = bridge.handle({"id": 2, "command": "get_todo", "payload": {"id": todo_id}})
    assert fetched == {"id": 2, "ok": True, "data": created["data"]}


def test_list_results_are_plain_lists(store):
    bridge = _bridge(store)
    bridge.handle({"id": 1, "command": "create_note", "payload": {"request": {"title": "a"}}})

    reply = bridge.handle({"id": 2, "command": "get_all_notes"})

    assert reply["ok"] is True
    assert [n["title"] for n in reply["data"]] == ["a"]


def test_delete_returns_null_data(store):
    reply = _bridge(store).handle({"id": 3, "command": "delete_event", "payload": {"id": "nope"}})
    assert reply == {"id": 3, "ok": True, "data": None}


def test_not_found_is_reported(store):
    reply = _bridge(store).handle({"id": 4, "command": "get_habit", "payload": {"id": "nope"}})

    assert reply["ok"] is False
    assert reply["error"] == "Habit not found: nope"


def test_unknown_command(store):
    reply = _bridge(store).handle({"id": 5, "command": "drop_everything"})
    assert reply == {"id": 5, "ok": False, "error": "Unknown command: drop_everything"}


def test_invalid_request_body(store):
    reply = _bridge(store).handle(
        {"id": 6, "command": "create_pomodoro_session", "payload": {"request": {"session_type": "nap"}}}
    )
    assert reply["ok"] is False
    assert reply["error"].startswith("Invalid request")


def test_missing_request_object(store):
    reply = _bridge(store).handle({"id": 7, "command": "create_habit", "payload": {}})
    assert reply["ok"] is False
    assert "request" in reply["error"]


def test_wrong_parameters(store):
    reply = _bridge(store).handle({"id": 8, "command": "get_todo", "payload": {"todo": "x"}})
    assert reply["ok"] is False


def test_habit_commands_flow(store):
    bridge = _bridge(store)
    habit = bridge.handle({"id": 1, "command": "create_habit", "payload": {"request": {"name": "Read"}}})
    habit_id = habit["data"]["id"]

    toggled = bridge.handle(
        {"id": 2, "command": "toggle_habit_record", "payload": {"habit_id": habit_id, "date": "2024-05-01"}}
    )
    stats = bridge.handle(
        {"id": 3, "command": "get_habit_stats", "payload": {"habit_id": habit_id, "today": "2024-05-01"}}
    )

    assert toggled["data"]["completed"] is True
    assert stats["data"]["streak_days"] == 1
    assert stats["data"]["completion_rate"] == 100


def test_bad_date_in_stats_is_an_error(store):
    bridge = _bridge(store)
    habit = bridge.handle({"id": 1, "command": "create_habit", "payload": {"request": {"name": "Read"}}})

    reply = bridge.handle(
        {"id": 2, "command": "get_habit_stats", "payload": {"habit_id": habit["data"]["id"], "today": "soon"}}
    )
    assert reply["ok"] is False


def test_handle_line_malformed_json(store):
    reply = _bridge(store).handle_line("{not json")
    assert reply["ok"] is False
    assert reply["id"] is None
    assert reply["error"].startswith("Malformed JSON")


def test_handle_line_rejects_non_object(store):
    reply = _bridge(store).handle_line("[1, 2]")
    assert reply == {"id": None, "ok": False, "error": "Message must be a JSON object"}


def test_serve_stdio_answers_every_line(store):
    lines = [
        json.dumps({"id": 1, "command": "get_pomodoro_settings"}),
        "",
        json.dumps({"id": 2, "command": "create_event", "payload": {"request": {"title": "Gym", "date": "2024-01-02"}}}),
        "garbage",
    ]
    instream = io.StringIO("\n".join(lines) + "\n")
    outstream = io.StringIO()

    handled = serve_stdio(_bridge(store), instream, outstream)

    replies = [json.loads(line) for line in outstream.getvalue().splitlines()]
    assert handled == 3
    assert [r["id"] for r in replies] == [1, 2, None]
    assert replies[0]["data"]["work_time"] == 25
    assert replies[1]["data"]["priority"] == "medium"
    assert replies[2]["ok"] is False


def test_oversized_integer_gets_an_error_reply_and_loop_continues(store):
    lines = [
        json.dumps({"id": 1, "command": "create_habit", "payload": {"request": {"name": "x", "target": 10**30}}}),
        json.dumps({"id": 2, "command": "get_pomodoro_settings"}),
    ]
    outstream = io.StringIO()

    handled = serve_stdio(_bridge(store), io.StringIO("\n".join(lines) + "\n"), outstream)

    replies = [json.loads(line) for line in outstream.getvalue().splitlines()]
    assert handled == 2
    assert replies[0]["id"] == 1
    assert replies[0]["ok"] is False
    assert replies[1]["ok"] is True
    assert store.execute("get_all_habits") == []


def test_partial_todo_update_is_rejected(store):
    bridge = _bridge(store)
    created = bridge.handle({"id": 1, "command": "create_todo", "payload": {"request": {"title": "Call mom"}}})
    todo_id = created["data"]["id"]
    bridge.handle({"id": 2, "command": "toggle_todo_completion", "payload": {"id": todo_id}})

    reply = bridge.handle(
        {"id": 3, "command": "update_todo", "payload": {"request": {"id": todo_id, "title": "renamed"}}}
    )

    assert reply["ok"] is False
    assert reply["error"].startswith("Invalid request")
    current = bridge.handle({"id": 4, "command": "get_todo", "payload": {"id": todo_id}})
    assert current["data"]["title"] == "Call mom"
    assert current["data"]["completed"] is True


@pytest.mark.parametrize(
    "command, request_body",
    [
        ("update_note", {"id": "n", "title": "t"}),
        ("update_habit", {"id": "h", "name": "Read"}),
        ("update_event", {"id": "e", "title": "Gym", "date": "2024-01-02"}),
        ("update_pomodoro_settings", {"work_time": 30}),
    ],
)
def test_partial_updates_are_rejected(store, command, request_body):
    reply = _bridge(store).handle({"id": 9, "command": command, "payload": {"request": request_body}})

    assert reply["ok"] is False
    assert reply["error"].startswith("Invalid request")
