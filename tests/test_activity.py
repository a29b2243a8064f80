import pytest

from toolengine import ActivityLogger, ToolAction


def test_eviction_drops_oldest_at_cap():
    log = ActivityLogger(max_logs=3)
    first = log.log("a", ToolAction.LOADED, "admin")
    for tid in ("b", "c", "d"):
        log.log(tid, ToolAction.LOADED, "admin")
    assert len(log) == 3
    ids = [e.id for e in log.get_all_logs(limit=None)]
    assert first.id not in ids
    assert [e.tool_id for e in log.get_recent_logs()] == ["d", "c", "b"]


def test_invalid_cap():
    with pytest.raises(ValueError):
        ActivityLogger(max_logs=0)


def test_queries_are_newest_first_and_limited():
    log = ActivityLogger()
    for i in range(5):
        log.log("t", ToolAction.EXECUTED, "alice", details={"n": i})
    entries = log.get_tool_logs("t", limit=2)
    assert [e.details["n"] for e in entries] == [4, 3]


def test_filters():
    log = ActivityLogger()
    log.log("a", ToolAction.EXECUTED, "alice", True)
    log.log("a", ToolAction.EXECUTED, "bob", False, error_message="boom")
    log.log("b", "disabled", "alice")

    assert len(log.get_all_logs({"tool_id": "a"})) == 2
    assert len(log.get_all_logs({"action": "executed"})) == 2
    assert [e.performed_by for e in log.get_all_logs({"performed_by": "alice"})] == ["alice", "alice"]
    failed = log.get_all_logs({"success": False})
    assert len(failed) == 1 and failed[0].error_message == "boom"
    assert len(log.get_all_logs({"success": True, "tool_id": "b"})) == 1
    assert log.get_all_logs({"from_timestamp": failed[0].timestamp + 3600}) == []
    assert len(log.get_all_logs({"to_timestamp": failed[0].timestamp + 3600})) == 3


def test_logs_by_action_and_errors():
    log = ActivityLogger()
    log.log("a", ToolAction.LOADED, "admin")
    log.log("a", ToolAction.ERROR, "admin", False, error_message="x")
    log.log("b", ToolAction.EXECUTED, "admin", False, error_message="y")
    assert [e.tool_id for e in log.get_logs_by_action(ToolAction.LOADED)] == ["a"]
    assert len(log.get_error_logs()) == 2
    assert [e.error_message for e in log.get_error_logs(tool_id="b")] == ["y"]


def test_statistics():
    log = ActivityLogger()
    log.log("a", ToolAction.LOADED, "admin")
    log.log("a", ToolAction.EXECUTED, "alice", False)
    log.log("b", ToolAction.EXECUTED, "alice")
    stats = log.get_statistics()
    assert stats["total_logs"] == 3
    assert stats["success_count"] == 2
    assert stats["error_count"] == 1
    assert stats["action_counts"]["executed"] == 2
    assert stats["action_counts"]["unloaded"] == 0
    assert stats["recent_activity_count"] == 3
    assert log.get_statistics("a")["total_logs"] == 2


def test_clear():
    log = ActivityLogger()
    log.log("a", ToolAction.LOADED, "admin")
    log.log("b", ToolAction.LOADED, "admin")
    log.log("a", ToolAction.UNLOADED, "admin")
    assert log.clear_tool_logs("a") == 2
    assert len(log) == 1
    log.clear_logs()
    assert len(log) == 0


def test_entry_to_dict():
    entry = ActivityLogger().log("a", ToolAction.ENABLED, "admin", details={"k": 1})
    d = entry.to_dict()
    assert d["action"] == "enabled"
    assert d["details"] == {"k": 1}
    assert d["success"] is True
