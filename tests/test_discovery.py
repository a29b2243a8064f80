import asyncio
from pathlib import Path

import pytest

from toolengine import DirectoryToolSource, EngineSettings, create_runtime
from toolengine.core.errors import ConfigError, LoadError


def test_discover_bundled_tools(tools_root):
    source = DirectoryToolSource(tools_root)
    assert source.list_tool_ids() == ["calculator", "echo", "keyword_extractor", "text_stats"]
    assert source.read_config("calculator")["enabled"] is False
    assert source.read_config("keyword_extractor")["dependencies"] == ["text_stats"]


def test_missing_root_discovers_nothing(tmp_path):
    assert DirectoryToolSource(tmp_path / "nope").list_tool_ids() == []


def test_skips_private_and_config_less_dirs(tmp_path):
    for name in ("_draft", ".hidden", "empty", "real"):
        (tmp_path / name).mkdir()
    for name in ("_draft", ".hidden", "real"):
        (tmp_path / name / "config.yaml").write_text(f"id: {name}\n")
    assert DirectoryToolSource(tmp_path).list_tool_ids() == ["real"]


def test_config_id_must_match_directory(tmp_path):
    (tmp_path / "alpha").mkdir()
    (tmp_path / "alpha" / "config.yaml").write_text("id: beta\n")
    with pytest.raises(ConfigError):
        DirectoryToolSource(tmp_path).read_config("alpha")


def _tool_pkg(root: Path, tool_id: str, entry: str, code: str):
    d = root / tool_id
    d.mkdir()
    (d / "config.yaml").write_text(f"id: {tool_id}\nentry: {entry}\n")
    (d / "tool_impl.py").write_text(code)


def test_entry_class_must_exist(tmp_path):
    _tool_pkg(tmp_path, "a", "tool_impl:Missing", "X = 1\n")
    source = DirectoryToolSource(tmp_path)
    with pytest.raises(LoadError):
        source.resolve_engine("a", source.read_config("a"))


def test_entry_class_must_be_engine(tmp_path):
    _tool_pkg(tmp_path, "a", "tool_impl:NotEngine", "class NotEngine:\n    pass\n")
    source = DirectoryToolSource(tmp_path)
    with pytest.raises(LoadError):
        source.resolve_engine("a", source.read_config("a"))


def test_entry_module_must_exist(tmp_path):
    _tool_pkg(tmp_path, "a", "other:Engine", "")
    source = DirectoryToolSource(tmp_path)
    with pytest.raises(LoadError):
        source.resolve_engine("a", source.read_config("a"))


def test_broken_module_fails_only_that_tool(tmp_path):
    _tool_pkg(tmp_path, "broken", "tool_impl:Engine", "raise ImportError('missing dependency')\n")
    runtime = create_runtime(EngineSettings(tools_dir=tmp_path))
    results = asyncio.run(runtime.loader.load_all_plugins())
    assert results == {"broken": False}
    assert not runtime.registry.is_registered("broken")


def test_runtime_loads_and_executes_bundled_tools(tools_root):
    async def scenario():
        runtime = await create_runtime(EngineSettings(tools_dir=tools_root)).start()
        try:
            loaded = {m.id for m in runtime.orchestrator.get_all_tools()}
            stats = await runtime.admin.execute(
                "text_stats", {"user_id": "alice", "tenant_id": "acme", "input": {"text": "hello world\nfoo"}}
            )
            keywords = await runtime.admin.execute(
                "keyword_extractor",
                {"user_id": "alice", "tenant_id": "acme", "input": {"text": "the cat and the cat sat"}},
            )
            invalid = await runtime.admin.execute("text_stats", {"user_id": "alice", "tenant_id": "acme", "input": 5})
            disabled = await runtime.admin.execute("calculator", {"input": {"op": "add", "a": 1, "b": 2}})
            activated = await runtime.admin.activate("calculator", "admin")
            calc = await runtime.admin.execute("calculator", {"input": {"op": "add", "a": 1, "b": 2}})
            return loaded, stats, keywords, invalid, disabled, activated, calc
        finally:
            await runtime.stop()

    loaded, stats, keywords, invalid, disabled, activated, calc = asyncio.run(scenario())
    assert loaded == {"echo", "keyword_extractor", "text_stats"}
    assert stats.success
    assert stats.data["words"] == 3 and stats.data["lines"] == 2 and stats.data["chars"] == 15
    assert keywords.data["keywords"][0] == {"term": "cat", "count": 2}
    assert invalid.error == "Validation failed: input.text must be a string"
    assert disabled.error == "Tool calculator is not registered"
    assert activated["success"] is True
    assert calc.data == {"result": 3}


def test_settings_reach_engine_constructor(tmp_path):
    _tool_pkg(
        tmp_path,
        "shout",
        "tool_impl:Shout",
        "from toolengine import BaseEngine\n"
        "class Shout(BaseEngine):\n"
        "    def __init__(self, tool_id, volume=1):\n"
        "        super().__init__(tool_id)\n"
        "        self.volume = volume\n"
        "    async def initialize(self): pass\n"
        "    async def execute(self, context):\n"
        "        return self.create_success_result(self.volume, 0.0)\n"
        "    async def cleanup(self): pass\n"
        "    def validate(self, input_data):\n"
        "        return self.create_validation_result(True)\n",
    )
    (tmp_path / "shout" / "config.yaml").write_text("id: shout\nentry: tool_impl:Shout\nsettings:\n  volume: 11\n")
    runtime = create_runtime(EngineSettings(tools_dir=tmp_path, auto_load=False))

    async def scenario():
        await runtime.start()
        assert await runtime.orchestrator.load_tool("shout")
        return await runtime.orchestrator.execute_tool("shout", {"input": None})

    result = asyncio.run(scenario())
    assert result.data == 11


def test_registered_factory_takes_precedence_over_entry(tmp_path, spy_engine_cls):
    (tmp_path / "a").mkdir()
    (tmp_path / "a" / "config.yaml").write_text("id: a\n")
    source = DirectoryToolSource(tmp_path)
    source.register_factory("a", spy_engine_cls)
    factory = source.resolve_engine("a", source.read_config("a"))
    assert isinstance(factory("a"), spy_engine_cls)
