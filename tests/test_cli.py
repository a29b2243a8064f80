import json

import pytest

from toolengine.cli import build_parser, main


def test_cli_parser_help(capsys):
    parser = build_parser()
    args = parser.parse_args([])
    assert args.command is None
    assert main([]) == 1
    assert "usage" in capsys.readouterr().out


def test_cli_list(capsys, tools_root):
    code = main(["--tools-dir", str(tools_root), "list"])
    assert code == 0
    ids = {t["id"] for t in json.loads(capsys.readouterr().out)}
    assert ids == {"echo", "keyword_extractor", "text_stats"}


def test_cli_status_single_tool(capsys, tools_root):
    assert main(["--tools-dir", str(tools_root), "status", "--tool", "echo"]) == 0
    out = json.loads(capsys.readouterr().out)
    assert out["status"] == "active"
    assert main(["--tools-dir", str(tools_root), "status", "--tool", "calculator"]) == 1


def test_cli_status_overview(capsys, tools_root):
    assert main(["--tools-dir", str(tools_root), "--max-concurrent", "7", "status"]) == 0
    out = json.loads(capsys.readouterr().out)
    assert out["system"]["max_concurrent_executions"] == 7
    assert out["summary"]["total"] == 3


def test_cli_run(capsys, tools_root):
    assert main(["--tools-dir", str(tools_root), "run", "echo", "--input", '"hi"', "--tenant", "acme"]) == 0
    out = json.loads(capsys.readouterr().out)
    assert out["data"] == {"echo": "hi", "tenant_id": "acme"}


def test_cli_run_failures(capsys, tools_root):
    assert main(["--tools-dir", str(tools_root), "run", "calculator", "--input", "{}"]) == 1
    assert json.loads(capsys.readouterr().out)["error"] == "Tool calculator is not registered"
    assert main(["--tools-dir", str(tools_root), "run", "echo", "--input", "{bad"]) == 2


@pytest.mark.parametrize("value", ["0", "-1", "many"])
def test_cli_rejects_max_concurrent_below_one(capsys, value):
    with pytest.raises(SystemExit) as exc:
        main(["--max-concurrent", value, "list"])
    assert exc.value.code == 2
    assert "--max-concurrent" in capsys.readouterr().err
