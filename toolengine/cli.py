"""CLI entrypoint for toolengine."""
from __future__ import annotations
import argparse
import asyncio
import json
import pathlib
import sys

from .core.errors import ToolError
from .core.logging import attach_file_handler, core_logger
from .core.settings import EngineSettings
from .core.tool_base import ExecutionContext
from .runtime import create_runtime


def _positive_int(value):
    try:
        n = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {value!r}")
    if n < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {n}")
    return n


def build_parser():
    p = argparse.ArgumentParser(prog="toolengine", description="Multi-tenant tool execution engine")
    p.add_argument(
        "--tools-dir",
        help="Tool package root. Overrides TOOLENGINE_TOOLS_DIR.",
    )
    p.add_argument(
        "--log-dir",
        help="Directory to write log file (toolengine.log). If not set, only stderr is used.",
    )
    p.add_argument("--max-concurrent", type=_positive_int, help="Concurrency ceiling for tool executions")
    sub = p.add_subparsers(dest="command")
    sub.add_parser("list", help="Load and list all tools")
    status = sub.add_parser("status", help="Show status/health of tools and the system")
    status.add_argument("--tool", help="Only show this tool id")
    run = sub.add_parser("run", help="Execute one tool and print its result")
    run.add_argument("tool_id")
    run.add_argument("--input", default="null", help="Tool input as JSON")
    run.add_argument("--user", default="cli")
    run.add_argument("--tenant", default="default")
    return p


def _settings_from_args(args) -> EngineSettings:
    settings = EngineSettings.from_env()
    if args.tools_dir:
        settings.tools_dir = pathlib.Path(args.tools_dir)
    if args.max_concurrent is not None:
        settings.max_concurrent_executions = args.max_concurrent
    return settings


async def _run_command(args) -> int:
    runtime = await create_runtime(_settings_from_args(args)).start()
    try:
        if args.command == "list":
            out = [m.to_dict() for m in runtime.orchestrator.get_all_tools()]
            code = 0
        elif args.command == "status":
            if args.tool:
                st = runtime.status.get_tool_status(args.tool)
                out = st.to_dict() if st else {"error": f"Tool {args.tool} not found"}
                code = 0 if st else 1
            else:
                out = {
                    "system": runtime.orchestrator.get_system_status(),
                    "summary": runtime.status.get_status_summary(),
                    "tools": [s.to_dict() for s in runtime.status.get_all_tool_statuses()],
                }
                code = 0
        else:
            try:
                payload = json.loads(args.input)
            except json.JSONDecodeError as e:
                print(f"--input is not valid JSON: {e}", file=sys.stderr)
                return 2
            ctx = ExecutionContext(user_id=args.user, tenant_id=args.tenant, input=payload)
            result = await runtime.admin.execute(args.tool_id, ctx)
            out = result.to_dict()
            code = 0 if result.success else 1
        print(json.dumps(out, ensure_ascii=False, indent=2, default=str))
        return code
    finally:
        await runtime.stop()


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        return 1
    if getattr(args, "log_dir", None):
        attach_file_handler(core_logger, args.log_dir)
    try:
        return asyncio.run(_run_command(args))
    except ToolError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
