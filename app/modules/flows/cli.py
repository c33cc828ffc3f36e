from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Optional

from app.modules.ai.client import AIClient
from app.modules.flows.base import FlowDeps
from app.modules.flows.chat import ChatFlow
from app.modules.flows.registry import FLOW_REGISTRY, build_flow, describe_flow
from app.modules.flows.tools.youtube_transcript import TranscriptFetcher


def _load_input(args: argparse.Namespace) -> Any:
    if args.input and args.input_file:
        raise SystemExit("Provide either --input or --input-file, not both")
    if args.input_file:
        return json.loads(Path(args.input_file).read_text(encoding="utf-8"))
    if args.input:
        return json.loads(args.input)
    raise SystemExit("--input or --input-file is required")


def _default_deps() -> FlowDeps:
    from app.core.db.base import async_session_maker
    from app.core.db_services import SqlQuizStore

    return FlowDeps(
        client=AIClient.from_settings(),
        transcripts=TranscriptFetcher(),
        store=SqlQuizStore(async_session_maker),
    )


async def _run_flow(name: str, data: Any, deps: FlowDeps) -> dict:
    flow = build_flow(name, deps)
    result = await flow.run(data)
    return result.model_dump(mode="json", by_alias=True)


async def _chat(message: str, client: AIClient) -> None:
    stream = ChatFlow(client).open(
        {"messages": [{"role": "user", "content": [{"text": message}]}]}
    )
    async for chunk in stream:
        sys.stdout.write(chunk.decode("utf-8"))
        sys.stdout.flush()


def main(argv: list[str] | None = None, *, deps: Optional[FlowDeps] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="codeverse-ai", description="CodeVerse AI flows CLI"
    )
    sub = parser.add_subparsers(dest="cmd", required=True)

    sub.add_parser("list", help="List the available flows and their schemas")

    r = sub.add_parser("run", help="Run a flow and print its result as JSON")
    r.add_argument("flow", choices=sorted(FLOW_REGISTRY), help="Flow name")
    r.add_argument("--input", "-i", help="Flow input as a JSON object")
    r.add_argument("--input-file", help="Path to a JSON file with the flow input")

    c = sub.add_parser("chat", help="Stream a reply to a single message")
    c.add_argument("--message", "-m", required=True, help="Message text")

    sub.add_parser("init-db", help="Create the quiz tables if they are missing")

    args = parser.parse_args(argv)
    if args.cmd == "list":
        print(json.dumps([describe_flow(name) for name in FLOW_REGISTRY], indent=2))
        return 0
    if args.cmd == "init-db":
        from app.core.db.base import create_all

        asyncio.run(create_all())
        print("Quiz tables are ready")
        return 0

    deps = deps or _default_deps()
    if args.cmd == "run":
        data = _load_input(args)
        result = asyncio.run(_run_flow(args.flow, data, deps))
        print(json.dumps(result, indent=2))
        return 0 if result["success"] else 1
    if args.cmd == "chat":
        asyncio.run(_chat(args.message, deps.client))
        print()
        return 0

    parser.print_help()
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
