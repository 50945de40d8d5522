"""CLI entrypoint: generate an action plan locally or serve the HTTP API."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
from pathlib import Path
from typing import Optional

import uvicorn

from config import get_settings
from core import GenerateRequest
from integrations import AuthenticatedUser
from orchestrator.progress import InMemoryProgressStore
from orchestrator.service import ActionPlanService, new_session_id
from storage import get_plan_store
from utils.logger import configure_from_settings


logger = logging.getLogger(__name__)

CLI_USER = AuthenticatedUser(user_id="local-cli", tier="pro")


async def _print_progress(progress: InMemoryProgressStore, session_id: str, interval: float = 0.5) -> None:
    last = None
    while True:
        state = progress.read(session_id)
        if state is not None:
            current = (state.stage, state.message, state.percent)
            if current != last:
                print(f"[{state.percent:3d}%] {state.stage.value}: {state.message}", flush=True)
                last = current
        await asyncio.sleep(interval)


async def _generate(args: argparse.Namespace) -> int:
    settings = get_settings()
    progress = InMemoryProgressStore(ttl_sec=settings.pipeline.progress_ttl_sec)
    service = ActionPlanService.from_settings(
        settings,
        plan_store=get_plan_store(settings.storage.plans_path),
        progress=progress,
    )
    request = GenerateRequest(
        channel_name=args.channel,
        topic=args.topic,
        channel_id=args.channel_id,
        channel_bio=args.bio,
    )
    session_id = new_session_id()
    printer = asyncio.create_task(_print_progress(progress, session_id))
    try:
        plan = await service.generate(CLI_USER, request, session_id=session_id)
    finally:
        printer.cancel()

    if plan is None:
        logger.warning("Generation cancelled")
        return 1

    text = json.dumps(plan.to_public(), ensure_ascii=False, indent=2)
    if args.output:
        Path(args.output).parent.mkdir(parents=True, exist_ok=True)
        Path(args.output).write_text(text, encoding="utf-8")
        print(json.dumps({"output": args.output, "sessionId": session_id}, ensure_ascii=False))
    else:
        print(text)
    return 0


def main(argv: Optional[list] = None) -> int:
    parser = argparse.ArgumentParser(description="Channel action plan engine")
    sub = parser.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("generate")
    gen.add_argument("--channel", required=True)
    gen.add_argument("--topic", required=True)
    gen.add_argument("--channel-id", default=None)
    gen.add_argument("--bio", default=None)
    gen.add_argument("--output", default="")

    serve = sub.add_parser("serve")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)

    args = parser.parse_args(argv)
    configure_from_settings()

    if args.command == "generate":
        return asyncio.run(_generate(args))

    if args.command == "serve":
        uvicorn.run("webapp.app:app", host=args.host, port=int(args.port))
        return 0

    return 2


if __name__ == "__main__":
    raise SystemExit(main())
