#!/usr/bin/env python3
"""
Run a request through the Uni Agent workflow.

Usage:
    python scripts/run_request.py "Create a report for employees.csv and export as markdown"
    python scripts/run_request.py "Process this file and generate a report" --file data/employees.csv
    python scripts/run_request.py "Get statistics" --context-json '{"fileData": "name,age\\nJohn,30"}'
    python scripts/run_request.py "..." --graph       # run through the LangGraph runner
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

# Add project root to path
root_dir = Path(__file__).parent.parent
sys.path.insert(0, str(root_dir))

from dotenv import load_dotenv
load_dotenv()

from config import config
from uni_agent.exceptions import UniAgentError
from uni_agent.graph import UniWorkflowRunner
from uni_agent.models.store import InMemoryRecordStore
from uni_agent.service import UniAgentService
from uni_agent.utils import setup_logging


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run a Uni Agent request")
    parser.add_argument("request", help="Natural-language request")
    parser.add_argument("--file", help="File to upload with the request")
    parser.add_argument("--context-json", help="Request context as a JSON object")
    parser.add_argument("--graph", action="store_true", help="Use the LangGraph runner")
    parser.add_argument("--output", help="Write the JSON result to this file")
    return parser.parse_args()


async def main() -> int:
    args = parse_args()
    setup_logging()

    service = UniAgentService.from_settings(InMemoryRecordStore())
    context = json.loads(args.context_json) if args.context_json else {}

    print("=" * 60)
    print(f"Request: {args.request}")
    print(f"Model:   {config.llm.model} @ {config.llm.base_url}")
    print("=" * 60)

    try:
        if args.file:
            path = Path(args.file)
            result = await service.ingest_upload(path.read_bytes(), path.name, args.request)
        elif args.graph:
            runner = UniWorkflowRunner.from_service(service)
            result = await runner.run(args.request, context)
        else:
            result = await service.process_request(args.request, context)
    except UniAgentError as e:
        print(f"\n❌ {e.__class__.__name__}: {e}")
        return 1

    print(f"\nPlan ({result.plan.source.value}): {result.plan.reasoning}")
    for i, task in enumerate(result.plan.tasks):
        marker = "✓" if task.status.value == "completed" else "✗"
        line = f"  {marker} {i}. {task.action}"
        if task.error:
            line += f"  ({task.error})"
        print(line)
    print(f"\n{result.summary}")

    if args.output:
        Path(args.output).write_text(
            json.dumps(result.to_dict(), indent=2, default=str), encoding="utf-8"
        )
        print(f"Result written to {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
