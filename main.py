"""Deep Research - research pipeline CLI.

Runs one research on a prompt and prints the evidence log and summary.
"""

import argparse
import asyncio
import sys
from pathlib import Path

from deep_research.agents.orchestrator import ResearchOrchestrator
from deep_research.errors import PipelineError


async def run_research(
    prompt: str,
    model: str | None = None,
    evidence_out: str | None = None,
    summary_out: str | None = None,
) -> int:
    """Run research on the given prompt."""
    print(f"Research prompt: {prompt}")
    print("-" * 50)

    orchestrator = ResearchOrchestrator(model=model)
    try:
        result = await orchestrator.run_research(prompt)
    except PipelineError as exc:
        print(f"\n[!] Error: {exc}", file=sys.stderr)
        return 1

    print(f"\n[*] Queries ({len(result.queries)}):")
    for i, query in enumerate(result.queries, 1):
        print(f"  {i}. {query}")
    print(f"\n[*] Sources: {result.source_count} | Key points: {result.claim_count}")

    if evidence_out:
        Path(evidence_out).write_text(result.evidence_markdown, encoding="utf-8")
        print(f"[+] Evidence written to {evidence_out}")
    else:
        print(f"\n{'='*50}\nEVIDENCE:\n{'='*50}")
        print(result.evidence_markdown)

    if summary_out:
        Path(summary_out).write_text(result.summary_markdown, encoding="utf-8")
        print(f"[+] Summary written to {summary_out}")
    else:
        print(f"\n{'='*50}\nSUMMARY:\n{'='*50}")
        print(result.summary_markdown)
    return 0


def main():
    parser = argparse.ArgumentParser(description="Deep Research pipeline")
    parser.add_argument("--prompt", "-p", required=True, help="Research prompt")
    parser.add_argument("--model", "-m", help="Model to use (default: from config)")
    parser.add_argument("--evidence-out", help="Write the evidence markdown to this file")
    parser.add_argument("--summary-out", help="Write the summary markdown to this file")

    args = parser.parse_args()

    sys.exit(
        asyncio.run(
            run_research(args.prompt, args.model, args.evidence_out, args.summary_out)
        )
    )


if __name__ == "__main__":
    main()
