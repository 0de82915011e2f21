"""
CLI commands - entry points for inspecting retrieval.

Each command follows a consistent pattern:
1. Parse arguments
2. Load environment
3. Build the retriever and knowledge base
4. Print results
5. Return exit code

CLI commands are thin wrappers: argument parsing and output formatting
live here, ranking lives in support_rag.retrieval.
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys

from dotenv import load_dotenv
from pydantic import ValidationError

from support_rag.config import EmbeddingConfig, RetrievalConfig
from support_rag.observability import init_phoenix, shutdown_phoenix


def _load_env() -> None:
    """Load environment variables from .env file, configure logging and tracing."""
    load_dotenv()
    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "WARNING").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Initialize Phoenix observability (if enabled)
    init_phoenix()


def _add_retriever_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--mock", action="store_true", help="Use offline mock embeddings")
    parser.add_argument("--lexical", action="store_true", help="Skip embeddings, keyword ranking only")


def _add_query_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--query", "-q", required=True, help="End-user question")
    parser.add_argument("--kb", help="Knowledge base JSON file (default: built-in seed data)")
    _add_retriever_args(parser)


def _build_retriever(args: argparse.Namespace):
    from support_rag.embeddings import get_embedding_provider
    from support_rag.retrieval import create_retriever

    config = RetrievalConfig.from_env()
    if args.lexical:
        return create_retriever(config=config, lexical_only=True)

    embedding_config = EmbeddingConfig.from_env()
    provider = get_embedding_provider(
        use_mock=args.mock or config.use_mock_embeddings,
        config=embedding_config,
    )
    return create_retriever(
        embeddings=provider,
        config=config,
        batch_size=embedding_config.batch_size,
    )


def _load_documents(path: str | None):
    from support_rag.retrieval.seeds import get_product_documents
    from support_rag.schemas import KnowledgeBase

    if path is None:
        return get_product_documents()
    return KnowledgeBase.from_json_file(path).to_documents()


def run_rank_cli() -> int:
    """CLI entry point for ranking a query against a knowledge base."""
    _load_env()

    parser = argparse.ArgumentParser(description="Rank knowledge entries for a query")
    _add_query_args(parser)
    parser.add_argument("--json", action="store_true", help="Print JSON instead of text")
    args = parser.parse_args()

    try:
        documents = _load_documents(args.kb)
    except (OSError, ValueError, ValidationError) as e:
        print(f"Error: could not load knowledge base: {e}", file=sys.stderr)
        return 2

    result = _build_retriever(args).rank_with_scores(args.query, documents)

    if args.json:
        print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
        return 0

    print("=" * 60)
    print(f"RANKING ({result.strategy}, {result.latency_ms:.1f} ms)")
    print("=" * 60)
    if result.fell_back:
        print(f"  Fallback: {result.fallback_reason}")
    if not result.documents:
        print("  No relevant knowledge entries.")
    for n, item in enumerate(result.documents, start=1):
        print(f"  {n}. [{item.score:.3f}] {item.id}: {item.document.title}")
    return 0


def run_context_cli() -> int:
    """CLI entry point for printing the assembled support prompt."""
    from support_rag.retrieval import build_prompt

    _load_env()

    parser = argparse.ArgumentParser(description="Print the prompt sent to the chat model")
    _add_query_args(parser)
    args = parser.parse_args()

    try:
        documents = _load_documents(args.kb)
    except (OSError, ValueError, ValidationError) as e:
        print(f"Error: could not load knowledge base: {e}", file=sys.stderr)
        return 2

    ranked = _build_retriever(args).rank(args.query, documents)
    print(build_prompt(args.query, ranked))
    return 0


def run_eval_cli() -> int:
    """CLI entry point for retrieval quality evaluation."""
    from support_rag.evals.retrieval_eval import run_retrieval_eval

    _load_env()

    parser = argparse.ArgumentParser(description="Run retrieval quality eval")
    parser.add_argument("--quiet", action="store_true", help="Minimal output")
    parser.add_argument(
        "--embeddings",
        action="store_true",
        help="Evaluate the embedding strategy (default: lexical only)",
    )
    parser.add_argument("--mock", action="store_true", help="Use offline mock embeddings")
    args = parser.parse_args()
    args.lexical = not args.embeddings

    print("=" * 60)
    print("RETRIEVAL QUALITY EVAL")
    print("=" * 60)

    report = run_retrieval_eval(retriever=_build_retriever(args))

    if not args.quiet:
        for result in report.results:
            status = "PASS" if result.passed else "FAIL"
            print(f"  [{status}] {result.case_id}: {result.query!r} "
                  f"(F1: {result.metrics.f1_score:.2f}, {result.strategy})")
            if not result.passed and result.metrics.missing_docs:
                print(f"        Missing: {', '.join(result.metrics.missing_docs)}")

    print(f"\nAverage F1: {report.avg_f1:.2f}")
    print(f"Pass rate: {report.pass_rate:.1%}")
    print(f"Passed: {report.passed_cases}/{report.total_cases}")

    if report.all_passed:
        print("\n>>> RETRIEVAL EVAL GATE: PASSED <<<")
        return 0
    else:
        print("\n>>> RETRIEVAL EVAL GATE: FAILED <<<")
        return 1


def main() -> int:
    """
    Main CLI entry point with subcommands.

    Usage:
        support-rag rank --query "how do I reset"     # Ranked entries with scores
        support-rag context --query "how do I reset"  # Full prompt for the chat model
        support-rag eval                              # Retrieval quality gate
    """
    parser = argparse.ArgumentParser(
        description="Support knowledge retrieval",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  rank      Rank knowledge entries for a query
  context   Print the assembled prompt for a query
  eval      Run the retrieval quality gate (no network by default)

Examples:
  support-rag rank -q "install" --lexical
  support-rag rank -q "wifi keeps dropping" --kb project_kb.json --json
  support-rag eval --embeddings --mock
        """,
    )

    parser.add_argument(
        "command",
        choices=["rank", "context", "eval"],
        help="Command to run",
    )

    # Parse just the command first
    args, remaining = parser.parse_known_args()

    commands = {
        "rank": run_rank_cli,
        "context": run_context_cli,
        "eval": run_eval_cli,
    }

    # Re-inject remaining args for the subcommand
    sys.argv = [sys.argv[0]] + remaining

    try:
        return commands[args.command]()
    except KeyboardInterrupt:
        print("\nInterrupted")
        return 130
    finally:
        shutdown_phoenix()


if __name__ == "__main__":
    sys.exit(main())
