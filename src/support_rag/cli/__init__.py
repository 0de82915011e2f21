"""
CLI module - unified command-line interface.

Provides entry points for:
- Ranking a query against a knowledge base
- Printing the assembled support prompt
- Running the retrieval quality gate
"""

from support_rag.cli.commands import (
    main,
    run_rank_cli,
    run_context_cli,
    run_eval_cli,
)

__all__ = [
    "main",
    "run_rank_cli",
    "run_context_cli",
    "run_eval_cli",
]
