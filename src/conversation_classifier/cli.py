"""Command-line interface for the Conversation Classifier.

Reads a conversation (argument, file or stdin), classifies it and writes the
result as JSON to stdout. Logs go to stderr.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Optional, Sequence

import structlog
from pydantic import ValidationError

from conversation_classifier.classifier import ConversationClassifier
from conversation_classifier.config import get_settings
from conversation_classifier.llm.exceptions import LLMAuthenticationError
from conversation_classifier.logging_config import configure_logging
from conversation_classifier.models.enums import LLMProvider
from conversation_classifier.models.taxonomy import TaxonomyError, load_taxonomy

logger = structlog.get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="conversation-classifier",
        description="Classify a conversation into a topic taxonomy using an LLM",
    )
    parser.add_argument(
        "conversation",
        nargs="?",
        default=None,
        help="Conversation text (default: read --file or stdin)",
    )
    parser.add_argument(
        "--file",
        type=Path,
        default=None,
        help="Read the conversation from this file",
    )
    parser.add_argument(
        "--taxonomy",
        type=Path,
        default=None,
        help="JSON taxonomy file (default: settings TAXONOMY_PATH or built-in categories)",
    )
    parser.add_argument(
        "--provider",
        choices=[p.value for p in LLMProvider],
        default=None,
        help="LLM provider (default: settings LLM_PROVIDER)",
    )
    parser.add_argument("--model", default=None, help="Model name for the selected provider")
    parser.add_argument(
        "--max-attempts",
        type=int,
        default=None,
        help="Total classification attempts (default: settings MAX_ATTEMPTS)",
    )
    parser.add_argument("--indent", type=int, default=2, help="JSON indentation (0 for compact)")
    parser.add_argument(
        "--show-metadata",
        action="store_true",
        help="Wrap output as {\"result\": ..., \"metadata\": ...}",
    )
    parser.add_argument("--log-level", default=None, help="Override settings LOG_LEVEL")
    return parser


def _read_conversation(args: argparse.Namespace) -> str:
    if args.conversation is not None:
        return args.conversation
    if args.file is not None:
        return args.file.read_text(encoding="utf-8")
    return sys.stdin.read()


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    
    try:
        base_settings = get_settings()
    except ValidationError as e:
        fields = ", ".join(str(err["loc"][0]) for err in e.errors() if err["loc"])
        print(f"error: invalid settings: {fields or e}", file=sys.stderr)
        return EXIT_USAGE
    provider = (args.provider or base_settings.LLM_PROVIDER).lower()
    
    updates = {"LLM_PROVIDER": provider}
    if args.model:
        key = "OLLAMA_MODEL" if provider == LLMProvider.OLLAMA.value else "OPENAI_MODEL"
        updates[key] = args.model
    if args.max_attempts is not None:
        if args.max_attempts < 1:
            print("error: --max-attempts must be >= 1", file=sys.stderr)
            return EXIT_USAGE
        updates["MAX_ATTEMPTS"] = args.max_attempts
    if args.log_level:
        updates["LOG_LEVEL"] = args.log_level
    settings = base_settings.model_copy(update=updates)
    
    configure_logging(settings.LOG_LEVEL, settings.ENVIRONMENT)
    
    try:
        conversation = _read_conversation(args)
    except (OSError, UnicodeDecodeError) as e:
        print(f"error: cannot read conversation: {e}", file=sys.stderr)
        return EXIT_USAGE
    if not conversation.strip():
        print("error: conversation is empty", file=sys.stderr)
        return EXIT_USAGE
    
    try:
        taxonomy = load_taxonomy(args.taxonomy or settings.TAXONOMY_PATH)
    except TaxonomyError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_USAGE
    
    try:
        classifier = ConversationClassifier.from_settings(settings, taxonomy=taxonomy)
    except LLMAuthenticationError as e:
        print(f"error: {e.message}", file=sys.stderr)
        return EXIT_USAGE
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_USAGE
    
    try:
        with classifier:
            result, metadata = classifier.classify_with_metadata(conversation)
    except Exception as e:
        logger.error("Classification failed", error_type=type(e).__name__, error=str(e))
        print(f"error: classification failed: {e}", file=sys.stderr)
        return EXIT_FAILURE
    
    output = result.model_dump(mode="json")
    if args.show_metadata:
        output = {"result": output, "metadata": metadata.to_dict()}
    
    indent = args.indent if args.indent > 0 else None
    sys.stdout.write(json.dumps(output, indent=indent, ensure_ascii=False) + "\n")
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
