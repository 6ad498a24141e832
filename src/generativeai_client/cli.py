"""Command-line entry point for the generation client."""
from __future__ import annotations
import argparse
import logging
from pathlib import Path

from generativeai_client.client.api_client import count_tokens, generate_content, text_request
from generativeai_client.common.config import DEFAULT_CONFIG_PATH, load_settings
from generativeai_client.common.logging_setup import setup_logging
from generativeai_client.common.schema import ErrorReply, GenerationReply, TokenCountReply, decode_json

LOGGER = logging.getLogger("genai.cli")

def describe(path: str) -> str:
    """
    Decode a saved reply body and summarise it.

    Args:
        path: Path to a JSON file holding one reply body.

    Returns:
        One line naming the variant and its main fields.
    """
    reply = decode_json(Path(path).read_bytes())
    if isinstance(reply, ErrorReply):
        return f"error: code={reply.error.code} status={reply.error.status} message={reply.error.message}"
    if isinstance(reply, TokenCountReply):
        return f"token_count: total_tokens={reply.total_tokens}"
    if isinstance(reply, GenerationReply):
        n = "absent" if reply.candidates is None else len(reply.candidates)
        return f"generation: candidates={n} text={reply.text!r}"
    raise TypeError(f"unhandled response variant: {type(reply).__name__}")

def main(argv: list[str] | None = None) -> None:
    setup_logging()
    ap = argparse.ArgumentParser(description="Talk to the generation endpoint")
    ap.add_argument("--cfg", default=DEFAULT_CONFIG_PATH, help="Config path")
    sub = ap.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("generate", help="Generate content for a prompt")
    gen.add_argument("--text", required=True, help="User input text")
    cnt = sub.add_parser("count-tokens", help="Count tokens in a prompt")
    cnt.add_argument("--text", required=True, help="User input text")
    dec = sub.add_parser("decode", help="Decode a saved reply body")
    dec.add_argument("--file", required=True, help="JSON file with a reply body")
    args = ap.parse_args(argv)

    if args.command == "decode":
        print(describe(args.file))
        return

    settings = load_settings(args.cfg)
    if args.command == "generate":
        reply = generate_content(text_request(args.text), settings)
        LOGGER.info("Candidates: %s", len(reply.candidates or ()))
        print(reply.text or "")
    else:
        print(count_tokens(text_request(args.text), settings).total_tokens)

if __name__ == "__main__":
    main()
