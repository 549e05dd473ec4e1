#!/usr/bin/env python3
"""Prompt tester script for relaybot.

会話ウィンドウから組み立てられるプロンプトと、応答の行分割を確認するCLIツール。

Usage:
    python hack/prompt_tester.py prompt --from alice "SteveBot: hi there" --dry-run
    python hack/prompt_tester.py prompt --from alice "what's up?" --history history.txt
    python hack/prompt_tester.py segment --max-length 80 < reply.txt
"""

import argparse
import asyncio
import os
import sys
from pathlib import Path

# プロジェクトルートをパスに追加
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


def load_dotenv(env_path: Path) -> None:
    """シンプルな .env ファイル読み込み

    Args:
        env_path: .env ファイルのパス
    """
    if not env_path.exists():
        return

    with open(env_path, encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            # 空行とコメントをスキップ
            if not line or line.startswith("#"):
                continue
            if "=" in line:
                key, _, value = line.partition("=")
                key = key.strip()
                value = value.strip().strip("'\"")
                # 既存の環境変数は上書きしない
                if key not in os.environ:
                    os.environ[key] = value


from relaybot.config import Config, load_config  # noqa: E402
from relaybot.domain.entities import ConversationWindow  # noqa: E402
from relaybot.domain.exceptions import GeneratorError  # noqa: E402
from relaybot.domain.services import (  # noqa: E402
    clean_message,
    encoded_length,
    sanitize_response,
    segment_response,
)
from relaybot.infrastructure.generator import create_text_generator  # noqa: E402


def print_prompt(title: str, prompt: str) -> None:
    """プロンプトを整形して出力"""
    print("\n" + "=" * 60)
    print(f"  {title}")
    print("=" * 60)
    print(prompt)
    print("=" * 60 + "\n")


def print_chunks(chunks: list[str], max_length: int) -> None:
    """分割結果を行ごとに長さ付きで出力"""
    print("\n" + "-" * 60)
    print(f"  {len(chunks)} line(s), max {max_length} bytes")
    print("-" * 60)
    for i, chunk in enumerate(chunks, start=1):
        print(f"[{i:>2}] ({encoded_length(chunk):>3}) {chunk}")
    print("-" * 60 + "\n")


def load_history(window: ConversationWindow, history_path: Path) -> None:
    """履歴ファイルを読み込んでウィンドウに追加する

    1行1ターン。"nick: text" はユーザー発言、"> text" はボットの応答。
    """
    with open(history_path, encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if line.startswith(">"):
                window.add_assistant_turn(line[1:].strip())
                continue
            nick, sep, text = line.partition(":")
            if not sep:
                print(f"Skipping malformed history line: {line}", file=sys.stderr)
                continue
            window.add_user_turn(nick.strip(), text.strip())


async def run_prompt(args: argparse.Namespace, config: Config) -> None:
    """prompt サブコマンドを実行"""
    window = ConversationWindow.initialize(
        config.persona.system_prompt, config.response.context_capacity
    )
    if args.history:
        load_history(window, Path(args.history))

    cleaned = clean_message(args.message, config.irc.nick, config.response.filler_text)
    window.add_user_turn(args.sender, cleaned)
    prompt = window.serialize()
    print_prompt(f"Prompt ({len(window)} entries, {len(prompt)} chars)", prompt)

    if args.dry_run:
        return

    generator = create_text_generator(config.generator)
    try:
        raw = await generator.generate(prompt)
    except GeneratorError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    print_prompt("Raw response", raw)
    reply = sanitize_response(raw)
    max_length = config.response.max_line_length
    print_chunks(list(segment_response(reply, max_length)), max_length)


def run_segment(args: argparse.Namespace, config: Config | None) -> None:
    """segment サブコマンドを実行"""
    max_length = args.max_length
    if max_length is None:
        max_length = config.response.max_line_length if config else 400

    text = args.text if args.text is not None else sys.stdin.read()
    reply = sanitize_response(text) if args.sanitize else text
    print_chunks(list(segment_response(reply, max_length)), max_length)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="relaybot prompt tester")
    parser.add_argument("--config", default="config.yaml", help="config.yaml path")
    subparsers = parser.add_subparsers(dest="command", required=True)

    prompt_parser = subparsers.add_parser("prompt", help="Build (and send) a prompt")
    prompt_parser.add_argument("message", help="Inbound message text")
    prompt_parser.add_argument(
        "--from", dest="sender", default="tester", help="Sender nick"
    )
    prompt_parser.add_argument("--history", help="History file to preload")
    prompt_parser.add_argument(
        "--dry-run", action="store_true", help="Only print the prompt"
    )

    segment_parser = subparsers.add_parser("segment", help="Split text into lines")
    segment_parser.add_argument("text", nargs="?", help="Text (default: stdin)")
    segment_parser.add_argument("--max-length", type=int, help="Maximum line length")
    segment_parser.add_argument(
        "--sanitize", action="store_true", help="Sanitize before splitting"
    )
    return parser


def main() -> None:
    parser = build_parser()
    args = parser.parse_args()

    load_dotenv(Path(__file__).parent.parent / ".env")

    config_path = Path(args.config)
    config = load_config(config_path) if config_path.exists() else None

    if args.command == "segment":
        run_segment(args, config)
        return

    if config is None:
        print(f"Error: {config_path} not found", file=sys.stderr)
        sys.exit(1)
    asyncio.run(run_prompt(args, config))


if __name__ == "__main__":
    main()
