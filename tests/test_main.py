"""エントリポイントのテスト"""

import logging
import os
from collections.abc import Generator
from pathlib import Path
from unittest.mock import patch

import pytest

from relaybot.__main__ import (
    CONFIG_PATH_ENV,
    configure_logging,
    main,
    resolve_config_path,
)
from relaybot.config import LoggingConfig


@pytest.fixture
def restore_logging() -> Generator[None, None, None]:
    """ロガーのレベルとフォーマッタを元に戻すフィクスチャ"""
    root_logger = logging.getLogger()
    original_level = root_logger.level
    original_formatters = [h.formatter for h in root_logger.handlers]
    httpx_level = logging.getLogger("httpx").level

    yield

    root_logger.setLevel(original_level)
    for handler, formatter in zip(root_logger.handlers, original_formatters):
        handler.setFormatter(formatter)
    logging.getLogger("httpx").setLevel(httpx_level)


class TestConfigureLogging:
    """configure_logging関数のテスト"""

    def test_none_keeps_defaults(self, restore_logging: None) -> None:
        """設定がない場合は何も変えない"""
        level = logging.getLogger().level

        configure_logging(None)

        assert logging.getLogger().level == level

    def test_sets_levels(self, restore_logging: None) -> None:
        """ルートと個別ロガーのレベルを設定する"""
        configure_logging(
            LoggingConfig(level="debug", loggers={"httpx": "WARNING"})
        )

        assert logging.getLogger().level == logging.DEBUG
        assert logging.getLogger("httpx").level == logging.WARNING

    def test_unknown_level_falls_back_to_info(self, restore_logging: None) -> None:
        """未知のレベルはINFOになる"""
        configure_logging(LoggingConfig(level="verbose"))

        assert logging.getLogger().level == logging.INFO


class TestResolveConfigPath:
    """resolve_config_path関数のテスト"""

    def test_default(self) -> None:
        """環境変数がなければ config.yaml"""
        with patch.dict(os.environ, {}, clear=True):
            assert resolve_config_path() == Path("config.yaml")

    def test_from_env(self, tmp_path: Path) -> None:
        """環境変数で上書きできる"""
        path = tmp_path / "bot.yaml"
        with patch.dict(os.environ, {CONFIG_PATH_ENV: str(path)}):
            assert resolve_config_path() == path


class TestMain:
    """main関数のテスト"""

    async def test_missing_config_exits(self, tmp_path: Path) -> None:
        """設定ファイルがない場合は終了コード1で終了する"""
        with patch.dict(os.environ, {CONFIG_PATH_ENV: str(tmp_path / "none.yaml")}):
            with pytest.raises(SystemExit) as exc_info:
                await main()

        assert exc_info.value.code == 1

    async def test_invalid_config_exits(self, tmp_path: Path) -> None:
        """設定が不正な場合は終了コード1で終了する"""
        path = tmp_path / "config.yaml"
        path.write_text("irc:\n  server: localhost\n", encoding="utf-8")

        with patch.dict(os.environ, {CONFIG_PATH_ENV: str(path)}):
            with pytest.raises(SystemExit) as exc_info:
                await main()

        assert exc_info.value.code == 1
