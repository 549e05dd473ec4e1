"""YAML設定ファイルの読み込みと環境変数展開"""

import logging
import os
import re
from pathlib import Path
from typing import Any

import yaml

from relaybot.config.models import (
    DEFAULT_LOG_FORMAT,
    Config,
    GeneratorConfig,
    HealthConfig,
    IRCConfig,
    LoggingConfig,
    PersonaConfig,
    ResponseConfig,
)

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """設定関連の基底例外"""


class ConfigValidationError(ConfigError):
    """設定値のバリデーションエラー"""


class EnvironmentVariableError(ConfigError):
    """環境変数が見つからないエラー"""


# 環境変数パターン: ${VAR_NAME} または ${VAR_NAME:-default}
ENV_VAR_PATTERN = re.compile(r"\$\{([^}:]+)(?::-([^}]*))?\}")

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})
_GENERATOR_BACKENDS = frozenset({"pollinations", "litellm"})


def expand_env_vars(value: str) -> str:
    """文字列中の ${VAR_NAME} を環境変数の値に置換する

    ${VAR_NAME:-default} 形式の場合、環境変数が未設定または空なら
    default を使う。

    Args:
        value: 置換対象の文字列

    Returns:
        環境変数が展開された文字列

    Raises:
        EnvironmentVariableError: デフォルトのない環境変数が未設定
    """
    if not value:
        return value

    def replace_var(match: re.Match[str]) -> str:
        var_name = match.group(1)
        default = match.group(2)
        env_value = os.environ.get(var_name)
        if default is not None:
            return env_value if env_value else default
        if env_value is None:
            raise EnvironmentVariableError(
                f"Environment variable '{var_name}' is not set"
            )
        return env_value

    return ENV_VAR_PATTERN.sub(replace_var, value)


def _expand_recursive(data: Any) -> Any:
    """データ構造を再帰的に走査し、文字列中の環境変数を展開する

    Args:
        data: 展開対象のデータ（dict, list, str, その他）

    Returns:
        環境変数が展開されたデータ
    """
    if isinstance(data, dict):
        return {key: _expand_recursive(value) for key, value in data.items()}
    elif isinstance(data, list):
        return [_expand_recursive(item) for item in data]
    elif isinstance(data, str):
        return expand_env_vars(data)
    else:
        return data


def _validate_required_field(data: dict[str, Any], field: str, parent: str = "") -> Any:
    """必須フィールドの存在を検証する

    Args:
        data: 検証対象のdict
        field: フィールド名
        parent: 親フィールド名（エラーメッセージ用）

    Returns:
        フィールドの値

    Raises:
        ConfigValidationError: フィールドが存在しない
    """
    if field not in data or data[field] is None:
        full_path = f"{parent}.{field}" if parent else field
        raise ConfigValidationError(f"Required field '{full_path}' is missing")
    return data[field]


def _as_int(value: Any, path: str) -> int:
    """環境変数展開後の文字列も含めて int に変換する"""
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ConfigValidationError(f"Field '{path}' must be an integer") from e


def _as_float(value: Any, path: str) -> float:
    """環境変数展開後の文字列も含めて float に変換する"""
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise ConfigValidationError(f"Field '{path}' must be a number") from e


def _as_bool(value: Any, path: str) -> bool:
    """環境変数展開後の文字列も含めて bool に変換する"""
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ConfigValidationError(f"Field '{path}' must be a boolean")


def compile_trigger_pattern(source: str | None) -> re.Pattern[str] | None:
    """トリガーパターンをコンパイルする

    不正な正規表現は起動を止めずに警告を出し、機能を無効化する。

    Args:
        source: 正規表現の文字列（空または None なら無効）

    Returns:
        コンパイル済みパターン、無効な場合は None
    """
    if not source:
        return None
    try:
        return re.compile(source)
    except re.error as e:
        logger.warning("Invalid trigger pattern %r, disabling it: %s", source, e)
        return None


def _load_irc(data: dict[str, Any]) -> IRCConfig:
    irc_data = _validate_required_field(data, "irc")
    return IRCConfig(
        server=_validate_required_field(irc_data, "server", "irc"),
        channel=_validate_required_field(irc_data, "channel", "irc"),
        nick=_validate_required_field(irc_data, "nick", "irc"),
        port=_as_int(irc_data.get("port", 6697), "irc.port"),
        realname=irc_data.get("realname") or "Very cool and helpful bot",
        use_tls=_as_bool(irc_data.get("use_tls", True), "irc.use_tls"),
        verify_tls=_as_bool(irc_data.get("verify_tls", False), "irc.verify_tls"),
    )


def _load_generator(data: dict[str, Any]) -> GeneratorConfig:
    generator_data = data.get("generator") or {}
    backend = generator_data.get("backend", "pollinations")
    if backend not in _GENERATOR_BACKENDS:
        raise ConfigValidationError(
            f"Field 'generator.backend' must be one of "
            f"{sorted(_GENERATOR_BACKENDS)}, got '{backend}'"
        )
    model = generator_data.get("model")
    if backend == "litellm" and not model:
        raise ConfigValidationError(
            "Required field 'generator.model' is missing for litellm backend"
        )
    return GeneratorConfig(
        backend=backend,
        endpoint=generator_data.get("endpoint", "https://text.pollinations.ai"),
        model=model,
        timeout_seconds=_as_float(
            generator_data.get("timeout_seconds", 30.0), "generator.timeout_seconds"
        ),
        temperature=_as_float(
            generator_data.get("temperature", 0.7), "generator.temperature"
        ),
        max_tokens=_as_int(generator_data.get("max_tokens", 1000), "generator.max_tokens"),
    )


def _load_response(data: dict[str, Any]) -> ResponseConfig:
    response_data = data.get("response") or {}
    response = ResponseConfig(
        trigger_pattern=response_data.get("trigger_pattern") or "",
        max_line_length=_as_int(
            response_data.get("max_line_length", 400), "response.max_line_length"
        ),
        send_interval_seconds=_as_float(
            response_data.get("send_interval_seconds", 0.5),
            "response.send_interval_seconds",
        ),
        context_capacity=_as_int(
            response_data.get("context_capacity", 19), "response.context_capacity"
        ),
        filler_text=response_data.get("filler_text") or "Hello!",
    )
    if response.max_line_length < 1:
        raise ConfigValidationError("Field 'response.max_line_length' must be >= 1")
    if response.context_capacity < 2:
        raise ConfigValidationError("Field 'response.context_capacity' must be >= 2")
    return response


def load_config(path: str | Path) -> Config:
    """設定ファイルを読み込む

    Args:
        path: config.yaml のパス

    Returns:
        Config オブジェクト

    Raises:
        FileNotFoundError: ファイルが存在しない
        ConfigValidationError: 必須項目が欠落
        EnvironmentVariableError: 環境変数が未設定
        yaml.YAMLError: YAML構文エラー
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, encoding="utf-8") as f:
        raw_data = yaml.safe_load(f) or {}

    # 環境変数を展開
    data = _expand_recursive(raw_data)

    irc = _load_irc(data)

    # PersonaConfig (system_prompt は空でもよい)
    persona_data = _validate_required_field(data, "persona")
    persona = PersonaConfig(system_prompt=persona_data.get("system_prompt") or "")

    generator = _load_generator(data)
    response = _load_response(data)

    # HealthConfig (optional)
    health: HealthConfig | None = None
    health_data = data.get("health")
    if health_data:
        health = HealthConfig(port=_as_int(health_data.get("port", 8080), "health.port"))

    # LoggingConfig (optional)
    logging_config: LoggingConfig | None = None
    logging_data = data.get("logging")
    if logging_data:
        logging_config = LoggingConfig(
            level=logging_data.get("level", "INFO"),
            format=logging_data.get("format", DEFAULT_LOG_FORMAT),
            loggers=logging_data.get("loggers"),
            debug_prompts=_as_bool(
                logging_data.get("debug_prompts", False), "logging.debug_prompts"
            ),
        )

    return Config(
        irc=irc,
        persona=persona,
        generator=generator,
        response=response,
        health=health,
        logging=logging_config,
    )
