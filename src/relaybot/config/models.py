"""設定データクラス"""

from dataclasses import dataclass

DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass
class IRCConfig:
    """IRC接続設定"""

    server: str
    channel: str
    nick: str
    port: int = 6697
    realname: str = "Very cool and helpful bot"
    use_tls: bool = True
    verify_tls: bool = False


@dataclass
class GeneratorConfig:
    """テキスト生成バックエンド設定

    Attributes:
        backend: "pollinations" または "litellm"
        endpoint: pollinations バックエンドのベースURL
        model: litellm バックエンドのモデル名
        timeout_seconds: 1回の生成呼び出しのタイムアウト
        temperature: litellm バックエンドの temperature
        max_tokens: litellm バックエンドの max_tokens
    """

    backend: str = "pollinations"
    endpoint: str = "https://text.pollinations.ai"
    model: str | None = None
    timeout_seconds: float = 30.0
    temperature: float = 0.7
    max_tokens: int = 1000


@dataclass
class PersonaConfig:
    """ペルソナ設定"""

    system_prompt: str = ""


@dataclass
class ResponseConfig:
    """応答設定

    Attributes:
        trigger_pattern: チャンネル発言に反応する正規表現（空なら無効）
        max_line_length: 1行あたりの最大文字数
        send_interval_seconds: 分割送信時の行間ウェイト
        context_capacity: 会話ウィンドウの最大エントリ数（ペルソナ含む）
        filler_text: クリーニング後に空になった場合の代替メッセージ
    """

    trigger_pattern: str = ""
    max_line_length: int = 400
    send_interval_seconds: float = 0.5
    context_capacity: int = 19
    filler_text: str = "Hello!"


@dataclass
class HealthConfig:
    """ヘルスチェックサーバー設定"""

    port: int = 8080


@dataclass
class LoggingConfig:
    """ログ設定"""

    level: str = "INFO"
    format: str = DEFAULT_LOG_FORMAT
    loggers: dict[str, str] | None = None
    debug_prompts: bool = False


@dataclass
class Config:
    """アプリケーション設定"""

    irc: IRCConfig
    persona: PersonaConfig
    generator: GeneratorConfig
    response: ResponseConfig
    health: HealthConfig | None = None
    logging: LoggingConfig | None = None
