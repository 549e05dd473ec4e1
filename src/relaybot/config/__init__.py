"""設定管理モジュール"""

from relaybot.config.loader import (
    ConfigError,
    ConfigValidationError,
    EnvironmentVariableError,
    compile_trigger_pattern,
    expand_env_vars,
    load_config,
)
from relaybot.config.models import (
    Config,
    GeneratorConfig,
    HealthConfig,
    IRCConfig,
    LoggingConfig,
    PersonaConfig,
    ResponseConfig,
)

__all__ = [
    "Config",
    "ConfigError",
    "ConfigValidationError",
    "EnvironmentVariableError",
    "GeneratorConfig",
    "HealthConfig",
    "IRCConfig",
    "LoggingConfig",
    "PersonaConfig",
    "ResponseConfig",
    "compile_trigger_pattern",
    "expand_env_vars",
    "load_config",
]
