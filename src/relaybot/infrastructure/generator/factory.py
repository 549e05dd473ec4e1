"""Generator backend factory."""

from relaybot.config.models import GeneratorConfig
from relaybot.domain.services import TextGenerator
from relaybot.infrastructure.generator.litellm_client import LiteLLMTextGenerator
from relaybot.infrastructure.generator.pollinations import PollinationsTextGenerator


def create_text_generator(
    config: GeneratorConfig,
    *,
    debug_prompts: bool = False,
) -> TextGenerator:
    """Create the configured TextGenerator.

    Args:
        config: Generator configuration.
        debug_prompts: If True, log prompts at INFO level.

    Returns:
        PollinationsTextGenerator or LiteLLMTextGenerator.

    Raises:
        ValueError: Unknown backend.
    """
    if config.backend == "pollinations":
        return PollinationsTextGenerator(config, debug_prompts=debug_prompts)
    if config.backend == "litellm":
        return LiteLLMTextGenerator(config, debug_prompts=debug_prompts)
    raise ValueError(f"Unknown generator backend: {config.backend}")
