from .base import Responder, ResponderError
from .echo import EchoResponder
from .openai_chat import ChatCompletionResponder


def build_responder(config):
    """Pick the responder named by ``config.responder``."""
    if config.responder == "openai":
        return ChatCompletionResponder(
            api_key=config.openai_api_key,
            model=config.openai_model,
            prompt_prefix=config.prompt_prefix,
            base_url=config.openai_base_url,
            timeout=config.responder_timeout,
        )
    if config.responder == "echo":
        return EchoResponder()
    raise ValueError(f"Unsupported responder: {config.responder}")


__all__ = [
    "ChatCompletionResponder",
    "EchoResponder",
    "Responder",
    "ResponderError",
    "build_responder",
]
