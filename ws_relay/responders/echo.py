class EchoResponder:
    """Replies with the inbound text, prefixed."""

    def __init__(self, prefix: str = "Echo: "):
        self.prefix = prefix

    async def __call__(self, text: str) -> str:
        return f"{self.prefix}{text}"
