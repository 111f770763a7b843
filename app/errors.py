class InvalidAddress(ValueError):
    """Input is not a TRON base58 address. Raised before any network call."""

    def __init__(self, address, message: str = "Invalid TRON address"):
        super().__init__(f"{message}: {address!r}")
        self.address = address
        self.message = message


class UpstreamError(Exception):
    def __init__(self, provider: str, message: str, body=None):
        super().__init__(f"{provider}: {message}")
        self.provider = provider
        self.message = message
        self.body = body

    def to_dict(self) -> dict:
        return {"provider": self.provider, "message": self.message, "body": self.body}


class ContractCallAmbiguous(Exception):
    def __init__(self, contract: str, attempts: list):
        super().__init__(f"no usable blacklist selector on {contract}: {attempts}")
        self.contract = contract
        self.attempts = attempts
