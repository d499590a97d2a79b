class GeminiError(Exception):
    pass


class EmptyResponseError(GeminiError):
    def __init__(self, message: str, finish_reason: str = None):
        super().__init__(message)
        self.finish_reason = finish_reason

    @property
    def truncated(self) -> bool:
        return self.finish_reason == "MAX_TOKENS"


class ProviderResponseError(GeminiError):
    def __init__(self, message: str, status_code: int = None, code: str = None):
        super().__init__(message)
        self.status_code = status_code
        self.code = code


class MalformedResponseError(GeminiError):
    pass
