import typing as t


class ChaosError(Exception):
    """Base error for the toolkit.

        Each error carries a code space (e.g. "IO", "HTTP", "STORAGE") and a number
        so that callers can report a stable identifier without exposing the message.
    """

    def __init__(self, message: str, code_space: str = "GEN", code_number: t.Optional[int] = None, is_recoverable: bool = False):
        super().__init__(message)
        self.code_space = code_space
        self.code_number = code_number
        self.is_recoverable = is_recoverable

    def internal_code(self) -> str:
        return f"{self.code_space}-{self.code_number if self.code_number is not None else 0}"

    def obfuscated_code(self) -> str:
        return self.internal_code()


class ConfigError(ChaosError):

    def __init__(self, message: str, code_number: int):
        super().__init__(message, "CONFIG", code_number)
