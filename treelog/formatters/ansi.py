"""ANSI text decoration used by colored output"""

from typing import Any


class Ansi:
    """Wrap text in ANSI SGR codes, always terminated by a single reset."""

    END = "\033[m"

    @staticmethod
    def code(code: int) -> str:
        return f"\033[{code}m"

    @classmethod
    def decorate(cls, code: int, text: Any) -> str:
        result = f"{cls.code(code)}{text}"
        if result.endswith(cls.END):
            return result
        return result + cls.END

    @classmethod
    def dark_green(cls, text: Any) -> str:
        return cls.decorate(32, text)

    @classmethod
    def dark_yellow(cls, text: Any) -> str:
        return cls.decorate(33, text)

    @classmethod
    def blue(cls, text: Any) -> str:
        return cls.decorate(94, text)

    @classmethod
    def magenta(cls, text: Any) -> str:
        return cls.decorate(95, text)

    @classmethod
    def dark_magenta(cls, text: Any) -> str:
        return cls.decorate(35, text)

    @classmethod
    def cyan(cls, text: Any) -> str:
        return cls.decorate(96, text)

    @classmethod
    def dark_cyan(cls, text: Any) -> str:
        return cls.decorate(36, text)

    @classmethod
    def bold(cls, text: Any) -> str:
        return cls.decorate(1, text)
