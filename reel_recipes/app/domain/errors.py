from __future__ import annotations


class ConfigurationError(Exception):
    def __init__(self, errors: list[str]):
        super().__init__(f"Configuration errors: {', '.join(errors)}")
        self.errors = errors
