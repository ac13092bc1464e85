"""
Text Style Errors

One exception per pipeline stage. Every error is terminal for the render
call that raised it; callers rendering batches decide whether to continue.
"""

from typing import Optional


class TextStyleError(Exception):
    """Base class for all text style rendering errors."""

    stage = 'render'

    def __init__(self, message: str, preset: Optional[str] = None):
        self.message = message
        self.preset = preset
        super().__init__(message)

    def __str__(self) -> str:
        return self._format()

    def _format(self) -> str:
        if self.preset:
            return f"[{self.preset}] {self.message}"
        return self.message

    def to_dict(self) -> dict:
        return {
            'stage': self.stage,
            'preset': self.preset,
            'message': self.message,
        }


class ValidationError(TextStyleError):
    """Malformed or incomplete style input."""

    stage = 'normalize'

    def __init__(self, message: str, field: Optional[str] = None, preset: Optional[str] = None):
        self.field = field
        super().__init__(message, preset)

    def _format(self) -> str:
        where = self.field or 'style'
        if self.preset:
            return f"[{self.preset}] {where}: {self.message}"
        return f"{where}: {self.message}"

    def to_dict(self) -> dict:
        data = super().to_dict()
        data['field'] = self.field
        return data


class LayoutError(TextStyleError):
    """Font could not be located or there is nothing to lay out."""

    stage = 'layout'


class RenderError(TextStyleError):
    """Canvas bounds or compositing failures."""

    stage = 'composite'


class EncodeError(TextStyleError):
    """Image could not be serialized."""

    stage = 'encode'
