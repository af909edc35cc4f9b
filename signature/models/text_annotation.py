from __future__ import annotations
from dataclasses import dataclass, replace

from .signature_enums import FontFamily


@dataclass(frozen=True)
class TextAnnotation:
    """
    A committed free-text annotation.

    ``x``/``y`` is the top-left corner of the on-screen text box in viewport
    pixels; ``page_index`` is the page it is drawn on, which may differ from
    the page that was visible when the export was triggered.
    """
    id: str
    text: str
    x: float
    y: float
    page_index: int
    font_size: float = 14.0
    font_family: str = FontFamily.HELVETICA.value

    def moved(self, dx: float, dy: float) -> "TextAnnotation":
        return replace(self, x=self.x + dx, y=self.y + dy)


@dataclass
class TextAnnotationDraft:
    """
    In-progress text entry. Never handed to the compositing engine.

    ``committed_text`` is the text of the annotation being edited, empty when
    the draft creates a new annotation.
    """
    id: str
    x: float
    y: float
    page_index: int
    font_size: float = 14.0
    font_family: str = FontFamily.HELVETICA.value
    text: str = ""
    committed_text: str = ""

    @classmethod
    def from_annotation(cls, annotation: TextAnnotation) -> "TextAnnotationDraft":
        return cls(
            id=annotation.id,
            x=annotation.x,
            y=annotation.y,
            page_index=annotation.page_index,
            font_size=annotation.font_size,
            font_family=annotation.font_family,
            text=annotation.text,
            committed_text=annotation.text,
        )

    def commit(self, text: str) -> TextAnnotation:
        return TextAnnotation(
            id=self.id,
            text=text,
            x=self.x,
            y=self.y,
            page_index=self.page_index,
            font_size=self.font_size,
            font_family=self.font_family,
        )
