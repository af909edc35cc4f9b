from __future__ import annotations

import logging
from typing import Dict, List, Optional
from uuid import uuid4

from ..models.signature_enums import FontFamily
from ..models.text_annotation import TextAnnotation, TextAnnotationDraft

logger = logging.getLogger(__name__)


class AnnotationStore:
    """
    Ordered id -> annotation mapping plus the drafts currently being typed.

    Iteration follows insertion order; moving or re-editing an annotation
    keeps its slot. Only committed annotations are ever exported.
    """

    def __init__(self) -> None:
        self._items: Dict[str, TextAnnotation] = {}
        self._drafts: Dict[str, TextAnnotationDraft] = {}

    # -------- drafts ---------------------------------------------------------
    def begin_draft(self, x: float, y: float, page_index: int, *,
                    font_size: float = 14.0,
                    font_family: str = FontFamily.HELVETICA.value) -> TextAnnotationDraft:
        """Start a new, empty annotation at viewport (x, y)."""
        draft = TextAnnotationDraft(
            id=f"text-{uuid4().hex}",
            x=x, y=y, page_index=page_index,
            font_size=font_size, font_family=font_family,
        )
        self._drafts[draft.id] = draft
        return draft

    def begin_edit(self, annotation_id: str) -> TextAnnotationDraft:
        """Reopen a committed annotation for editing."""
        draft = TextAnnotationDraft.from_annotation(self._require(annotation_id))
        self._drafts[draft.id] = draft
        return draft

    def update_draft(self, draft_id: str, text: str) -> TextAnnotationDraft:
        draft = self._require_draft(draft_id)
        draft.text = text
        return draft

    def finalize(self, draft_id: str, text: Optional[str] = None) -> Optional[TextAnnotation]:
        """
        Commit a draft. Text that is empty after trimming deletes the
        annotation instead and returns None.
        """
        draft = self._drafts.pop(draft_id, None)
        if draft is None:
            raise KeyError(f"No draft {draft_id!r}")
        final_text = draft.text if text is None else text
        if not final_text.strip():
            self._items.pop(draft_id, None)
            logger.debug("Dropped empty annotation %s", draft_id)
            return None
        annotation = draft.commit(final_text)
        self._items[annotation.id] = annotation
        return annotation

    def cancel(self, draft_id: str) -> Optional[TextAnnotation]:
        """
        Abandon a draft. A new annotation disappears; an edited one keeps its
        committed text.
        """
        draft = self._drafts.pop(draft_id, None)
        if draft is None:
            raise KeyError(f"No draft {draft_id!r}")
        if not draft.committed_text.strip():
            self._items.pop(draft_id, None)
            return None
        return self._items.get(draft_id)

    def draft(self, draft_id: str) -> Optional[TextAnnotationDraft]:
        return self._drafts.get(draft_id)

    def drafts(self) -> List[TextAnnotationDraft]:
        return list(self._drafts.values())

    # -------- committed ------------------------------------------------------
    def move(self, annotation_id: str, dx: float, dy: float) -> TextAnnotation:
        """Drag a committed annotation; an open edit draft moves along with it."""
        moved = self._require(annotation_id).moved(dx, dy)
        self._items[annotation_id] = moved
        draft = self._drafts.get(annotation_id)
        if draft is not None:
            draft.x, draft.y = moved.x, moved.y
        return moved

    def delete(self, annotation_id: str) -> bool:
        self._drafts.pop(annotation_id, None)
        return self._items.pop(annotation_id, None) is not None

    def get(self, annotation_id: str) -> Optional[TextAnnotation]:
        return self._items.get(annotation_id)

    def annotations(self) -> List[TextAnnotation]:
        return list(self._items.values())

    def for_page(self, page_index: int) -> List[TextAnnotation]:
        return [a for a in self._items.values() if a.page_index == page_index]

    def clear(self) -> None:
        self._items.clear()
        self._drafts.clear()

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, annotation_id: object) -> bool:
        return annotation_id in self._items

    # -------- Internal helpers ----------------------------------------------
    def _require(self, annotation_id: str) -> TextAnnotation:
        try:
            return self._items[annotation_id]
        except KeyError:
            raise KeyError(f"No annotation {annotation_id!r}") from None

    def _require_draft(self, draft_id: str) -> TextAnnotationDraft:
        try:
            return self._drafts[draft_id]
        except KeyError:
            raise KeyError(f"No draft {draft_id!r}") from None
