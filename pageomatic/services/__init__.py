"""Service layer for page composition, persistence and editing."""

from pageomatic.services.document import PageDocument, PageProperties
from pageomatic.services.edit_session import EditorState, EditSession
from pageomatic.services.page_service import LoadedPage, PageService, SaveResult

__all__ = [
    "PageDocument",
    "PageProperties",
    "PageService",
    "LoadedPage",
    "SaveResult",
    "EditSession",
    "EditorState",
]
