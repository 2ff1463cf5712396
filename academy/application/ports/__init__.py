from academy.application.ports.repositories import ExamRecordStore, ResultStore, StudentDirectory
from academy.application.ports.storage import ObjectStorage, PaperStore
from academy.application.ports.cache import ExamNameCache

__all__ = [
    "ExamRecordStore",
    "ResultStore",
    "StudentDirectory",
    "ObjectStorage",
    "PaperStore",
    "ExamNameCache",
]
