from enum import Enum


class InputKind(str, Enum):
    TEXT = "text"
    NUMBER = "number"
    DATETIME = "datetime"
    CHOICE = "choice"


class StorageBackend(str, Enum):
    MEMORY = "memory"
    FILE = "file"
