from lyricdb.files.store import FileStore, list_formats

__all__ = ["FileStore", "list_formats"]
