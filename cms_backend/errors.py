from __future__ import annotations


class CMSError(Exception):
    """Base class for errors recovered at the request handler boundary."""


class DocumentNotFound(CMSError):
    def __init__(self, name: str):
        super().__init__(f"{name} does not exist.")
        self.name = name


class InvalidDocumentName(CMSError):
    def __init__(self, name: str):
        super().__init__("A name is required.")
        self.name = name


class AuthRequired(CMSError):
    def __init__(self) -> None:
        super().__init__("You must be signed in to do that.")


class CredentialsFileError(CMSError):
    """The users file is missing or is not a username -> hash mapping."""
