class LinkLibraryError(Exception):
    """Base class for domain errors raised by the service layer."""


class LinkNotFound(LinkLibraryError):
    """No link with that id is owned by the caller.

    Missing and foreign links are deliberately indistinguishable.
    """


class EmailAlreadyRegistered(LinkLibraryError):
    pass


class InvalidCredentials(LinkLibraryError):
    pass


class TagConflict(LinkLibraryError):
    """A tag insert collided with a concurrent writer and could not be re-read."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Tag {name!r} could not be created or loaded")
        self.name = name
