class ServiceError(Exception):
    """Base class for failures an operation reports back to its caller.

    Every error carries a ``kind`` the presentation layer switches on and the
    HTTP status the JSON routes answer with.
    """

    kind = "error"
    status_code = 400
    default_message = "The request could not be completed."

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthorized(ServiceError):
    kind = "unauthorized"
    status_code = 401
    default_message = "Unauthorized"


class Forbidden(ServiceError):
    kind = "forbidden"
    status_code = 403
    default_message = "You are not allowed to do that."


class NotAMember(Forbidden):
    default_message = "You must be a member of this book club."


class NotAnAdmin(Forbidden):
    default_message = "Only admins can do that."


class NotFound(ServiceError):
    kind = "not_found"
    status_code = 404
    default_message = "Not found."


class Conflict(ServiceError):
    kind = "conflict"
    status_code = 409
    default_message = "The request conflicts with the current state."


class DuplicateNomination(Conflict):
    default_message = "This book has already been nominated for this meeting."


class AlreadyFinalized(Conflict):
    default_message = "Meeting already finalized."


class NominationsClosed(Conflict):
    default_message = "Nominations are closed for this meeting."


class VotingClosed(Conflict):
    default_message = "Voting is not open for this meeting."


class RankingConflict(Conflict):
    default_message = "Ranks must be exactly 1 to the number of ranked books."


class DuplicateTheme(Conflict):
    default_message = "That theme already exists."


class ValidationError(ServiceError):
    kind = "validation_error"
    status_code = 400
    default_message = "Invalid input."


class StoreError(ServiceError):
    kind = "store_error"
    status_code = 500
    default_message = "The request failed. Please try again."
