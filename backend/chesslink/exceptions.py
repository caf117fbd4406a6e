"""Errors reported back to the participant whose request failed.

Every error is recoverable by the user: the session is left untouched and only
the requester hears about it.
"""


class SessionError(Exception):
    code = 'SessionError'
    default_message = 'Request failed'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self):
        return {'code': self.code, 'message': self.message}


class SessionNotFound(SessionError):
    code = 'SessionNotFound'
    default_message = 'Game not found'


class SessionFull(SessionError):
    code = 'SessionFull'
    default_message = 'Game is full'


class NotYourTurn(SessionError):
    code = 'NotYourTurn'
    default_message = 'Not your turn'


class IllegalMove(SessionError):
    code = 'IllegalMove'
    default_message = 'Invalid move'


class MalformedMessage(SessionError):
    code = 'MalformedMessage'
    default_message = 'Malformed message'
