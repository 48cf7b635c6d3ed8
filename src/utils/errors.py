"""
Custom error classes for the application
"""


class AssistantError(Exception):
    """Base exception for assistant errors"""
    pass


class RecordNotFoundError(AssistantError):
    """A record id did not resolve in the record store"""

    def __init__(self, kind: str, record_id: str):
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{kind} {record_id} not found")


class ActionNotAllowedError(AssistantError):
    """Task is not in a state that permits the requested transition"""

    def __init__(self, task_id: str, action: str, reason: str):
        self.task_id = task_id
        self.action = action
        self.reason = reason
        super().__init__(f"Cannot {action} task {task_id}: {reason}")


class CompletionError(AssistantError):
    """
    The language-model call failed.

    kind is one of: timeout, transport, status, empty_response
    """

    def __init__(self, kind: str, message: str):
        self.kind = kind
        self.message = message
        super().__init__(f"Completion failed ({kind}): {message}")


class CardEncodingError(AssistantError):
    """Card could not be encoded (unknown type or non-object payload)"""
    pass
