"""
Custom exceptions for the savings challenge service.
Raised by the crud/service layer; app.main maps each kind to an HTTP status.
"""
import uuid


class SavingsChallengeException(Exception):
    """Base exception for the savings challenge service"""
    pass


class NotFoundException(SavingsChallengeException):
    """Referenced entity does not exist or is not owned by the caller"""
    pass


class UserNotFoundException(NotFoundException):
    def __init__(self, username: str):
        self.username = username
        super().__init__(f"User with username {username} not found")


class ChallengeNotFoundException(NotFoundException):
    def __init__(self, challenge_id: uuid.UUID):
        self.challenge_id = challenge_id
        super().__init__(f"Challenge with ID {challenge_id} not found")


class ChallengeConfigNotFoundException(NotFoundException):
    def __init__(self, username: str):
        self.username = username
        super().__init__(f"No challenge config found for user {username}")


class ChallengeTypeConfigNotFoundException(NotFoundException):
    def __init__(self, challenge_type: str):
        self.challenge_type = challenge_type
        super().__init__(f"Challenge type config '{challenge_type}' not found")


class AlreadyExistsException(SavingsChallengeException):
    """A singleton or uniquely named object already exists"""
    pass


class ChallengeConfigAlreadyExistsException(AlreadyExistsException):
    def __init__(self, username: str):
        self.username = username
        super().__init__(f"User {username} already has a challenge config")


class ChallengeTypeConfigAlreadyExistsException(AlreadyExistsException):
    def __init__(self, challenge_type: str):
        self.challenge_type = challenge_type
        super().__init__(f"Challenge type config '{challenge_type}' already exists")


class ChallengeAlreadyCompletedException(SavingsChallengeException):
    def __init__(self, challenge_id: uuid.UUID):
        self.challenge_id = challenge_id
        super().__init__(f"Challenge with ID {challenge_id} is already completed")


class BadInputException(SavingsChallengeException):
    """Raised when a payload fails validation"""
    def __init__(self, message: str):
        super().__init__(f"Bad input: {message}")


class ActiveChallengeLimitExceededException(SavingsChallengeException):
    def __init__(self, limit: int):
        self.limit = limit
        super().__init__(f"Cannot have more than {limit} active challenges")
