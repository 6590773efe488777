"""Domain exception classes for the survey service.

These are raised by service-layer code and caught by controllers
to map to appropriate HTTP responses.
"""


class QuestionNotFoundError(Exception):
    """Raised when no question matches the given identifier."""

    def __init__(self, question_id: str = ""):
        self.question_id = question_id
        super().__init__(f"Question not found: {question_id}")


class QuestionAlreadyExistsError(Exception):
    """Raised when an insert hits the questions primary key."""

    def __init__(self, question_id: str = ""):
        self.question_id = question_id
        super().__init__(f"Question with this UUID already exists: {question_id}")


class EmptyUpdateError(Exception):
    """Raised when an update carries no field the store can apply."""

    def __init__(self) -> None:
        super().__init__("No valid fields to update")


class LocationRequiredError(Exception):
    """Raised when a location-tracking deployment receives a submission without one."""
