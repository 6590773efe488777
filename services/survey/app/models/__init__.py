# Import all models so Alembic can discover them via Base.metadata
from .question import Question
from .response import Response
from .submission import Submission

__all__ = [
    "Question",
    "Response",
    "Submission",
]
