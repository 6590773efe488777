import enum


class Priority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class QuestionStatus(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    ARCHIVED = "archived"


class SurveyType(str, enum.Enum):
    """Survey track. Called ``mode`` on questions."""

    REGULAR = "regular"
    OUDER_KIND = "ouder_kind"  # parent-child visiting days


class Location(str, enum.Enum):
    ZAANSTAD = "Zaanstad"
    VEENHUIZEN = "Veenhuizen"
    ALMELO = "Almelo"


class SortField(str, enum.Enum):
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"
    TITLE = "title"
    PRIORITY = "priority"


class SortOrder(str, enum.Enum):
    ASC = "ASC"
    DESC = "DESC"


PRIORITY_RANK = {Priority.LOW.value: 1, Priority.MEDIUM.value: 2, Priority.HIGH.value: 3}
