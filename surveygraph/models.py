"""Survey record schema and the selection values that drive aggregation."""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum

from pydantic import BaseModel, ConfigDict

from surveygraph.normalize import normalize_case, normalize_range, normalize_year

# Bump when HEADER_FIELDS changes shape.
SCHEMA_VERSION = 1

# Header text as it appears in the survey export → SurveyRecord attribute.
HEADER_FIELDS: dict[str, str] = {
    "Timestamp": "timestamp",
    "Choose your gender": "gender",
    "Age": "age",
    "What is your course?": "course",
    "Your current year of Study": "year_of_study",
    "What is your CGPA?": "cgpa",
    "Marital status": "marital_status",
    "Do you have Depression?": "depression",
    "Do you have Anxiety?": "anxiety",
    "Do you have Panic attack?": "panic_attack",
    "Did you seek any specialist for a treatment?": "treatment",
}

OPTIONAL_HEADERS = frozenset({"Timestamp"})


class SurveyRecord(BaseModel):
    """One respondent's answers, exactly as read (no normalisation)."""

    model_config = ConfigDict(frozen=True)

    timestamp: str = ""
    gender: str = ""
    age: str = ""
    course: str = ""
    year_of_study: str = ""
    cgpa: str = ""
    marital_status: str = ""
    depression: str = ""
    anxiety: str = ""
    panic_attack: str = ""
    treatment: str = ""


class SurveyField(str, Enum):
    """Fields offered by the category selector, keyed by display name."""

    GENDER = "Gender"
    YEAR_OF_STUDY = "Year of Study"
    CGPA = "CGPA"
    DEPRESSION = "Depression"
    ANXIETY = "Anxiety"
    PANIC_ATTACK = "Panic attack"
    MARITAL_STATUS = "Marital status"
    TREATMENT = "Treatment"

    @property
    def attribute(self) -> str:
        return _FIELD_ATTRIBUTES[self]

    @property
    def normalizer(self) -> Callable[[str], str]:
        return _FIELD_NORMALIZERS.get(self, normalize_case)

    def value_of(self, record: SurveyRecord) -> str:
        """Normalised value of this field for *record* ("" when missing)."""
        raw = getattr(record, self.attribute)
        if not raw.strip():
            return ""
        return self.normalizer(raw.strip().lower())

    @classmethod
    def from_name(cls, name: str) -> SurveyField:
        """Look up a field by display name, enum name or attribute, case-insensitively."""
        key = name.strip().lower()
        for member in cls:
            if key in (member.value.lower(), member.name.lower(), member.attribute):
                return member
        raise KeyError(f"Unknown survey field: {name!r}")


_FIELD_ATTRIBUTES: dict[SurveyField, str] = {
    SurveyField.GENDER: "gender",
    SurveyField.YEAR_OF_STUDY: "year_of_study",
    SurveyField.CGPA: "cgpa",
    SurveyField.DEPRESSION: "depression",
    SurveyField.ANXIETY: "anxiety",
    SurveyField.PANIC_ATTACK: "panic_attack",
    SurveyField.MARITAL_STATUS: "marital_status",
    SurveyField.TREATMENT: "treatment",
}

_FIELD_NORMALIZERS: dict[SurveyField, Callable[[str], str]] = {
    SurveyField.YEAR_OF_STUDY: normalize_year,
    SurveyField.CGPA: normalize_range,
}


class Condition(str, Enum):
    """Boolean mental-health condition flags, in canonical order."""

    DEPRESSION = "Depression"
    ANXIETY = "Anxiety"
    PANIC_ATTACK = "Panic attack"

    @property
    def attribute(self) -> str:
        return _CONDITION_ATTRIBUTES[self]

    @property
    def short_name(self) -> str:
        """Name used inside combination keys ("Panic" rather than "Panic attack")."""
        return _CONDITION_SHORT_NAMES[self]


_CONDITION_ATTRIBUTES: dict[Condition, str] = {
    Condition.DEPRESSION: "depression",
    Condition.ANXIETY: "anxiety",
    Condition.PANIC_ATTACK: "panic_attack",
}

_CONDITION_SHORT_NAMES: dict[Condition, str] = {
    Condition.DEPRESSION: "Depression",
    Condition.ANXIETY: "Anxiety",
    Condition.PANIC_ATTACK: "Panic",
}

ALL_CONDITIONS: tuple[Condition, ...] = tuple(Condition)


class CategoryDefinition(BaseModel):
    """A named course group matched by case-insensitive keyword containment."""

    model_config = ConfigDict(frozen=True)

    name: str
    keywords: tuple[str, ...]


DEFAULT_CATEGORIES: tuple[CategoryDefinition, ...] = (
    CategoryDefinition(
        name="STEM",
        keywords=("Engineering", "BIT", "BCS", "Mathematics", "Biomedical science", "KOE", "IT"),
    ),
    CategoryDefinition(
        name="Social Sciences",
        keywords=("Psychology", "Human Resources", "Human Sciences", "Communication"),
    ),
    CategoryDefinition(
        name="Business",
        keywords=("Business Administration", "Accounting", "Banking Studies", "KENMS", "ENM"),
    ),
    CategoryDefinition(
        name="Religious Studies",
        keywords=("Islamic education", "Pendidikan islam", "KIRKHS", "Usuluddin", "Fiqh", "Fiqh fatwa"),
    ),
    CategoryDefinition(
        name="Law & Humanities",
        keywords=("Laws", "Law", "BENL", "ALA", "TAASL"),
    ),
    CategoryDefinition(
        name="Healthcare",
        keywords=("Nursing", "Radiography", "MHSC"),
    ),
)


def find_category(name: str, categories: tuple[CategoryDefinition, ...] = DEFAULT_CATEGORIES) -> CategoryDefinition:
    """Look up a category definition by name, case-insensitively."""
    key = name.strip().lower()
    for category in categories:
        if category.name.lower() == key:
            return category
    raise KeyError(f"Unknown course category: {name!r}")
