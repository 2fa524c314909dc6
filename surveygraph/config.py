"""Application settings loaded from environment variables or .env."""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


def _find_env_files() -> list[Path]:
    """Find .env files to load, searching upward from CWD and in the package dir.

    Checks (in priority order, last wins in pydantic-settings):
    1. The surveygraph package directory's parent
    2. The nearest .env walking up from the current working directory
    """
    candidates: list[Path] = []

    pkg_env = Path(__file__).resolve().parent.parent / ".env"
    if pkg_env.is_file():
        candidates.append(pkg_env)

    cwd = Path.cwd().resolve()
    for parent in [cwd, *cwd.parents]:
        env_path = parent / ".env"
        if env_path.is_file() and env_path not in candidates:
            candidates.append(env_path)
            break  # stop at first match going upward

    return candidates


class SurveyGraphSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="SURVEYGRAPH_",
        env_file=_find_env_files(),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    project_name: str = "Student Mental Health"

    # Dataset: a file path or an http(s) URL
    data_source: str = "data/StudentMentalhealth.csv"
    http_timeout: float = 10.0

    # Output
    output_dir: Path = Path("surveygraph-output")

    # Chord diagram age range (inclusive)
    min_age: int = 18
    max_age: int = 24

    @property
    def ages(self) -> tuple[int, ...]:
        return tuple(range(self.min_age, self.max_age + 1))


def load_settings(**overrides: object) -> SurveyGraphSettings:
    """Load settings, applying CLI overrides that were actually given."""
    given = {k: v for k, v in overrides.items() if v is not None}
    return SurveyGraphSettings(**given)  # type: ignore[arg-type]
