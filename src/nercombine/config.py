"""Configuration management for the NER combiner."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Classifier cascade, comma-separated model paths in priority order
    ner_models: str = ""
    ner_apply_numeric_classifiers: bool = True
    ner_use_time_normalization: bool = True
    ner_rules_ignore_case: bool = False

    # Diagnostics
    ner_verbose: bool = False

    # Processing
    max_workers: int = 1

    # Logging
    log_level: str = "INFO"

    @property
    def model_paths(self) -> list[str]:
        """Split configured model paths, dropping blanks."""
        return [path.strip() for path in self.ner_models.split(",") if path.strip()]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
