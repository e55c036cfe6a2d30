from src.app import AppSettings, bootstrap
from src.drill.workflow import StudyWorkflow

__all__ = ["main", "StudyWorkflow"]


def main() -> StudyWorkflow:
    """Entry point for the application."""
    settings = AppSettings.from_env()
    return bootstrap(settings)


if __name__ == "__main__":
    main()
