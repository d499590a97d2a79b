from pathlib import Path
from typing import Optional

from infra.errors import ArtifactResolutionError
from infra.pipeline.schemas import StageResult
from infra.pipeline.storage.run_storage import RunStorage


class BaseStage:
    name: str = None
    consumes: Optional[str] = None  # upstream stage whose artifact this stage reads

    # Metadata
    icon: str = "📦"
    short_name: str = None
    description: str = ""

    def __init__(self, storage: RunStorage):
        self.storage = storage

    @property
    def logger(self):
        """Get logger from storage (single source of truth)."""
        return self.storage.logger(self.name)

    def resolve_output(self, input_artifact: Optional[Path]) -> Optional[Path]:
        """Where this stage's artifact lives, by explicit path or convention.

        Returns None when the location is only known after the stage runs.
        """
        raise NotImplementedError

    def check_input_artifact(self, input_artifact: Optional[Path]) -> None:
        if not self.consumes:
            return

        if input_artifact is None:
            raise ArtifactResolutionError(
                f"{self.name} stage needs the {self.consumes} artifact but none was resolved"
            )

        if not Path(input_artifact).exists():
            raise ArtifactResolutionError(
                f"{self.name} stage input not found: {input_artifact}. "
                f"Run the {self.consumes} stage first or supply an existing file."
            )

    def before(self, input_artifact: Optional[Path]) -> None:
        self.check_input_artifact(input_artifact)

    def run(self, input_artifact: Optional[Path]) -> StageResult:
        raise NotImplementedError
