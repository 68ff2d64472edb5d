"""Public commit view returned to scan collaborators."""

from datetime import datetime

from pydantic import BaseModel


class CommitView(BaseModel):
    """The commit that last changed a file, as seen by report code."""

    sha: str
    author_name: str
    author_email: str
    author_date: datetime
    message: str

    @property
    def summary(self) -> str:
        """First line of the commit message."""
        return self.message.strip().split("\n", 1)[0]

    def short_sha(self, length: int = 8) -> str:
        return self.sha[:length]

    model_config = {"frozen": True}
