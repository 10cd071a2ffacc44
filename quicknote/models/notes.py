from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

VERIFY_PASSWORD_ACTION = "verifyPassword"


class NoteUpdate(BaseModel):
    """Fields accepted by ``POST /notes/{name}``, JSON or form-encoded."""

    model_config = ConfigDict(populate_by_name=True)

    password: Optional[str] = None
    clear_password: Optional[str] = Field(default=None, alias="clearPassword")
    password_verified: Optional[bool] = Field(default=None, alias="passwordVerified")
    action: Optional[str] = None
    text: Optional[str] = None

    @property
    def wants_clear_password(self) -> bool:
        return self.clear_password == "true"

    @property
    def has_text(self) -> bool:
        # an explicit null counts as sent and clears the note
        return "text" in self.model_fields_set

    @property
    def is_verify_only(self) -> bool:
        return self.action == VERIFY_PASSWORD_ACTION


class MutationResult(BaseModel):
    success: bool
    reason: Optional[str] = None
