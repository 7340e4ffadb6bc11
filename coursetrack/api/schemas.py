from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr

from coursetrack.domain.entities import LearnerRecord


class LoginRequest(BaseModel):
    username: str
    password: str


class LoginResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    access_token: str = Field(alias="accessToken")
    token_type: str = Field(default="bearer", alias="tokenType")
    user: LearnerRecord


class LectureRequest(BaseModel):
    """
    Body for completion and star toggles.

    Integer ids are accepted and normalised. Booleans and floats are rejected.
    """

    model_config = ConfigDict(populate_by_name=True)

    # Left optional so a missing id reaches validation and gets the usual error code
    lecture_id: StrictInt | StrictStr | None = Field(default=None, alias="lectureId")


class NoteRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    lecture_id: StrictInt | StrictStr | None = Field(default=None, alias="lectureId")
    text: str

