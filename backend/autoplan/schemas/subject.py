from pydantic import BaseModel, Field

from autoplan.models.session import SessionCategory, Term


class SubjectPayload(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    track: str = Field(min_length=1, max_length=100)
    term: Term = Term.autumn
    sections: int = Field(default=1, ge=0, le=26)
    tutorial_groups: int = Field(default=0, ge=0, le=50)
    lab_groups: int = Field(default=0, ge=0, le=50)
    lecture_hours: float = Field(default=48, ge=0)
    tutorial_hours: float = Field(default=32, ge=0)
    lab_hours: float = Field(default=36, gt=0)
    lab_teachers: int = Field(default=1, ge=1, le=10)

    model_config = {"from_attributes": True}

    def hour_credit(self, category: SessionCategory) -> float:
        if category == SessionCategory.lecture:
            return self.lecture_hours
        if category == SessionCategory.tutorial:
            return self.tutorial_hours
        return self.lab_hours

    def total_volume(self) -> float:
        """Theoretical hour volume of the subject; every Lab co-teacher is paid the full Lab credit."""
        lectures = self.sections * self.lecture_hours
        tutorials = self.sections * self.tutorial_groups * self.tutorial_hours
        labs = self.sections * self.lab_groups * self.lab_hours * self.lab_teachers
        return lectures + tutorials + labs

    def required_teachers(self, category: SessionCategory) -> int:
        return self.lab_teachers if category == SessionCategory.lab else 1
