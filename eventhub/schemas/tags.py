from pydantic import BaseModel, Field, field_validator


class TagCreate(BaseModel):
    name: str = Field(min_length=1, max_length=64)

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Tag name must not be blank")
        return value


class TagUpdate(TagCreate):
    pass


class TagOut(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True
