from pydantic import BaseModel, ConfigDict, Field


class AspectCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)


class AspectResponse(BaseModel):
    id: int
    name: str

    model_config = ConfigDict(from_attributes=True)


class ContactAdd(BaseModel):
    person_guid: str = Field(..., min_length=1)
