from pydantic import BaseModel, ConfigDict, Field


class Product(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    name: str
    price: int = Field(ge=0)  # unités mineures (centimes)
    image_url: str = Field(alias="imageUrl")
