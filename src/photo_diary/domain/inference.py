"""Models for inference service responses."""

from pydantic import BaseModel


class CaptionInference(BaseModel):
    """Body returned by the captioning endpoint."""

    caption: str


class CategoryInference(BaseModel):
    """Body returned by the classification endpoint."""

    categories: list[str]
