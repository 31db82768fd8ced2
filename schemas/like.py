from pydantic import BaseModel


class LikeStatus(BaseModel):
    liked: bool
