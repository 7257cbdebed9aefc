from schemas.imports import *


class CategoryBase(BaseModel):
    name: str = Field(min_length=1)
    icon: str = Field(default="folder", min_length=1)


class CategoryCreate(CategoryBase):
    user_id: str
    created_at: int = Field(default_factory=epoch)
    last_updated: int = Field(default_factory=epoch)


class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    icon: Optional[str] = Field(default=None, min_length=1)


class CategoryOut(MongoOutModel):
    user_id: str
    name: str
    icon: str
    created_at: Optional[int] = None
    last_updated: Optional[int] = None
    documents_count: Optional[int] = None
