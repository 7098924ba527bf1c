# fastapi-users provides the read/create/update schemas; admin listing reuses UserRead

from uuid import UUID
from fastapi_users import schemas


class UserRead(schemas.BaseUser[UUID]):
    pass


class UserCreate(schemas.BaseUserCreate):
    pass


class UserUpdate(schemas.BaseUserUpdate):
    pass
