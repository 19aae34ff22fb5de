from sqlalchemy.orm import Session

from campusapi.models.user import User as UserModel
from campusapi.schemas.user import User as UserSchema
from campusapi.repositories.base import BaseRepository


class UserRepository(BaseRepository[UserModel, UserSchema]):
    """사용자 리포지토리"""

    def __init__(self, db: Session):
        super().__init__(UserModel, UserSchema, db)
