# 프로필 CRUD 는 별도 서비스 담당. 여기서는 이름 조회용으로만 읽는다.
import uuid

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column
from essay_review.db.base import Base


class UserProfile(Base):
    __tablename__ = "user_profiles"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    display_name: Mapped[str] = mapped_column(Text, nullable=False)
