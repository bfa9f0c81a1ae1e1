from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    # 파이썬 쪽은 snake_case, JSON 은 camelCase (기존 웹 클라이언트 포맷)
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,  # SQLAlchemy ORM -> Pydantic 변환
    )
