from abc import ABC
from datetime import datetime
from typing import (
    Any,
    Callable,
    Generic,
    Iterator,
    List,
    Optional,
    Tuple,
    Type,
    TypeVar,
)
from sqlalchemy import and_, or_
from sqlalchemy.orm import Session
from pydantic import BaseModel

T = TypeVar("T")
SchemaType = TypeVar("SchemaType", bound=BaseModel)
KeysetCursor = Tuple[datetime, Any]


class BaseRepository(Generic[T, SchemaType], ABC):
    """모든 리포지토리의 베이스 클래스 - Pydantic 응답 보장"""

    def __init__(
        self, model_class: Type[T], schema_class: Type[SchemaType], db: Session
    ):
        self.model_class = model_class
        self.schema_class = schema_class
        self.db = db

    def _to_schema(self, model_instance: Any) -> Optional[SchemaType]:
        """SQLAlchemy 모델을 Pydantic 스키마로 변환"""
        if model_instance is None:
            return None

        # Pydantic v2의 model_validate를 사용하여 from_attributes 활용
        return self.schema_class.model_validate(model_instance)

    def _to_schemas(self, model_instances: List[Any]) -> List[SchemaType]:
        return [
            schema
            for schema in (self._to_schema(instance) for instance in model_instances)
            if schema is not None
        ]

    def _apply_keyset(self, query, after: Optional[KeysetCursor]):
        """(created_at, id) 기준 키셋 페이지네이션 - after 다음 행부터 조회"""
        created_at_col = getattr(self.model_class, "created_at")
        id_col = getattr(self.model_class, "id")

        if after is not None:
            last_created_at, last_id = after
            query = query.filter(
                or_(
                    created_at_col > last_created_at,
                    and_(created_at_col == last_created_at, id_col > last_id),
                )
            )

        return query.order_by(created_at_col.asc(), id_col.asc())

    def get_by_id(self, id: Any) -> Optional[SchemaType]:
        """ID로 조회 - Pydantic 스키마 반환"""
        model_instance = (
            self.db.query(self.model_class)
            .filter(getattr(self.model_class, "id") == id)
            .first()
        )
        return self._to_schema(model_instance)

    def get_by_field(self, field_name: str, value: Any) -> Optional[SchemaType]:
        """특정 필드로 조회 - Pydantic 스키마 반환"""
        model_instance = (
            self.db.query(self.model_class)
            .filter(getattr(self.model_class, field_name) == value)
            .first()
        )
        return self._to_schema(model_instance)

    def create(self, commit: bool = True, **kwargs) -> Optional[SchemaType]:
        """새 레코드 생성 - Pydantic 스키마 반환"""
        instance = self.model_class(**kwargs)
        self.db.add(instance)
        try:
            self.db.flush()
            self.db.refresh(instance)
            if commit:
                self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        return self._to_schema(instance)

    def update(
        self, instance_id: Any, commit: bool = True, **kwargs
    ) -> Optional[SchemaType]:
        """레코드 업데이트 - Pydantic 스키마 반환"""
        instance = (
            self.db.query(self.model_class)
            .filter(getattr(self.model_class, "id") == instance_id)
            .first()
        )

        if not instance:
            return None

        for key, value in kwargs.items():
            if hasattr(instance, key):
                setattr(instance, key, value)

        self.db.add(instance)
        try:
            self.db.flush()
            self.db.refresh(instance)
            if commit:
                self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        return self._to_schema(instance)


class KeysetScan(Generic[SchemaType]):
    """
    (created_at, id) 키셋 배치 순회

    fetch(limit, after)로 배치를 가져오며 한 번의 순회에서 최대 max_rows 행까지만
    돌려줍니다. 순회가 끝난 뒤 capped가 True이면 상한 때문에 남은 행이 있다는 뜻입니다.
    """

    def __init__(
        self,
        fetch: Callable[[int, Optional[KeysetCursor]], List[SchemaType]],
        batch_size: int,
        max_rows: int,
    ):
        self.fetch = fetch
        self.batch_size = batch_size
        self.max_rows = max_rows
        self.capped = False

    def __iter__(self) -> Iterator[SchemaType]:
        remaining = self.max_rows
        after: Optional[KeysetCursor] = None

        while remaining > 0:
            limit = min(self.batch_size, remaining)
            batch = self.fetch(limit, after)
            for row in batch:
                yield row

            if len(batch) < limit:
                return

            remaining -= len(batch)
            last = batch[-1]
            after = (last.created_at, last.id)  # type: ignore[attr-defined]

        # 상한에 정확히 도달한 경우 다음 행이 실제로 있는지 확인
        self.capped = bool(self.fetch(1, after))
