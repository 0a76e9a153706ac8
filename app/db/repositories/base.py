"""
File: app/db/repositories/base.py
Description: 通用异步 Repository 基类 (CRUD)

本模块定义了 BaseRepository，封装了通用的 CRUD 操作。
所有领域的 Repository 应继承此类，以减少样板代码。

特性：
- 泛型支持: BaseRepository[ModelType, CreateSchemaType, UpdateSchemaType]
- 纯异步: 基于 sqlalchemy.ext.asyncio
- 写操作只 flush 不 commit，事务边界由 Service 层控制
- update 自动过滤核心系统字段 (id, created_at, updated_at)

Author: jinmozhe
Created: 2025-11-25
Updated: 2026-10-19
"""

from typing import Any, ClassVar, Generic, TypeVar

from pydantic import BaseModel
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.base import IntIdBase

ModelType = TypeVar("ModelType", bound=IntIdBase)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)


class BaseRepository(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    """
    通用 CRUD 仓储基类。

    参数:
    - ModelType: SQLAlchemy 模型类 (如 SwimmingSchedule)
    - CreateSchemaType: 创建数据的 Pydantic 模型 (如 ScheduleCreate)
    - UpdateSchemaType: 更新数据的 Pydantic 模型 (如 ScheduleUpdate)
    """

    # 受保护的字段，禁止通过通用 update 方法修改
    PROTECTED_FIELDS: ClassVar[set[str]] = {"id", "created_at", "updated_at"}

    def __init__(self, model: type[ModelType], session: AsyncSession):
        self.model = model
        self.session = session

    # --------------------------------------------------------------------------
    # 查询操作 (Read)
    # --------------------------------------------------------------------------

    async def get(self, id: int) -> ModelType | None:
        """根据主键 ID 查询单条记录"""
        return await self.session.get(self.model, id)

    async def list_all(self) -> list[ModelType]:
        """按主键顺序返回全部记录"""
        stmt = select(self.model).order_by(self.model.id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count(self, *criteria: Any) -> int:
        """
        按条件计数。

        用法:
            await repo.count(Reservation.schedule_id == 1)
        """
        stmt = select(func.count()).select_from(self.model).where(*criteria)
        result = await self.session.execute(stmt)
        return result.scalar_one()

    # --------------------------------------------------------------------------
    # 写入操作 (Create / Update / Delete)
    # --------------------------------------------------------------------------

    async def create(self, obj_in: CreateSchemaType | dict[str, Any]) -> ModelType:
        """
        创建新记录。

        支持传入 CreateSchema 或 字典。
        flush 到数据库以获取自增 ID，但不 commit。
        """
        if isinstance(obj_in, dict):
            obj_in_data = obj_in
        else:
            obj_in_data = obj_in.model_dump(exclude_unset=True)
        db_obj = self.model(**obj_in_data)

        self.session.add(db_obj)
        await self.session.flush()
        await self.session.refresh(db_obj)

        return db_obj

    async def update(
        self, db_obj: ModelType, obj_in: UpdateSchemaType | dict[str, Any]
    ) -> ModelType:
        """
        更新现有记录。

        支持传入 UpdateSchema (仅已设置字段，PATCH 语义) 或 字典。
        """
        if isinstance(obj_in, dict):
            update_data = obj_in
        else:
            update_data = obj_in.model_dump(exclude_unset=True)

        safe_data = {
            k: v for k, v in update_data.items() if k not in self.PROTECTED_FIELDS
        }
        db_obj.update(**safe_data)

        self.session.add(db_obj)
        await self.session.flush()
        await self.session.refresh(db_obj)

        return db_obj

    async def delete(self, db_obj: ModelType) -> None:
        """物理删除记录"""
        await self.session.delete(db_obj)
        await self.session.flush()
