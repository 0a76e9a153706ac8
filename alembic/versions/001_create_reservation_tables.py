"""
File: alembic/versions/001_create_reservation_tables.py
Description: 初始迁移 - 用户、泳池时段、预约、付款流水

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

Author: jinmozhe
Created: 2026-10-19
"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
            comment="创建时间 (UTC)",
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
            comment="更新时间 (UTC)",
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("email", sa.String(255), nullable=False, comment="登录邮箱 (唯一)"),
        sa.Column("password", sa.String(255), nullable=False, comment="密码哈希记录"),
        sa.Column("name", sa.String(100), nullable=False, comment="姓名"),
        sa.Column("phone", sa.String(30), nullable=True, comment="联系电话"),
        sa.Column(
            "role",
            sa.String(20),
            server_default="USER",
            nullable=False,
            comment="角色",
        ),
        sa.Column(
            "is_active",
            sa.Boolean(),
            server_default=sa.text("true"),
            nullable=False,
            comment="是否激活",
        ),
        *_timestamps(),
        sa.CheckConstraint(
            "length(trim(email)) > 0", name=op.f("ck_users_email_not_empty")
        ),
        sa.CheckConstraint(
            "length(password) > 0", name=op.f("ck_users_password_not_empty")
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_users")),
        sa.UniqueConstraint("email", name=op.f("uq_users_email")),
    )

    op.create_table(
        "swimming_schedule",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("day_of_week", sa.SmallInteger(), nullable=False, comment="星期 (0=周日)"),
        sa.Column("start_time", sa.Time(), nullable=False, comment="开始时刻"),
        sa.Column("end_time", sa.Time(), nullable=False, comment="结束时刻"),
        sa.Column("max_capacity", sa.Integer(), nullable=False, comment="最大容纳人数"),
        sa.Column("lane_count", sa.Integer(), nullable=False, comment="泳道数"),
        sa.Column(
            "is_active",
            sa.Boolean(),
            server_default=sa.text("true"),
            nullable=False,
            comment="是否开放预约",
        ),
        *_timestamps(),
        sa.CheckConstraint(
            "day_of_week BETWEEN 0 AND 6",
            name=op.f("ck_swimming_schedule_day_of_week_range"),
        ),
        sa.CheckConstraint(
            "end_time > start_time", name=op.f("ck_swimming_schedule_time_range")
        ),
        sa.CheckConstraint(
            "max_capacity > 0", name=op.f("ck_swimming_schedule_capacity_positive")
        ),
        sa.CheckConstraint(
            "lane_count > 0", name=op.f("ck_swimming_schedule_lanes_positive")
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_swimming_schedule")),
    )

    op.create_table(
        "reservation",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False, comment="预约人"),
        sa.Column("schedule_id", sa.Integer(), nullable=False, comment="时段"),
        sa.Column("date", sa.Date(), nullable=False, comment="预约日期"),
        sa.Column(
            "status",
            sa.String(20),
            server_default="PENDING",
            nullable=False,
            comment="预约状态",
        ),
        sa.Column(
            "is_paid",
            sa.Boolean(),
            server_default=sa.text("false"),
            nullable=False,
            comment="是否已付款",
        ),
        sa.Column(
            "payment_date",
            sa.DateTime(timezone=True),
            nullable=True,
            comment="付款确认时间 (UTC)",
        ),
        sa.Column(
            "payment_confirmed_by", sa.Integer(), nullable=True, comment="确认付款的员工"
        ),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["user_id"], ["users.id"], name=op.f("fk_reservation_user_id_users")
        ),
        sa.ForeignKeyConstraint(
            ["schedule_id"],
            ["swimming_schedule.id"],
            name=op.f("fk_reservation_schedule_id_swimming_schedule"),
        ),
        sa.ForeignKeyConstraint(
            ["payment_confirmed_by"],
            ["users.id"],
            name=op.f("fk_reservation_payment_confirmed_by_users"),
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_reservation")),
    )
    op.create_index(
        op.f("ix_reservation_reservation_user_id"),
        "reservation",
        ["user_id"],
        unique=False,
    )
    op.create_index(
        "ix_reservation_schedule_date",
        "reservation",
        ["schedule_id", "date"],
        unique=False,
    )

    op.create_table(
        "payment_record",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("reservation_id", sa.Integer(), nullable=False, comment="所属预约"),
        sa.Column("amount", sa.Integer(), nullable=False, comment="金额"),
        sa.Column("payment_method", sa.String(50), nullable=False, comment="付款方式"),
        sa.Column("confirmed_by_id", sa.Integer(), nullable=False, comment="确认人"),
        sa.Column("notes", sa.Text(), server_default="", nullable=False, comment="备注"),
        *_timestamps(),
        sa.CheckConstraint("amount > 0", name=op.f("ck_payment_record_amount_positive")),
        sa.ForeignKeyConstraint(
            ["reservation_id"],
            ["reservation.id"],
            name=op.f("fk_payment_record_reservation_id_reservation"),
        ),
        sa.ForeignKeyConstraint(
            ["confirmed_by_id"],
            ["users.id"],
            name=op.f("fk_payment_record_confirmed_by_id_users"),
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_payment_record")),
    )
    op.create_index(
        op.f("ix_payment_record_payment_record_reservation_id"),
        "payment_record",
        ["reservation_id"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index(
        op.f("ix_payment_record_payment_record_reservation_id"),
        table_name="payment_record",
    )
    op.drop_table("payment_record")
    op.drop_index("ix_reservation_schedule_date", table_name="reservation")
    op.drop_index(op.f("ix_reservation_reservation_user_id"), table_name="reservation")
    op.drop_table("reservation")
    op.drop_table("swimming_schedule")
    op.drop_table("users")
