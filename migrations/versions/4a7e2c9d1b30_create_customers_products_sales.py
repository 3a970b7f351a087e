"""create customers, products and sales

Revision ID: 4a7e2c9d1b30
Revises:
Create Date: 2026-10-19

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect


# revision identifiers, used by Alembic.
revision: str = "4a7e2c9d1b30"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

sale_status = sa.Enum("pending", "completed", "cancelled", name="sale_status")


def upgrade() -> None:
    bind = op.get_bind()
    insp = inspect(bind)
    existing_tables = set(insp.get_table_names())

    def _has_index(table: str, name: str) -> bool:
        try:
            return any(ix.get("name") == name for ix in insp.get_indexes(table))
        except Exception:
            return False

    if "customers" not in existing_tables:
        op.create_table(
            "customers",
            sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
            sa.Column("company_name", sa.String(length=255), nullable=False),
            sa.Column("contact_name", sa.String(length=255), nullable=False),
            sa.Column("email", sa.String(length=255), nullable=False),
            sa.Column("phone", sa.String(length=20), nullable=True),
            sa.Column(
                "created_at",
                sa.DateTime(timezone=False),
                nullable=False,
                server_default=sa.func.current_timestamp(),
            ),
            sa.Column(
                "updated_at",
                sa.DateTime(timezone=False),
                nullable=False,
                server_default=sa.func.current_timestamp(),
            ),
            sa.UniqueConstraint("email", name="uq_customers_email"),
        )
        existing_tables.add("customers")

    if "customers" in existing_tables:
        insp = inspect(op.get_bind())
        for idx_name, cols in (
            ("idx_customers_company_name", ["company_name"]),
            ("idx_customers_contact_name", ["contact_name"]),
        ):
            if not _has_index("customers", idx_name):
                op.create_index(idx_name, "customers", cols)

    if "products" not in existing_tables:
        op.create_table(
            "products",
            sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
            sa.Column("name", sa.String(length=255), nullable=False),
            sa.Column("description", sa.Text(), nullable=True),
            sa.Column("price", sa.Numeric(10, 2), nullable=False),
            sa.Column("category", sa.String(length=100), nullable=False),
            sa.Column(
                "created_at",
                sa.DateTime(timezone=False),
                nullable=False,
                server_default=sa.func.current_timestamp(),
            ),
            sa.Column(
                "updated_at",
                sa.DateTime(timezone=False),
                nullable=False,
                server_default=sa.func.current_timestamp(),
            ),
        )
        existing_tables.add("products")

    if "products" in existing_tables:
        insp = inspect(op.get_bind())
        for idx_name, cols in (
            ("idx_products_category", ["category"]),
            ("idx_products_name", ["name"]),
        ):
            if not _has_index("products", idx_name):
                op.create_index(idx_name, "products", cols)

    if "sales" not in existing_tables:
        op.create_table(
            "sales",
            sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
            sa.Column("customer_id", sa.Integer(), nullable=False),
            sa.Column("product_id", sa.Integer(), nullable=False),
            sa.Column("amount", sa.Numeric(10, 2), nullable=False),
            sa.Column("quantity", sa.Integer(), nullable=False, server_default="1"),
            sa.Column("sale_date", sa.DateTime(timezone=False), nullable=False),
            sa.Column("status", sale_status, nullable=False, server_default="pending"),
            sa.Column(
                "created_at",
                sa.DateTime(timezone=False),
                nullable=False,
                server_default=sa.func.current_timestamp(),
            ),
            sa.Column(
                "updated_at",
                sa.DateTime(timezone=False),
                nullable=False,
                server_default=sa.func.current_timestamp(),
            ),
            # No ON DELETE: a customer or product with sales cannot be removed.
            sa.ForeignKeyConstraint(["customer_id"], ["customers.id"]),
            sa.ForeignKeyConstraint(["product_id"], ["products.id"]),
        )
        existing_tables.add("sales")

    if "sales" in existing_tables:
        insp = inspect(op.get_bind())
        for idx_name, cols in (
            ("idx_sales_customer_id", ["customer_id"]),
            ("idx_sales_product_id", ["product_id"]),
            ("idx_sales_sale_date", ["sale_date"]),
        ):
            if not _has_index("sales", idx_name):
                op.create_index(idx_name, "sales", cols)


def downgrade() -> None:
    op.drop_index("idx_sales_sale_date", table_name="sales")
    op.drop_index("idx_sales_product_id", table_name="sales")
    op.drop_index("idx_sales_customer_id", table_name="sales")
    op.drop_table("sales")
    sale_status.drop(op.get_bind(), checkfirst=True)

    op.drop_index("idx_products_name", table_name="products")
    op.drop_index("idx_products_category", table_name="products")
    op.drop_table("products")

    op.drop_index("idx_customers_contact_name", table_name="customers")
    op.drop_index("idx_customers_company_name", table_name="customers")
    op.drop_table("customers")
