"""initial lead pipeline schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19 12:00:00.000000

"""

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    # Authentication provider tables (read by the CRM, written at sign-in)
    op.create_table(
        "user",
        sa.Column("id", sa.String(length=255), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False, unique=True),
        sa.Column("email_verified", sa.Boolean(), nullable=False),
        sa.Column("image", sa.Text()),
        *_timestamps(),
    )
    op.create_table(
        "session",
        sa.Column("id", sa.String(length=255), primary_key=True),
        sa.Column("token", sa.String(length=255), nullable=False, unique=True),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column(
            "user_id",
            sa.String(length=255),
            sa.ForeignKey("user.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("ip_address", sa.String(length=64)),
        sa.Column("user_agent", sa.Text()),
        *_timestamps(),
    )

    op.create_table(
        "crm_users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "auth_user_id",
            sa.String(length=255),
            sa.ForeignKey("user.id", ondelete="CASCADE"),
            nullable=False,
            unique=True,
        ),
        sa.Column("email", sa.String(length=255), nullable=False, unique=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("role", sa.String(length=20), nullable=False),
        *_timestamps(),
        sa.CheckConstraint("role IN ('admin', 'agent')", name="ck_crm_user_role"),
    )

    op.create_table(
        "leads",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("phone", sa.String(length=50)),
        sa.Column("source", sa.String(length=20), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column(
            "assigned_to",
            sa.Integer(),
            sa.ForeignKey("crm_users.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("notes", sa.Text()),
        sa.Column("ticket_number", sa.String(length=100)),
        sa.Column("cover_image", sa.Text()),
        sa.Column("preferred_contact", sa.String(length=50)),
        *_timestamps(),
        sa.CheckConstraint(
            "status IN ('new', 'contacted', 'qualified', 'proposal', 'won', 'lost')",
            name="ck_lead_status",
        ),
        sa.CheckConstraint(
            "source IN ('chat', 'wizard', 'contact')", name="ck_lead_source"
        ),
    )
    op.create_index("idx_leads_created_at", "leads", ["created_at"])
    op.create_index("idx_leads_status", "leads", ["status"])
    op.create_index("idx_leads_assigned_to", "leads", ["assigned_to"])

    op.create_table(
        "products",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("category", sa.String(length=50), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("base_price", sa.Integer(), nullable=False),
        sa.Column("description_es", sa.Text()),
        sa.Column("description_en", sa.Text()),
        sa.Column("image_url", sa.Text()),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "quotes",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "lead_id", sa.Integer(), sa.ForeignKey("leads.id"), nullable=False
        ),
        sa.Column(
            "product_id", sa.Integer(), sa.ForeignKey("products.id"), nullable=False
        ),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("size", sa.String(length=100)),
        sa.Column("budget_range", sa.String(length=100)),
        sa.Column("artwork_preference", sa.String(length=255)),
        sa.Column("estimated_price", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("valid_until", sa.DateTime(timezone=True)),
        *_timestamps(),
        sa.CheckConstraint("quantity >= 1", name="ck_quote_quantity"),
        sa.CheckConstraint("estimated_price > 0", name="ck_quote_estimated_price"),
        sa.CheckConstraint(
            "status IN ('draft', 'sent', 'accepted', 'rejected')",
            name="ck_quote_status",
        ),
    )
    op.create_index("idx_quotes_lead_id", "quotes", ["lead_id"])

    op.create_table(
        "estimates",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("quote_number", sa.String(length=20), nullable=False, unique=True),
        sa.Column("client_name", sa.String(length=255), nullable=False),
        sa.Column("client_email", sa.String(length=255), nullable=False),
        sa.Column("client_phone", sa.String(length=50)),
        sa.Column("client_address", sa.Text()),
        sa.Column("items", sa.Text(), nullable=False),
        sa.Column("subtotal", sa.Numeric(12, 2), nullable=False),
        sa.Column("tax_rate", sa.Numeric(6, 3), nullable=False),
        sa.Column("tax_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("shipping_cost", sa.Numeric(12, 2), nullable=False),
        sa.Column("total", sa.Numeric(12, 2), nullable=False),
        sa.Column("notes", sa.Text()),
        sa.Column("valid_until", sa.DateTime(timezone=True)),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("pdf_file", sa.Text()),
        sa.Column("user_id", sa.String(length=255), nullable=False),
        *_timestamps(),
        sa.CheckConstraint(
            "status IN ('draft', 'sent', 'accepted', 'rejected')",
            name="ck_estimate_status",
        ),
    )
    op.create_index("idx_estimates_user_id", "estimates", ["user_id"])

    op.create_table(
        "chat_sessions",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("lead_id", sa.Integer(), sa.ForeignKey("leads.id"), nullable=True),
        sa.Column("messages", sa.JSON(), nullable=False),
        sa.Column("context_captured", sa.JSON()),
        sa.Column("status", sa.String(length=20), nullable=False),
        *_timestamps(),
        sa.CheckConstraint(
            "status IN ('active', 'closed')", name="ck_chat_session_status"
        ),
    )

    op.create_table(
        "files",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("lead_id", sa.Integer(), sa.ForeignKey("leads.id"), nullable=False),
        sa.Column(
            "quote_id", sa.Integer(), sa.ForeignKey("quotes.id"), nullable=True
        ),
        sa.Column("filename", sa.String(length=255), nullable=False),
        sa.Column("file_url", sa.Text(), nullable=False),
        sa.Column("file_type", sa.String(length=100), nullable=False),
        sa.Column("file_size", sa.Integer(), nullable=False),
        sa.Column("uploaded_by", sa.String(length=255)),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("idx_files_lead_id", "files", ["lead_id"])

    op.create_table(
        "notes",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.String(length=255), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("content", sa.Text()),
        sa.Column("category", sa.String(length=20), nullable=False),
        sa.Column("completed", sa.Boolean(), nullable=False),
        sa.Column("due_date", sa.DateTime(timezone=True)),
        *_timestamps(),
        sa.CheckConstraint(
            "category IN ('nota', 'tarea', 'recordatorio')", name="ck_note_category"
        ),
    )
    op.create_index("idx_notes_user_id", "notes", ["user_id"])


def downgrade() -> None:
    op.drop_index("idx_notes_user_id", table_name="notes")
    op.drop_table("notes")
    op.drop_index("idx_files_lead_id", table_name="files")
    op.drop_table("files")
    op.drop_table("chat_sessions")
    op.drop_index("idx_estimates_user_id", table_name="estimates")
    op.drop_table("estimates")
    op.drop_index("idx_quotes_lead_id", table_name="quotes")
    op.drop_table("quotes")
    op.drop_table("products")
    op.drop_index("idx_leads_assigned_to", table_name="leads")
    op.drop_index("idx_leads_status", table_name="leads")
    op.drop_index("idx_leads_created_at", table_name="leads")
    op.drop_table("leads")
    op.drop_table("crm_users")
    op.drop_table("session")
    op.drop_table("user")
