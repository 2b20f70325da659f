"""Initial patient records schema."""

from alembic import op
import sqlalchemy as sa

revision = "20261016001"
down_revision = None
branch_labels = None
depends_on = None

PATIENT_STATUSES = ("Inquiry", "Onboarding", "Active", "Churned")
AUDIT_ACTIONS = ("CREATE", "UPDATE", "DELETE", "STATUS_CHANGE")


def _in_list(column: str, values: tuple[str, ...]) -> str:
    quoted = ", ".join(f"'{value}'" for value in values)
    return f"{column} IN ({quoted})"


def upgrade() -> None:
    op.create_table(
        "patients",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("first_name", sa.String(length=255), nullable=False),
        sa.Column("middle_name", sa.String(length=255), nullable=True),
        sa.Column("last_name", sa.String(length=255), nullable=False),
        sa.Column("date_of_birth", sa.Date(), nullable=False),
        sa.Column("status", sa.String(length=50), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("phone", sa.String(length=50), nullable=True),
        sa.Column("address_street", sa.String(length=255), nullable=False),
        sa.Column("address_city", sa.String(length=255), nullable=False),
        sa.Column("address_state", sa.String(length=100), nullable=False),
        sa.Column("address_zip_code", sa.String(length=20), nullable=False),
        sa.Column(
            "address_country",
            sa.String(length=100),
            nullable=False,
            server_default=sa.text("'USA'"),
        ),
        sa.Column("address_latitude", sa.Numeric(10, 8), nullable=True),
        sa.Column("address_longitude", sa.Numeric(11, 8), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id", name="pk_patients"),
        sa.CheckConstraint(
            _in_list("status", PATIENT_STATUSES), name="ck_patients_patient_status"
        ),
    )
    op.create_index("idx_patients_status", "patients", ["status"], unique=False)
    op.create_index("idx_patients_created_at", "patients", ["created_at"], unique=False)

    op.create_table(
        "audit_logs",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("patient_id", sa.Uuid(), nullable=False),
        sa.Column("action", sa.String(length=50), nullable=False),
        sa.Column("field_name", sa.String(length=100), nullable=True),
        sa.Column("old_value", sa.Text(), nullable=True),
        sa.Column("new_value", sa.Text(), nullable=True),
        sa.Column(
            "performed_by",
            sa.String(length=255),
            nullable=False,
            server_default=sa.text("'System'"),
        ),
        sa.Column(
            "performed_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_audit_logs"),
        sa.ForeignKeyConstraint(
            ["patient_id"],
            ["patients.id"],
            name="fk_audit_logs_patient_id_patients",
            ondelete="CASCADE",
        ),
        sa.CheckConstraint(
            _in_list("action", AUDIT_ACTIONS), name="ck_audit_logs_audit_action"
        ),
    )
    op.create_index("idx_audit_logs_patient_id", "audit_logs", ["patient_id"], unique=False)
    op.create_index(
        "idx_audit_logs_performed_at", "audit_logs", ["performed_at"], unique=False
    )

    op.create_table(
        "patient_deletions",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("patient_id", sa.Uuid(), nullable=False),
        sa.Column("first_name", sa.String(length=255), nullable=False),
        sa.Column("last_name", sa.String(length=255), nullable=False),
        sa.Column(
            "performed_by",
            sa.String(length=255),
            nullable=False,
            server_default=sa.text("'System'"),
        ),
        sa.Column(
            "performed_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_patient_deletions"),
    )
    op.create_index(
        "idx_patient_deletions_performed_at",
        "patient_deletions",
        ["performed_at"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("idx_patient_deletions_performed_at", table_name="patient_deletions")
    op.drop_table("patient_deletions")
    op.drop_index("idx_audit_logs_performed_at", table_name="audit_logs")
    op.drop_index("idx_audit_logs_patient_id", table_name="audit_logs")
    op.drop_table("audit_logs")
    op.drop_index("idx_patients_created_at", table_name="patients")
    op.drop_index("idx_patients_status", table_name="patients")
    op.drop_table("patients")
