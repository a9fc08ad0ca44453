from alembic import op
import sqlalchemy as sa

revision = "20250131_init"
down_revision = None
branch_labels = None
depends_on = None

def upgrade():
    op.create_table(
        "tastings",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("type", sa.String(16), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("image_base64", sa.Text()),
        sa.Column("nose_notes", sa.Text(), nullable=False),
        sa.Column("palate_notes", sa.Text(), nullable=False),
        sa.Column("finish_notes", sa.Text(), nullable=False),
        sa.Column("color_notes", sa.Text(), nullable=False),
        sa.Column("pairing_suggestions", sa.Text(), nullable=False),
        sa.Column("aroma_score", sa.Integer, nullable=False),
        sa.Column("palate_score", sa.Integer, nullable=False),
        sa.Column("finish_score", sa.Integer, nullable=False),
        sa.Column("overall_score", sa.Float, nullable=False),
        sa.Column("vintage", sa.Integer),
        sa.Column("varietal", sa.String(120)),
        sa.Column("region", sa.String(120)),
        sa.Column("distillery", sa.String(120)),
        sa.Column("age_statement", sa.Integer),
        sa.Column("mash_bill", sa.JSON()),
        sa.Column("created_at", sa.String(32), nullable=False),
        sa.Column("updated_at", sa.String(32), nullable=False),
    )
    op.create_index("ix_tastings_type", "tastings", ["type"])
    op.create_index("ix_tastings_name", "tastings", ["name"])
    op.create_index("ix_tastings_overall_score", "tastings", ["overall_score"])
    op.create_index("ix_tastings_created_at", "tastings", ["created_at"])

def downgrade():
    op.drop_index("ix_tastings_created_at", table_name="tastings")
    op.drop_index("ix_tastings_overall_score", table_name="tastings")
    op.drop_index("ix_tastings_name", table_name="tastings")
    op.drop_index("ix_tastings_type", table_name="tastings")
    op.drop_table("tastings")
