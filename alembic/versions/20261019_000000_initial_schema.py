"""initial_schema

Revision ID: 3f1c2a9d7b10
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""

from typing import Sequence, Union

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3f1c2a9d7b10"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute(
        """
        CREATE TABLE classes (
            id SERIAL PRIMARY KEY,
            age VARCHAR(50) NOT NULL,
            class_name VARCHAR(100) NOT NULL
        );
        """
    )

    op.execute(
        """
        CREATE TABLE children (
            id SERIAL PRIMARY KEY,
            name VARCHAR(100) NOT NULL,
            birthdate VARCHAR(10) NOT NULL,
            class_id INTEGER NOT NULL REFERENCES classes(id)
        );
        CREATE INDEX ix_children_class_id ON children (class_id);
        """
    )

    op.execute(
        """
        CREATE TABLE activity_plans (
            id SERIAL PRIMARY KEY,
            class_id INTEGER NOT NULL REFERENCES classes(id),
            theme VARCHAR(200) NOT NULL,
            start_date VARCHAR(10) NOT NULL,
            end_date VARCHAR(10) NOT NULL,
            age VARCHAR(50) NOT NULL,
            plans JSONB NOT NULL DEFAULT '[]'::jsonb,
            created_at TIMESTAMP WITH TIME ZONE NOT NULL DEFAULT CURRENT_TIMESTAMP
        );
        CREATE INDEX ix_activity_plans_class_id ON activity_plans (class_id);
        """
    )

    op.execute(
        """
        CREATE TABLE childcare_logs (
            id SERIAL PRIMARY KEY,
            class_id INTEGER NOT NULL REFERENCES classes(id),
            date VARCHAR(10) NOT NULL,
            keywords TEXT NOT NULL DEFAULT '',
            evaluation TEXT NOT NULL DEFAULT '',
            support_plan TEXT NOT NULL DEFAULT '',
            schedule JSONB,
            evaluation_content TEXT,
            created_at TIMESTAMP WITH TIME ZONE NOT NULL DEFAULT CURRENT_TIMESTAMP,
            CONSTRAINT uq_childcare_logs_class_date UNIQUE (class_id, date)
        );
        """
    )

    op.execute(
        """
        CREATE TABLE daily_child_observations (
            id SERIAL PRIMARY KEY,
            class_id INTEGER NOT NULL REFERENCES classes(id),
            date VARCHAR(10) NOT NULL,
            child_id INTEGER NOT NULL REFERENCES children(id),
            observation TEXT NOT NULL,
            created_at TIMESTAMP WITH TIME ZONE NOT NULL DEFAULT CURRENT_TIMESTAMP
        );
        CREATE INDEX ix_daily_child_observations_date ON daily_child_observations (date);
        CREATE INDEX ix_daily_child_observations_child_id ON daily_child_observations (child_id);
        """
    )

    op.execute(
        """
        CREATE TABLE observations (
            id SERIAL PRIMARY KEY,
            child_id INTEGER NOT NULL REFERENCES children(id),
            date VARCHAR(10) NOT NULL,
            time VARCHAR(5),
            domain VARCHAR(20) NOT NULL,
            tags JSONB NOT NULL DEFAULT '[]'::jsonb,
            summary TEXT NOT NULL,
            detail TEXT,
            media JSONB NOT NULL DEFAULT '[]'::jsonb,
            author VARCHAR(100) NOT NULL,
            follow_ups JSONB NOT NULL DEFAULT '[]'::jsonb,
            linked_to_report BOOLEAN NOT NULL DEFAULT FALSE,
            created_at TIMESTAMP WITH TIME ZONE NOT NULL DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP WITH TIME ZONE NOT NULL DEFAULT CURRENT_TIMESTAMP
        );
        CREATE INDEX ix_observations_child_id ON observations (child_id);
        CREATE INDEX ix_observations_date ON observations (date);
        """
    )

    op.execute(
        """
        CREATE TABLE observation_logs (
            id SERIAL PRIMARY KEY,
            child_id INTEGER NOT NULL REFERENCES children(id),
            month VARCHAR(7) NOT NULL,
            keywords TEXT NOT NULL,
            content TEXT NOT NULL,
            created_at TIMESTAMP WITH TIME ZONE NOT NULL DEFAULT CURRENT_TIMESTAMP
        );
        CREATE INDEX ix_observation_logs_child_id ON observation_logs (child_id);
        """
    )

    op.execute(
        """
        CREATE TABLE development_evaluations (
            id SERIAL PRIMARY KEY,
            child_id INTEGER NOT NULL REFERENCES children(id),
            period VARCHAR(100) NOT NULL,
            overall_characteristics TEXT NOT NULL,
            parent_message TEXT NOT NULL,
            observations TEXT,
            age_at_evaluation VARCHAR(20),
            created_at TIMESTAMP WITH TIME ZONE NOT NULL DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP WITH TIME ZONE
        );
        CREATE INDEX ix_development_evaluations_child_id ON development_evaluations (child_id);
        """
    )

    op.execute(
        """
        CREATE TABLE client_state (
            key VARCHAR(200) PRIMARY KEY,
            value JSONB NOT NULL,
            updated_at TIMESTAMP WITH TIME ZONE NOT NULL DEFAULT CURRENT_TIMESTAMP
        );
        """
    )


def downgrade() -> None:
    op.execute(
        """
        DROP TABLE IF EXISTS client_state;
        DROP TABLE IF EXISTS development_evaluations;
        DROP TABLE IF EXISTS observation_logs;
        DROP TABLE IF EXISTS observations;
        DROP TABLE IF EXISTS daily_child_observations;
        DROP TABLE IF EXISTS childcare_logs;
        DROP TABLE IF EXISTS activity_plans;
        DROP TABLE IF EXISTS children;
        DROP TABLE IF EXISTS classes;
        """
    )
