import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.types import CHAR, TypeDecorator

from ..database import Base


class GUID(TypeDecorator):
    """Platform-independent UUID type.

    Uses CHAR(36) to store UUIDs as strings, compatible with all backends
    including SQLite.
    """

    impl = CHAR
    cache_ok = True

    def load_dialect_impl(self, dialect):
        return dialect.type_descriptor(CHAR(36))

    def process_bind_param(self, value, dialect):
        if value is not None:
            return str(value)
        return value

    def process_result_value(self, value, dialect):
        if value is not None:
            return uuid.UUID(value)
        return value


class Venture(Base):
    """One user venture.

    Every artifact column holds the serialized output of one journey task
    (see journey/tasks.py for the task -> column mapping). NULL means
    "not generated yet". Columns must stay in lockstep with ARTIFACT_FIELDS.
    """

    __tablename__ = "ventures"

    id = Column(GUID(), primary_key=True, default=uuid.uuid4)
    user_id = Column(GUID(), ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False, default="Untitled Venture")
    idea = Column(Text, nullable=False)
    current_task = Column(String(64), nullable=True, default=None)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Phase 1: Spark & Ideation
    brainstorm_result = Column(Text, nullable=True, default=None)
    market_pulse = Column(Text, nullable=True, default=None)
    mission_vision = Column(Text, nullable=True, default=None)

    # Phase 2: Foundation & Blueprint
    brand_identity = Column(Text, nullable=True, default=None)
    dashboard = Column(Text, nullable=True, default=None)  # scorecard
    business_plan = Column(Text, nullable=True, default=None)
    pitch_deck = Column(Text, nullable=True, default=None)

    # Phase 3: Market Research
    market_research = Column(Text, nullable=True, default=None)
    competitor_matrix = Column(Text, nullable=True, default=None)
    customer_personas = Column(Text, nullable=True, default=None)

    # Phase 4: Customer Validation
    interview_scripts = Column(Text, nullable=True, default=None)
    customer_validation = Column(Text, nullable=True, default=None)
    ai_mentor = Column(Text, nullable=True, default=None)

    # Phase 5: Prototyping
    user_flow_diagram = Column(Text, nullable=True, default=None)
    ai_wireframe = Column(Text, nullable=True, default=None)
    website = Column(Text, nullable=True, default=None)

    # Phase 6: Technical Blueprint & Planning
    tech_stack = Column(Text, nullable=True, default=None)
    database_schema = Column(Text, nullable=True, default=None)
    api_endpoints = Column(Text, nullable=True, default=None)
    development_roadmap = Column(Text, nullable=True, default=None)
    cost_estimate = Column(Text, nullable=True, default=None)

    # Phase 7: Go-to-Market Strategy
    pricing_strategy = Column(Text, nullable=True, default=None)
    marketing_copy = Column(Text, nullable=True, default=None)
    pre_launch_waitlist = Column(Text, nullable=True, default=None)

    # Phase 8: Launch
    product_hunt_kit = Column(Text, nullable=True, default=None)
    press_release = Column(Text, nullable=True, default=None)

    # Phase 9: Growth
    growth_metrics = Column(Text, nullable=True, default=None)
    ab_test_ideas = Column(Text, nullable=True, default=None)
    seo_strategy = Column(Text, nullable=True, default=None)

    # Phase 10: Operations
    process_automation = Column(Text, nullable=True, default=None)
    draft_job_descriptions = Column(Text, nullable=True, default=None)

    # Phase 11: Fundraising & Investor Relations
    investor_matching = Column(Text, nullable=True, default=None)
    due_diligence_checklist = Column(Text, nullable=True, default=None)
    ai_pitch_coach = Column(Text, nullable=True, default=None)

    owner = relationship("User", back_populates="ventures")
