"""Static phase / task table for the venture-building journey.

This module is the SINGLE SOURCE OF TRUTH for task order, task names, the
venture-record field backing each task, and the prerequisites that gate the
generate action. Reused by:
  - the journey graph and wizard session
  - the artifact generator (prompt lookup, context assembly)
  - the Venture ORM model (one column per task field)

LOCKED ORDER: reordering tasks changes which tasks existing ventures have
unlocked. Append new tasks; never shuffle old ones.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Tuple


class TaskID(str, Enum):
    # Phase 1
    BRAINSTORM_IDEA = "brainstormIdea"
    MARKET_PULSE_CHECK = "marketPulseCheck"
    DEFINE_MISSION_VISION = "defineMissionVision"
    # Phase 2
    GENERATE_NAME_IDENTITY = "generateNameIdentity"
    SCORECARD = "scorecard"
    BUSINESS_PLAN = "businessPlan"
    PITCH_DECK = "pitchDeck"
    # Phase 3
    MARKET_RESEARCH = "marketResearch"
    COMPETITOR_MATRIX = "competitorMatrix"
    GENERATE_CUSTOMER_PERSONAS = "generateCustomerPersonas"
    # Phase 4
    GENERATE_INTERVIEW_SCRIPTS = "generateInterviewScripts"
    VALIDATE_PROBLEM = "validateProblem"
    AI_MENTOR = "aiMentor"
    # Phase 5
    USER_FLOW_DIAGRAMS = "userFlowDiagrams"
    AI_WIREFRAMING = "aiWireframing"
    WEBSITE = "website"
    # Phase 6
    GENERATE_TECH_STACK = "generateTechStack"
    GENERATE_DATABASE_SCHEMA = "generateDatabaseSchema"
    GENERATE_API_ENDPOINTS = "generateAPIEndpoints"
    GENERATE_DEVELOPMENT_ROADMAP = "generateDevelopmentRoadmap"
    ESTIMATE_COSTS = "estimateCosts"
    # Phase 7
    PRICING_STRATEGY = "pricingStrategy"
    MARKETING_COPY = "marketingCopy"
    PRE_LAUNCH_WAITLIST = "preLaunchWaitlist"
    # Phase 8
    PRODUCT_HUNT_KIT = "productHuntKit"
    PRESS_RELEASE = "pressRelease"
    # Phase 9
    GROWTH_METRICS = "growthMetrics"
    AB_TEST_IDEAS = "abTestIdeas"
    SEO_STRATEGY = "seoStrategy"
    # Phase 10
    PROCESS_AUTOMATION = "processAutomation"
    DRAFT_JOB_DESCRIPTIONS = "draftJobDescriptions"
    # Phase 11
    INVESTOR_MATCHING = "investorMatching"
    DUE_DILIGENCE_CHECKLIST = "dueDiligenceChecklist"
    AI_PITCH_COACH = "aiPitchCoach"


@dataclass(frozen=True)
class Task:
    """One generative step, backed by a single venture-record field."""

    id: str
    name: str
    field: str
    requires: Tuple[str, ...] = ()

    def is_complete(self, record: Mapping[str, Any]) -> bool:
        """Binary completion: the backing field is present and non-empty."""
        value = record.get(self.field)
        if value is None:
            return False
        if isinstance(value, str):
            return bool(value.strip())
        return bool(value)


@dataclass(frozen=True)
class Phase:
    id: str
    name: str
    tasks: Tuple[Task, ...] = field(default_factory=tuple)


T = TaskID

PHASES: Tuple[Phase, ...] = (
    Phase(
        id="phase-1",
        name="Phase 1: Spark & Ideation",
        tasks=(
            Task(T.BRAINSTORM_IDEA, "Brainstorm & Refine Idea", "brainstorm_result"),
            Task(
                T.MARKET_PULSE_CHECK,
                "Market Pulse Check",
                "market_pulse",
                requires=(T.BRAINSTORM_IDEA,),
            ),
            Task(
                T.DEFINE_MISSION_VISION,
                "Define Mission & Vision",
                "mission_vision",
                requires=(T.BRAINSTORM_IDEA,),
            ),
        ),
    ),
    Phase(
        id="phase-2",
        name="Phase 2: Foundation & Blueprint",
        tasks=(
            Task(
                T.GENERATE_NAME_IDENTITY,
                "Generate Name & Brand Identity",
                "brand_identity",
                requires=(T.BRAINSTORM_IDEA, T.MARKET_PULSE_CHECK, T.DEFINE_MISSION_VISION),
            ),
            # Legacy field name kept from the first dashboard release.
            Task(T.SCORECARD, "Review Your Scorecard", "dashboard"),
            Task(T.BUSINESS_PLAN, "Review Your Business Plan", "business_plan"),
            Task(
                T.PITCH_DECK,
                "Review Your Pitch Deck",
                "pitch_deck",
                requires=(T.BUSINESS_PLAN,),
            ),
        ),
    ),
    Phase(
        id="phase-3",
        name="Phase 3: Market Research",
        tasks=(
            Task(T.MARKET_RESEARCH, "Deep-Dive Market Analysis", "market_research"),
            Task(
                T.COMPETITOR_MATRIX,
                "Competitor Matrix",
                "competitor_matrix",
                requires=(T.MARKET_RESEARCH,),
            ),
            Task(
                T.GENERATE_CUSTOMER_PERSONAS,
                "Generate Customer Personas",
                "customer_personas",
                requires=(
                    T.BRAINSTORM_IDEA,
                    T.MARKET_RESEARCH,
                    T.DEFINE_MISSION_VISION,
                    T.GENERATE_NAME_IDENTITY,
                ),
            ),
        ),
    ),
    Phase(
        id="phase-4",
        name="Phase 4: Customer Validation",
        tasks=(
            Task(
                T.GENERATE_INTERVIEW_SCRIPTS,
                "Generate Interview Scripts",
                "interview_scripts",
                requires=(T.GENERATE_CUSTOMER_PERSONAS,),
            ),
            Task(
                T.VALIDATE_PROBLEM,
                "Validate Problem with 4 Potential Customers",
                "customer_validation",
            ),
            Task(T.AI_MENTOR, "Get Feedback from AI Mentor", "ai_mentor"),
        ),
    ),
    Phase(
        id="phase-5",
        name="Phase 5: Prototyping",
        tasks=(
            Task(
                T.USER_FLOW_DIAGRAMS,
                "User Flow Diagrams",
                "user_flow_diagram",
                requires=(T.BRAINSTORM_IDEA, T.GENERATE_CUSTOMER_PERSONAS),
            ),
            Task(
                T.AI_WIREFRAMING,
                "AI Wireframing",
                "ai_wireframe",
                requires=(
                    T.BRAINSTORM_IDEA,
                    T.GENERATE_CUSTOMER_PERSONAS,
                    T.USER_FLOW_DIAGRAMS,
                    T.GENERATE_NAME_IDENTITY,
                    T.DEFINE_MISSION_VISION,
                ),
            ),
            Task(T.WEBSITE, "Website Prototype", "website"),
        ),
    ),
    Phase(
        id="phase-6",
        name="Phase 6: Technical Blueprint & Planning",
        tasks=(
            Task(T.GENERATE_TECH_STACK, "Generate Tech Stack", "tech_stack"),
            Task(
                T.GENERATE_DATABASE_SCHEMA,
                "Generate Database Schema",
                "database_schema",
                requires=(T.BRAINSTORM_IDEA, T.USER_FLOW_DIAGRAMS),
            ),
            Task(
                T.GENERATE_API_ENDPOINTS,
                "Generate API Endpoints",
                "api_endpoints",
                requires=(T.BRAINSTORM_IDEA, T.USER_FLOW_DIAGRAMS, T.GENERATE_DATABASE_SCHEMA),
            ),
            Task(
                T.GENERATE_DEVELOPMENT_ROADMAP,
                "Generate Development Roadmap",
                "development_roadmap",
                requires=(
                    T.BRAINSTORM_IDEA,
                    T.GENERATE_TECH_STACK,
                    T.GENERATE_DATABASE_SCHEMA,
                    T.GENERATE_API_ENDPOINTS,
                ),
            ),
            Task(
                T.ESTIMATE_COSTS,
                "Estimate Cloud Costs",
                "cost_estimate",
                requires=(T.GENERATE_TECH_STACK, T.GENERATE_DATABASE_SCHEMA, T.GENERATE_API_ENDPOINTS),
            ),
        ),
    ),
    Phase(
        id="phase-7",
        name="Phase 7: Go-to-Market Strategy",
        tasks=(
            Task(
                T.PRICING_STRATEGY,
                "AI Pricing Strategy",
                "pricing_strategy",
                requires=(T.BUSINESS_PLAN, T.GENERATE_CUSTOMER_PERSONAS, T.COMPETITOR_MATRIX),
            ),
            Task(
                T.MARKETING_COPY,
                "Generate Marketing Copy",
                "marketing_copy",
                requires=(T.GENERATE_NAME_IDENTITY, T.GENERATE_CUSTOMER_PERSONAS, T.PRICING_STRATEGY),
            ),
            Task(
                T.PRE_LAUNCH_WAITLIST,
                "Build Pre-Launch Waitlist Page",
                "pre_launch_waitlist",
                requires=(T.GENERATE_NAME_IDENTITY, T.MARKETING_COPY),
            ),
        ),
    ),
    Phase(
        id="phase-8",
        name="Phase 8: Launch",
        tasks=(
            Task(
                T.PRODUCT_HUNT_KIT,
                "Product Hunt Launch Kit",
                "product_hunt_kit",
                requires=(
                    T.BUSINESS_PLAN,
                    T.MARKETING_COPY,
                    T.GENERATE_NAME_IDENTITY,
                    T.DEFINE_MISSION_VISION,
                ),
            ),
            Task(
                T.PRESS_RELEASE,
                "Draft Press Release",
                "press_release",
                requires=(T.BUSINESS_PLAN, T.GENERATE_NAME_IDENTITY),
            ),
        ),
    ),
    Phase(
        id="phase-9",
        name="Phase 9: Growth",
        tasks=(
            Task(T.GROWTH_METRICS, "Identify Growth Metrics", "growth_metrics"),
            Task(
                T.AB_TEST_IDEAS,
                "Brainstorm A/B Test Ideas",
                "ab_test_ideas",
                requires=(T.BRAINSTORM_IDEA,),
            ),
            Task(
                T.SEO_STRATEGY,
                "Generate SEO Strategy",
                "seo_strategy",
                requires=(T.BRAINSTORM_IDEA, T.MARKETING_COPY, T.GENERATE_CUSTOMER_PERSONAS),
            ),
        ),
    ),
    Phase(
        id="phase-10",
        name="Phase 10: Operations",
        tasks=(
            Task(
                T.PROCESS_AUTOMATION,
                "Map Processes for Automation",
                "process_automation",
                requires=(T.BUSINESS_PLAN, T.GENERATE_DEVELOPMENT_ROADMAP),
            ),
            Task(
                T.DRAFT_JOB_DESCRIPTIONS,
                "Draft Job Descriptions",
                "draft_job_descriptions",
                requires=(T.BUSINESS_PLAN, T.GENERATE_DEVELOPMENT_ROADMAP),
            ),
        ),
    ),
    Phase(
        id="phase-11",
        name="Phase 11: Fundraising & Investor Relations",
        tasks=(
            Task(
                T.INVESTOR_MATCHING,
                "AI Investor Matching",
                "investor_matching",
                requires=(T.BUSINESS_PLAN, T.PITCH_DECK, T.MARKET_RESEARCH),
            ),
            Task(
                T.DUE_DILIGENCE_CHECKLIST,
                "Due Diligence Checklist",
                "due_diligence_checklist",
            ),
            Task(
                T.AI_PITCH_COACH,
                "AI Pitch Coach",
                "ai_pitch_coach",
                requires=(T.BUSINESS_PLAN, T.PITCH_DECK),
            ),
        ),
    ),
)

del T

# Record fields backed by a task, in journey order.
ARTIFACT_FIELDS: Tuple[str, ...] = tuple(t.field for p in PHASES for t in p.tasks)
