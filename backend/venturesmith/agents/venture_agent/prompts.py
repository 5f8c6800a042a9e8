"""Prompt templates for the venture artifact generator.

System + User prompt separation. Output is always valid JSON.
JSON enforcement is handled by response_format in the centralized openai_client.

Each journey task has one TaskPrompt: a short instruction and the top-level
keys its JSON answer must contain.  Keys follow the shapes the wizard UI
renders for that task.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

from ...journey import TaskID

SYSTEM_PROMPT = """You are VentureSmith, an experienced startup operator and advisor.

ROLE:
- You help a founder turn one business idea into concrete, venture-ready artifacts.
- You build on the artifacts the founder has already produced; never contradict them.
- You are specific to the idea. No generic filler, no placeholder text.

OUTPUT FORMAT:
You MUST respond with a single JSON object. No markdown, no explanation, no prose.
The object MUST contain every key listed under REQUIRED KEYS."""


@dataclass(frozen=True)
class TaskPrompt:
    instruction: str
    required_keys: Tuple[str, ...]
    max_tokens: int = 3000


T = TaskID

TASK_PROMPTS: Dict[str, TaskPrompt] = {
    T.BRAINSTORM_IDEA.value: TaskPrompt(
        "Refine the raw idea into a sharper concept and list the strongest angles to pursue.",
        ("refinedIdea", "keyFeatures", "targetAudience", "uniqueValueProposition"),
    ),
    T.MARKET_PULSE_CHECK.value: TaskPrompt(
        "Give a quick read on market demand, timing and sentiment for the refined idea.",
        ("overallSentiment", "demandScore", "keyTrends", "risks"),
    ),
    T.DEFINE_MISSION_VISION.value: TaskPrompt(
        "Write a mission statement, a vision statement and the core values of the company.",
        ("mission", "vision", "coreValues"),
    ),
    T.GENERATE_NAME_IDENTITY.value: TaskPrompt(
        "Propose a company name, tagline, brand voice and color palette.",
        ("companyName", "tagline", "brandVoice", "colorPalette"),
    ),
    T.SCORECARD.value: TaskPrompt(
        "Score the idea 0-100 on market size, feasibility and innovation, each with a justification.",
        ("marketSize", "feasibility", "innovation", "overallScore"),
    ),
    T.BUSINESS_PLAN.value: TaskPrompt(
        "Write a complete business plan.",
        (
            "executiveSummary",
            "companyDescription",
            "productsAndServices",
            "marketAnalysis",
            "marketingAndSalesStrategy",
            "organizationAndManagement",
            "financialProjections",
        ),
        max_tokens=5000,
    ),
    T.PITCH_DECK.value: TaskPrompt(
        "Outline a 10-slide investor pitch deck and a short spoken script.",
        ("script", "slides"),
    ),
    T.MARKET_RESEARCH.value: TaskPrompt(
        "Summarize the market landscape from the web research, name the main competitors "
        "and the trends that matter.",
        ("summary", "competitors", "trends"),
    ),
    T.COMPETITOR_MATRIX.value: TaskPrompt(
        "Build a competitor matrix of 3-4 competitors with key features, audience, strengths and weaknesses.",
        ("matrix",),
    ),
    T.GENERATE_CUSTOMER_PERSONAS.value: TaskPrompt(
        "Describe 4 ideal customer personas with demographics, goals, pain points and motivations.",
        ("personas",),
    ),
    T.GENERATE_INTERVIEW_SCRIPTS.value: TaskPrompt(
        "Write one customer interview script per persona: introduction, problem discovery, solution validation, wrap-up.",
        ("scripts",),
    ),
    T.VALIDATE_PROBLEM.value: TaskPrompt(
        "Simulate interviews with 4 potential customers and report what validates or challenges the problem.",
        ("simulations", "summary"),
    ),
    T.AI_MENTOR.value: TaskPrompt(
        "Act as a seasoned mentor: give candid strengths, weaknesses and suggestions.",
        ("strengths", "weaknesses", "suggestions"),
    ),
    T.USER_FLOW_DIAGRAMS.value: TaskPrompt(
        "Design the primary user flow as a graph of screens/actions.",
        ("nodes", "edges"),
    ),
    T.AI_WIREFRAMING.value: TaskPrompt(
        "Produce a single-file HTML wireframe (Tailwind classes allowed) of the core screen.",
        ("code",),
        max_tokens=6000,
    ),
    T.WEBSITE.value: TaskPrompt(
        "Produce a single-file HTML landing page prototype for the product.",
        ("code",),
        max_tokens=6000,
    ),
    T.GENERATE_TECH_STACK.value: TaskPrompt(
        "Recommend a tech stack by category, each technology with a justification.",
        ("stack",),
    ),
    T.GENERATE_DATABASE_SCHEMA.value: TaskPrompt(
        "Design the database schema as a graph of tables (nodes) and relations (edges).",
        ("nodes", "edges"),
    ),
    T.GENERATE_API_ENDPOINTS.value: TaskPrompt(
        "List the REST API endpoints the product needs, with method, path and purpose.",
        ("endpoints",),
    ),
    T.GENERATE_DEVELOPMENT_ROADMAP.value: TaskPrompt(
        "Plan the development roadmap as phases of epics with tasks.",
        ("roadmap",),
    ),
    T.ESTIMATE_COSTS.value: TaskPrompt(
        "Estimate monthly cloud costs per service at launch, growth and scale stages.",
        ("costs", "summary"),
    ),
    T.PRICING_STRATEGY.value: TaskPrompt(
        "Propose pricing models, each with tiers, prices and features; mark the recommended tier.",
        ("models",),
    ),
    T.MARKETING_COPY.value: TaskPrompt(
        "Write taglines, social media posts, ad copy and a launch email campaign.",
        ("taglines", "socialMediaPosts", "adCopy", "emailCampaign"),
    ),
    T.PRE_LAUNCH_WAITLIST.value: TaskPrompt(
        "Produce a single-file HTML pre-launch waitlist page.",
        ("code",),
        max_tokens=6000,
    ),
    T.PRODUCT_HUNT_KIT.value: TaskPrompt(
        "Build a Product Hunt launch kit.",
        (
            "taglines",
            "makersComment",
            "tweetSequence",
            "visualAssetIdeas",
            "announcementEmail",
            "linkedinPost",
            "thankYouTweet",
        ),
    ),
    T.PRESS_RELEASE.value: TaskPrompt(
        "Draft a launch press release.",
        ("headline", "dateline", "introduction", "body", "quote", "aboutUs", "contactEmail"),
    ),
    T.GROWTH_METRICS.value: TaskPrompt(
        "Identify the key growth metrics (AARRR) to track, grouped by category.",
        ("title", "introduction", "metrics"),
    ),
    T.AB_TEST_IDEAS.value: TaskPrompt(
        "Brainstorm A/B test ideas, each with hypothesis, description and two variations.",
        ("tests",),
    ),
    T.SEO_STRATEGY.value: TaskPrompt(
        "Build an SEO strategy: keyword clusters and content pillars.",
        ("keywordClusters", "contentPillars"),
    ),
    T.PROCESS_AUTOMATION.value: TaskPrompt(
        "Map the core business processes and the automation potential of each step.",
        ("processes",),
    ),
    T.DRAFT_JOB_DESCRIPTIONS.value: TaskPrompt(
        "Draft job descriptions for the first key hires.",
        ("jobDescriptions",),
    ),
    T.INVESTOR_MATCHING.value: TaskPrompt(
        "From the web research, match investors (firms or angels) that fit the venture, "
        "each with focus, stage, a match rationale and the source URL when known.",
        ("investors",),
    ),
    T.DUE_DILIGENCE_CHECKLIST.value: TaskPrompt(
        "Prepare a due diligence checklist grouped by category; every item starts uncompleted.",
        ("checklist",),
    ),
    T.AI_PITCH_COACH.value: TaskPrompt(
        "Review the pitch: score delivery readiness and list improvements and likely investor questions.",
        ("overallScore", "strengths", "improvements", "investorQuestions"),
    ),
}

del T

# Cap on the amount of prior-artifact JSON placed in one prompt.
_CONTEXT_CHAR_LIMIT = 12000


def _render_context(context: Mapping[str, Any]) -> str:
    if not context:
        return "(no earlier artifacts)"
    text = json.dumps(context, indent=2, ensure_ascii=False, default=str)
    if len(text) > _CONTEXT_CHAR_LIMIT:
        text = text[:_CONTEXT_CHAR_LIMIT] + "\n... (truncated)"
    return text


def _render_research(research: Optional[Sequence[Mapping[str, str]]]) -> str:
    if research is None:
        return ""
    if not research:
        return (
            "\nWEB RESEARCH:\n"
            "(live search unavailable; rely on your own knowledge and say so where figures are estimates)\n"
        )
    lines = [
        "\nWEB RESEARCH (live search results; ground the answer on these and cite them by [n]):"
    ]
    for n, item in enumerate(research, start=1):
        lines.append(f"[{n}] {item.get('title', '')} ({item.get('url', '')})\n{item.get('content', '')}")
    return "\n".join(lines) + "\n"


def build_task_prompt(
    task_id: str,
    *,
    task_name: str,
    venture_name: str,
    idea: str,
    context: Mapping[str, Any],
    research: Optional[Sequence[Mapping[str, str]]] = None,
) -> str:
    """Build the user prompt for one journey task.

    `research` is None for LLM-only tasks; an empty list means the task is
    search-grounded but no live results were available.
    """
    task_prompt = TASK_PROMPTS[task_id]
    keys = "\n".join(f"- {k}" for k in task_prompt.required_keys)

    return f"""TASK: {task_name}

VENTURE: {venture_name}
IDEA: {idea}

EARLIER ARTIFACTS (JSON, keyed by task):
{_render_context(context)}
{_render_research(research)}
INSTRUCTION:
{task_prompt.instruction}

REQUIRED KEYS:
{keys}

Return ONLY the JSON object."""
